"""
Календарная арифметика недель и месяцев.

Неделя всегда начинается с понедельника (ISO). Все функции, кроме `today`, чистые.
"""

import calendar
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .logging import tracker_log as log
from .models import DAYS_IN_WEEK

DAY_FORMAT = "%Y-%m-%d"


def week_start(day: date) -> date:
    """
    Возвращает понедельник недели, в которую попадает `day`.

    Идемпотентна: `week_start(week_start(d)) == week_start(d)`.
    """
    if isinstance(day, datetime):
        day = day.date()
    return day - timedelta(days=day.weekday())


def week_end(day: date) -> date:
    """Воскресенье недели, в которую попадает `day`."""
    return week_start(day) + timedelta(days=DAYS_IN_WEEK - 1)


def week_dates(start: date) -> list[date]:
    """7 последовательных дат, начиная с `start`."""
    return [start + timedelta(days=offset) for offset in range(DAYS_IN_WEEK)]


def parse_day(value: date | datetime | str) -> date:
    """
    Приводит значение к дате.

    Args:
        value: Дата, datetime или строка формата YYYY-MM-DD.

    Raises:
        ValueError: Если строка не является корректной датой YYYY-MM-DD.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value, DAY_FORMAT).date()


def format_day(day: date) -> str:
    return day.strftime(DAY_FORMAT)


def month_start(day: date) -> date:
    return day.replace(day=1)


def subtract_months(day: date, months: int) -> date:
    """
    Сдвигает дату на `months` календарных месяцев назад.

    Если в целевом месяце нет такого числа (31 марта -> февраль), берется последний день месяца.
    """
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def today(tz_name: str | None = None) -> date:
    """
    Вычисляет текущую дату ("сегодня") в часовом поясе пользователя.

    Если часовой пояс некорректен, используется UTC.

    Args:
        tz_name: Имя часового пояса IANA (например, "Europe/Moscow").

    Returns:
        Дата "сегодня" для пользователя.
    """
    zone_name = tz_name or "UTC"

    try:
        user_timezone = ZoneInfo(zone_name)
    except (ZoneInfoNotFoundError, ValueError):
        # Опечатка в настройках не должна ронять расчеты, откатываемся к UTC
        log.warning(f"Некорректный часовой пояс '{zone_name}'. Используется UTC по умолчанию.")
        user_timezone = ZoneInfo("UTC")

    return datetime.now(timezone.utc).astimezone(user_timezone).date()
