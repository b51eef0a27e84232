"""
Расчет процентов выполнения привычек.

Все функции чистые и синхронные. Вырожденные входные данные (пустой список привычек,
нулевая цель, отсутствие дней в диапазоне) дают 0, а не исключение.

Каждая метрика округляется независимо: агрегаты усредняют неокругленные проценты привычек
и округляют только собственный результат. Округление "половина вверх" (12.5 -> 13).
"""

import math
from datetime import date, timedelta
from enum import StrEnum
from typing import Iterable, NamedTuple, Sequence

from .ledger import current_week_view, iter_days
from .models import DAYS_IN_WEEK, DateRange, DayStatus, Habit, HabitFrequency
from .week_window import subtract_months, week_end, week_start

OVERALL_SLICE_NAME = "Overall"


class TimeRange(StrEnum):
    """Предустановленные окна аналитики."""

    THIS_WEEK = "this_week"
    LAST_WEEK = "last_week"
    MONTH = "month"
    THREE_MONTHS = "three_months"
    CUSTOM = "custom"


class ChartFilter(StrEnum):
    """Режим выборки привычек для графика."""

    ALL = "all"
    SINGLE = "single"
    CATEGORY = "category"


class CompletionSlice(NamedTuple):
    """Пара "выполнено / не выполнено" для одного столбца или сектора графика."""

    name: str
    completed: int
    uncompleted: int


def round_percent(value: float) -> int:
    """Округляет процент до целого по правилу "половина вверх"."""
    return math.floor(value + 0.5)


def _average(values: Sequence[float]) -> float:
    # Среднее пустого набора по соглашению равно 0
    return sum(values) / len(values) if values else 0.0


def _habit_percent(habit: Habit, date_range: DateRange) -> float:
    """Неокругленный процент выполнения привычки в диапазоне."""
    relevant_days = [entry for entry in iter_days(habit) if date_range.contains(entry.date)]
    if not relevant_days:
        return 0.0

    completed = sum(1 for entry in relevant_days if entry.status == DayStatus.COMPLETED)

    # Для ежедневных привычек "полный балл" растет вместе с окном наблюдения,
    # для weekly/custom цель фиксирована и не зависит от длины диапазона
    target = len(relevant_days) if habit.frequency == HabitFrequency.DAILY else habit.target
    if target <= 0:
        return 0.0

    return completed / target * 100


def _category_percent(tag: str, habits: Iterable[Habit], date_range: DateRange) -> float:
    return _average([_habit_percent(habit, date_range) for habit in habits if habit.has_tag(tag)])


def _overall_percent(habits: Iterable[Habit], date_range: DateRange) -> float:
    return _average([_habit_percent(habit, date_range) for habit in habits])


def habit_completion(habit: Habit, date_range: DateRange) -> int:
    """
    Процент выполнения одной привычки в диапазоне дат (обе границы включительно).

    Учитываются только дни, реально присутствующие в недельных записях привычки.
    Для daily цель - количество найденных дней диапазона, для weekly/custom - поле `target`.

    Returns:
        Целое число 0..100 (для weekly/custom может превышать 100 на длинных диапазонах).
    """
    return round_percent(_habit_percent(habit, date_range))


def category_completion(tag: str, habits: Iterable[Habit], date_range: DateRange) -> int:
    """Средний процент выполнения привычек с тегом `tag`; 0, если таких привычек нет."""
    return round_percent(_category_percent(tag, habits, date_range))


def overall_completion(habits: Iterable[Habit], date_range: DateRange) -> int:
    """Средний процент выполнения всех привычек; 0 для пустого списка."""
    return round_percent(_overall_percent(habits, date_range))


def weekly_rollup(habits: Iterable[Habit], week_start_date: date) -> int:
    """Главная метрика дашборда: общий процент выполнения за неделю, содержащую `week_start_date`."""
    start = week_start(week_start_date)
    return overall_completion(habits, DateRange(start, start + timedelta(days=DAYS_IN_WEEK - 1)))


def card_completion(habit: Habit, today: date) -> int:
    """
    Процент выполнения за текущую неделю для карточки привычки.

    Отсутствующая неделя считается полностью нейтральной. Для daily цель - 7 дней
    и результат ограничен сверху 100, для weekly/custom - поле `target` без ограничения.
    """
    record = current_week_view(habit, today)
    completed = sum(1 for entry in record.days if entry.status == DayStatus.COMPLETED)

    if habit.frequency == HabitFrequency.DAILY:
        return min(round_percent(completed / DAYS_IN_WEEK * 100), 100)

    if habit.target <= 0:
        return 0

    return round_percent(completed / habit.target * 100)


def categories(habits: Iterable[Habit]) -> list[str]:
    """Уникальные теги всех привычек в порядке первого появления."""
    return list(dict.fromkeys(tag for habit in habits for tag in habit.tags))


def resolve_range(kind: TimeRange | str, today: date, custom: DateRange | None = None) -> DateRange:
    """
    Превращает предустановленное окно аналитики в диапазон дат.

    Args:
        kind: Тип окна.
        today: Текущая дата пользователя.
        custom: Границы для CUSTOM (переставляются, если перепутаны).
                Если не переданы, используется диапазон из одного дня `today`.

    Returns:
        Диапазон дат (обе границы включительно).
    """
    kind = TimeRange(kind)

    if kind == TimeRange.LAST_WEEK:
        previous = today - timedelta(days=DAYS_IN_WEEK)
        return DateRange(week_start(previous), week_end(previous))

    if kind == TimeRange.MONTH:
        return DateRange(subtract_months(today, 1), today)

    if kind == TimeRange.THREE_MONTHS:
        return DateRange(subtract_months(today, 3), today)

    if kind == TimeRange.CUSTOM:
        if custom is None:
            return DateRange(today, today)
        return DateRange(min(custom.start, custom.end), max(custom.start, custom.end))

    return DateRange(week_start(today), week_end(today))


def _slice(name: str, percent: float) -> CompletionSlice:
    return CompletionSlice(name=name, completed=round_percent(percent), uncompleted=round_percent(100 - percent))


def completion_chart(
    habits: Sequence[Habit],
    date_range: DateRange,
    mode: ChartFilter | str = ChartFilter.ALL,
    selected: str | None = None,
) -> list[CompletionSlice]:
    """
    Данные для графика выполнения.

    Args:
        habits: Привычки пользователя.
        date_range: Диапазон дат.
        mode: ALL - один общий срез; CATEGORY - срез выбранного тега или по срезу на каждый тег;
              SINGLE - срез выбранной привычки (по ID).
        selected: Выбранный тег (CATEGORY) или ID привычки (SINGLE).

    Returns:
        Список срезов; пустой, если выбранная привычка не найдена.
    """
    mode = ChartFilter(mode)

    if mode == ChartFilter.ALL:
        return [_slice(OVERALL_SLICE_NAME, _overall_percent(habits, date_range))]

    if mode == ChartFilter.CATEGORY:
        tags = [selected] if selected else categories(habits)
        return [_slice(tag, _category_percent(tag, habits, date_range)) for tag in tags]

    habit = next((item for item in habits if item.id == selected), None)
    if habit is None:
        return []

    return [_slice(habit.name, _habit_percent(habit, date_range))]
