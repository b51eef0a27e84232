"""
Недельный журнал статусов привычки.

Журнал - упорядоченная (новые недели сначала) коллекция недельных записей привычки.
Уникальность недели обеспечивается при создании записи ("получить или создать"),
а не последующим слиянием дубликатов. Все функции возвращают новые значения привычки.
"""

from datetime import date, datetime
from typing import Iterable, Iterator

from .logging import tracker_log as log
from .models import DayEntry, DayStatus, Habit, WeeklyRecord
from .week_window import parse_day, week_dates, week_start


def new_week(day: date) -> WeeklyRecord:
    """Создает запись недели, содержащей `day`, со всеми днями в статусе NEUTRAL."""
    start = week_start(day)
    return WeeklyRecord(
        start_date=start,
        days=tuple(DayEntry(date=week_day, status=DayStatus.NEUTRAL) for week_day in week_dates(start)),
    )


def find_week(habit: Habit, day: date) -> WeeklyRecord | None:
    """Ищет запись недели, содержащей `day`, не создавая ее."""
    start = week_start(day)
    return next((record for record in habit.weekly_progress if record.start_date == start), None)


def sort_weeks(records: Iterable[WeeklyRecord]) -> tuple[WeeklyRecord, ...]:
    """Сортирует записи по убыванию даты начала недели."""
    return tuple(sorted(records, key=lambda record: record.start_date, reverse=True))


def get_or_create_week(habit: Habit, target_date: date) -> tuple[Habit, WeeklyRecord]:
    """
    Возвращает запись недели, содержащей `target_date`, создавая ее при отсутствии.

    Повторные вызовы для дат одной недели не создают дубликатов.

    Args:
        habit: Привычка.
        target_date: Любая дата нужной недели.

    Returns:
        Пару (привычка, запись). Если запись уже была, привычка возвращается без изменений
        (тот же объект), иначе - новое значение с добавленной записью.
    """
    existing = find_week(habit, target_date)
    if existing is not None:
        return habit, existing

    record = new_week(target_date)
    updated_habit = habit.model_copy(update={"weekly_progress": sort_weeks((*habit.weekly_progress, record))})

    log.debug(f"Для привычки ID {habit.id} создана неделя {record.start_date}.")
    return updated_habit, record


def set_day_status(habit: Habit, day: date | datetime | str, status: DayStatus | str) -> Habit:
    """
    Устанавливает статус одного дня привычки.

    Неделя дня находится или создается, в ней заменяется ровно один день;
    остальные недели журнала остаются теми же объектами.

    Некорректная дата или статус - ошибка вызывающего кода; такой вызов ничего не меняет
    и возвращает исходную привычку.

    Args:
        habit: Привычка.
        day: Дата (date или строка YYYY-MM-DD).
        status: Новый статус дня.

    Returns:
        Новое значение привычки (или исходное при некорректных данных).
    """
    try:
        target_date = parse_day(day)
        new_status = DayStatus(status)
    except (TypeError, ValueError) as exc:
        log.warning(f"Статус дня привычки ID {habit.id} не изменен, некорректные данные ({day!r}, {status!r}): {exc}")
        return habit

    habit, record = get_or_create_week(habit, target_date)

    updated_days = tuple(
        entry.model_copy(update={"status": new_status}) if entry.date == target_date else entry
        for entry in record.days
    )
    updated_record = record.model_copy(update={"days": updated_days})

    weekly_progress = tuple(
        updated_record if existing.start_date == record.start_date else existing
        for existing in habit.weekly_progress
    )

    log.debug(f"Привычка ID {habit.id}: день {target_date} -> {new_status.value}.")
    return habit.model_copy(update={"weekly_progress": weekly_progress})


def current_week_view(habit: Habit, today: date) -> WeeklyRecord:
    """Запись текущей недели или синтезированная нейтральная неделя (без добавления в журнал)."""
    return find_week(habit, today) or new_week(today)


def iter_days(habit: Habit) -> Iterator[DayEntry]:
    """Все дни всех недельных записей привычки."""
    for record in habit.weekly_progress:
        yield from record.days
