from datetime import date

from src.tracker.ledger import current_week_view, find_week, get_or_create_week, new_week, set_day_status
from src.tracker.models import DayStatus

MONDAY = date(2024, 3, 4)


def test_new_week_is_neutral():
    record = new_week(date(2024, 3, 7))

    assert record.start_date == MONDAY
    assert [entry.date.day for entry in record.days] == list(range(4, 11))
    assert {entry.status for entry in record.days} == {DayStatus.NEUTRAL}


def test_get_or_create_week_does_not_duplicate(habit_factory):
    """Повторные вызовы для дней одной недели не создают вторую запись."""
    habit = habit_factory()

    habit, first = get_or_create_week(habit, date(2024, 3, 5))
    same_habit, second = get_or_create_week(habit, date(2024, 3, 9))

    assert same_habit is habit
    assert second is first
    assert len(habit.weekly_progress) == 1


def test_weeks_sorted_newest_first(habit_factory):
    habit = habit_factory(
        days={
            date(2024, 2, 20): DayStatus.COMPLETED,
            date(2024, 3, 6): DayStatus.COMPLETED,
            date(2024, 2, 27): DayStatus.FAILED,
        }
    )

    assert [record.start_date for record in habit.weekly_progress] == [
        date(2024, 3, 4),
        date(2024, 2, 26),
        date(2024, 2, 19),
    ]


def test_set_day_status_changes_only_one_day(habit_factory):
    """Меняется ровно один день, остальные недели остаются теми же объектами."""
    habit = habit_factory(days={date(2024, 2, 26): DayStatus.COMPLETED, MONDAY: DayStatus.COMPLETED})
    older_week = find_week(habit, date(2024, 2, 26))

    updated = set_day_status(habit, "2024-03-06", DayStatus.FAILED)

    current = find_week(updated, MONDAY)
    statuses = {entry.date: entry.status for entry in current.days}
    assert statuses[date(2024, 3, 6)] == DayStatus.FAILED
    assert statuses[MONDAY] == DayStatus.COMPLETED
    assert sum(1 for status in statuses.values() if status == DayStatus.NEUTRAL) == 5
    assert find_week(updated, date(2024, 2, 26)) is older_week

    # Исходное значение не изменилось
    assert find_week(habit, MONDAY).days[2].status == DayStatus.NEUTRAL


def test_set_day_status_outside_known_weeks_adds_one_week(habit_factory):
    """Дата вне существующих недель создает ровно одну новую неделю."""
    habit = habit_factory(days={MONDAY: DayStatus.COMPLETED, date(2024, 2, 19): DayStatus.FAILED})
    before = habit.model_dump(mode="json")["weekly_progress"]

    updated = set_day_status(habit, date(2024, 3, 28), DayStatus.COMPLETED)

    assert [record.start_date for record in updated.weekly_progress] == [
        date(2024, 3, 25),
        MONDAY,
        date(2024, 2, 19),
    ]
    assert updated.model_dump(mode="json")["weekly_progress"][1:] == before
    assert updated.weekly_progress[1] is habit.weekly_progress[0]


def test_set_day_status_back_to_neutral(habit_factory):
    habit = habit_factory(days={MONDAY: DayStatus.COMPLETED})

    updated = set_day_status(habit, MONDAY, DayStatus.NEUTRAL)

    assert find_week(updated, MONDAY).days[0].status == DayStatus.NEUTRAL
    assert len(updated.weekly_progress) == 1


def test_set_day_status_ignores_invalid_input(habit_factory):
    """Некорректная дата или статус не меняют привычку."""
    habit = habit_factory()

    assert set_day_status(habit, "not-a-date", DayStatus.COMPLETED) is habit
    assert set_day_status(habit, MONDAY, "done") is habit


def test_current_week_view_does_not_store_week(habit_factory):
    habit = habit_factory()

    view = current_week_view(habit, date(2024, 3, 8))

    assert view.start_date == MONDAY
    assert habit.weekly_progress == ()
