from datetime import date

import pytest

from src.tracker.coordinator import HabitMutationCoordinator
from src.tracker.exceptions import PersistenceError, SyncError
from src.tracker.ledger import find_week
from src.tracker.models import DayStatus, build_habit_draft, build_habit_update
from src.tracker.state import OperationStatus

# Помечаем все тесты в модуле как асинхронные
pytestmark = pytest.mark.asyncio

MONDAY = date(2024, 3, 4)


@pytest.fixture
def coordinator(store, holder) -> HabitMutationCoordinator:
    return HabitMutationCoordinator(store, holder, today_provider=lambda: date(2024, 3, 6))


@pytest.fixture
def seeded(store, habit_factory):
    """Четыре привычки пользователя в хранилище: a, b, c, d."""
    for order, habit_id in enumerate("abcd"):
        store.put_habit(habit_factory(habit_id, order=order, name=habit_id.upper()))
    return store


def day_status(habit, day: date) -> DayStatus:
    return next(entry.status for entry in find_week(habit, day).days if entry.date == day)


async def test_load_replaces_habits(coordinator, seeded):
    state = await coordinator.load()

    assert [habit.id for habit in state.habits] == ["a", "b", "c", "d"]
    assert state.error is None


async def test_load_failure_raises_persistence_error(coordinator, store):
    store.fail_on.add("fetch_habits")

    with pytest.raises(PersistenceError) as exc_info:
        await coordinator.load()

    assert exc_info.value.error_type == "load_failed"
    assert coordinator.state.error is not None


# --- Сначала хранилище, затем локальное состояние ---


async def test_create_assigns_next_order_and_current_week(coordinator, store):
    first = await coordinator.create(build_habit_draft(name="Run", tags=["Health"]))
    second = await coordinator.create(build_habit_draft(name="Read", frequency="custom"))

    assert (first.order, second.order) == (1, 2)
    assert second.target == 3
    assert [record.start_date for record in first.weekly_progress] == [MONDAY]
    assert {entry.status for entry in first.weekly_progress[0].days} == {DayStatus.NEUTRAL}
    assert [habit.id for habit in coordinator.state.habits] == [first.id, second.id]
    assert store.habits[first.id].user_id == "alice"
    assert coordinator.last_operation.status == OperationStatus.CONFIRMED


async def test_create_after_delete_does_not_reuse_order(coordinator):
    first = await coordinator.create(build_habit_draft(name="Run"))
    second = await coordinator.create(build_habit_draft(name="Read"))
    await coordinator.delete(first.id)

    third = await coordinator.create(build_habit_draft(name="Write"))

    assert third.order == second.order + 1


async def test_create_failure_leaves_state_untouched(coordinator, store):
    store.fail_on.add("add_habit")

    with pytest.raises(PersistenceError) as exc_info:
        await coordinator.create(build_habit_draft(name="Run"))

    assert exc_info.value.error_type == "create_failed"
    assert coordinator.state.habits == ()
    assert coordinator.state.error is not None
    assert coordinator.last_operation.status == OperationStatus.INVALIDATED


async def test_update_fields(coordinator, seeded):
    await coordinator.load()

    updated = await coordinator.update_fields("b", build_habit_update(name="Bee", target=5))

    assert (updated.name, updated.target) == ("Bee", 5)
    assert coordinator.state.get_habit("b").name == "Bee"
    assert seeded.habits["b"].name == "Bee"


async def test_update_without_changes_skips_store(coordinator, seeded):
    await coordinator.load()
    seeded.calls.clear()

    habit = await coordinator.update_fields("b", build_habit_update())

    assert habit is coordinator.state.get_habit("b")
    assert seeded.calls == []


async def test_update_failure_leaves_state_untouched(coordinator, seeded):
    await coordinator.load()
    seeded.fail_on.add("update_habit")

    with pytest.raises(PersistenceError):
        await coordinator.update_fields("b", build_habit_update(name="Bee"))

    assert coordinator.state.get_habit("b").name == "B"


async def test_delete(coordinator, seeded):
    await coordinator.load()

    removed = await coordinator.delete("c")

    assert removed.id == "c"
    assert [habit.id for habit in coordinator.state.habits] == ["a", "b", "d"]
    assert "c" not in seeded.habits


async def test_delete_failure_keeps_habit(coordinator, seeded):
    await coordinator.load()
    seeded.fail_on.add("delete_habit")

    with pytest.raises(PersistenceError):
        await coordinator.delete("c")

    assert coordinator.state.find_habit("c") is not None


async def test_unknown_habit_is_skipped(coordinator, seeded):
    await coordinator.load()
    seeded.calls.clear()

    assert await coordinator.update_fields("missing", build_habit_update(name="X")) is None
    assert await coordinator.delete("missing") is None
    assert await coordinator.set_status("missing", MONDAY, DayStatus.COMPLETED) is None
    assert seeded.calls == []


# --- Оптимистичные операции ---


async def test_set_status_persists_whole_ledger(coordinator, seeded):
    await coordinator.load()

    updated = await coordinator.set_status("a", "2024-03-05", DayStatus.COMPLETED)

    assert day_status(updated, date(2024, 3, 5)) == DayStatus.COMPLETED
    assert day_status(seeded.habits["a"], date(2024, 3, 5)) == DayStatus.COMPLETED
    assert coordinator.state.get_habit("a") == updated
    assert coordinator.last_operation.status == OperationStatus.CONFIRMED


async def test_set_status_failure_reloads_authoritative_state(coordinator, seeded, habit_factory):
    """После отказа хранилища предварительный статус заменяется данными хранилища."""
    seeded.put_habit(habit_factory("a", order=0, name="A", days={MONDAY: DayStatus.FAILED}))
    await coordinator.load()
    seeded.fail_on.add("update_habit")

    with pytest.raises(SyncError) as exc_info:
        await coordinator.set_status("a", MONDAY, DayStatus.COMPLETED)

    assert exc_info.value.error_type == "set_status_failed"
    assert day_status(coordinator.state.get_habit("a"), MONDAY) == DayStatus.FAILED
    assert coordinator.state.error is not None
    assert coordinator.last_operation.status == OperationStatus.INVALIDATED


async def test_set_status_failure_with_failed_reload_keeps_tentative_state(coordinator, seeded):
    await coordinator.load()
    seeded.fail_on.update({"update_habit", "fetch_habits"})

    with pytest.raises(SyncError) as exc_info:
        await coordinator.set_status("a", MONDAY, DayStatus.COMPLETED)

    assert "Перезагрузка не удалась" in exc_info.value.message
    assert day_status(coordinator.state.get_habit("a"), MONDAY) == DayStatus.COMPLETED


async def test_set_status_invalid_input_is_noop(coordinator, seeded):
    await coordinator.load()
    seeded.calls.clear()

    habit = await coordinator.set_status("a", "yesterday", DayStatus.COMPLETED)

    assert habit is coordinator.state.get_habit("a")
    assert seeded.calls == []


async def test_reorder_moves_habit_down(coordinator, seeded):
    """Привычка занимает индекс цели, промежуточные сдвигаются на одну позицию."""
    await coordinator.load()

    reordered = await coordinator.reorder("a", "c")

    assert [habit.id for habit in reordered] == ["b", "c", "a", "d"]
    assert [habit.order for habit in reordered] == [0, 1, 2, 3]
    assert {habit_id: habit.order for habit_id, habit in seeded.habits.items()} == {"a": 2, "b": 0, "c": 1, "d": 3}


async def test_reorder_moves_habit_up(coordinator, seeded):
    await coordinator.load()

    reordered = await coordinator.reorder("d", "b")

    assert [habit.id for habit in reordered] == ["a", "d", "b", "c"]
    assert [habit.id for habit in coordinator.state.habits] == ["a", "d", "b", "c"]


async def test_reorder_failure_restores_order(coordinator, seeded):
    await coordinator.load()
    seeded.fail_on.add("commit_order_batch")

    with pytest.raises(SyncError):
        await coordinator.reorder("a", "d")

    assert [habit.id for habit in coordinator.state.habits] == ["a", "b", "c", "d"]
    assert [habit.order for habit in coordinator.state.habits] == [0, 1, 2, 3]


async def test_reorder_to_same_position_skips_store(coordinator, seeded):
    await coordinator.load()
    seeded.calls.clear()

    reordered = await coordinator.reorder("b", "b")

    assert [habit.id for habit in reordered] == ["a", "b", "c", "d"]
    assert seeded.calls == []


async def test_reorder_unknown_id(coordinator, seeded):
    await coordinator.load()

    assert await coordinator.reorder("a", "missing") is None
