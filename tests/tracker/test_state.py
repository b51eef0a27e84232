import pytest

from src.tracker.exceptions import NotFoundError
from src.tracker.state import AppState, OperationStatus, OperationToken, StateHolder


def test_token_confirm_path():
    token = OperationToken("set_status", "h1")
    assert token.status == OperationStatus.IDLE

    token.begin()
    assert token.status == OperationStatus.PENDING
    assert not token.is_settled

    token.confirm()
    assert token.status == OperationStatus.CONFIRMED
    assert token.is_settled


def test_token_invalidate_keeps_reason():
    token = OperationToken("reorder").begin()

    token.invalidate("store unavailable")

    assert token.status == OperationStatus.INVALIDATED
    assert token.reason == "store unavailable"


@pytest.mark.parametrize("settle", ["confirm", "invalidate"])
def test_settled_token_cannot_move(settle: str):
    """Завершенная операция не может быть подтверждена или аннулирована повторно."""
    token = OperationToken("create").begin()
    if settle == "confirm":
        token.confirm()
    else:
        token.invalidate("failed")

    with pytest.raises(RuntimeError):
        token.confirm()
    with pytest.raises(RuntimeError):
        token.invalidate("again")


def test_token_cannot_confirm_before_begin():
    with pytest.raises(RuntimeError):
        OperationToken("delete").confirm()


def test_state_transitions_return_new_state(habit_factory):
    state = AppState(user_id="alice")
    first = habit_factory("a", order=1)
    second = habit_factory("b", order=4)

    grown = state.append_habit(first).append_habit(second)

    assert state.habits == ()
    assert [habit.id for habit in grown.habits] == ["a", "b"]
    assert grown.max_order() == 4
    assert state.max_order() == 0

    renamed = grown.replace_habit(first.model_copy(update={"name": "Renamed"}))
    assert renamed.get_habit("a").name == "Renamed"
    assert [habit.id for habit in renamed.remove_habit("a").habits] == ["b"]


def test_get_habit_unknown_id():
    with pytest.raises(NotFoundError):
        AppState(user_id="alice").get_habit("missing")


def test_holder_applies_transitions(habit_factory):
    holder = StateHolder.for_user("alice")
    habit = habit_factory("a")

    result = holder.apply(lambda state: state.append_habit(habit))

    assert holder.current is result
    assert holder.user_id == "alice"
    assert holder.current.find_habit("a") == habit
