"""
Состояние приложения и протокол оптимистичных операций.

`AppState` - явный объект состояния, который координаторы передают по ссылке вместо глобального
хранилища. Он неизменяем: методы возвращают новое состояние. Единственный писатель - координатор,
все чтения (расчеты, UI) видят согласованный снимок.
"""

from enum import StrEnum
from typing import Callable, Iterable

from pydantic import BaseModel, ConfigDict

from .exceptions import NotFoundError
from .logging import tracker_log as log
from .models import FriendEdge, Habit


class AppState(BaseModel):
    """
    Снимок локального состояния пользователя.

    Attributes:
        user_id: Текущий пользователь.
        habits: Привычки пользователя в порядке отображения.
        friends: Исходящие связи дружбы пользователя.
        error: Сообщение о последней ошибке синхронизации (для UI) или None.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str
    habits: tuple[Habit, ...] = ()
    friends: tuple[FriendEdge, ...] = ()
    error: str | None = None

    # --- Чтение ---

    def find_habit(self, habit_id: str) -> Habit | None:
        return next((habit for habit in self.habits if habit.id == habit_id), None)

    def get_habit(self, habit_id: str) -> Habit:
        """
        Возвращает привычку по ID.

        Raises:
            NotFoundError: Если привычки нет в локальном состоянии.
        """
        habit = self.find_habit(habit_id)
        if habit is None:
            raise NotFoundError(message=f"Привычка с ID {habit_id} не найдена.", error_type="habit_not_found")
        return habit

    def max_order(self) -> int:
        # Пустой список дает 0, поэтому первая привычка получает порядок 1
        return max((habit.order for habit in self.habits), default=0)

    # --- Переходы ---

    def with_habits(self, habits: Iterable[Habit]) -> "AppState":
        return self.model_copy(update={"habits": tuple(habits)})

    def with_friends(self, friends: Iterable[FriendEdge]) -> "AppState":
        return self.model_copy(update={"friends": tuple(friends)})

    def with_error(self, error: str | None) -> "AppState":
        return self.model_copy(update={"error": error})

    def append_habit(self, habit: Habit) -> "AppState":
        return self.with_habits((*self.habits, habit))

    def replace_habit(self, habit: Habit) -> "AppState":
        return self.with_habits(habit if existing.id == habit.id else existing for existing in self.habits)

    def remove_habit(self, habit_id: str) -> "AppState":
        return self.with_habits(habit for habit in self.habits if habit.id != habit_id)


class OperationStatus(StrEnum):
    """Состояния двухфазной операции."""

    IDLE = "idle"
    PENDING = "pending"
    CONFIRMED = "confirmed"
    INVALIDATED = "invalidated"


# Допустимые переходы конечного автомата
_TRANSITIONS: dict[OperationStatus, frozenset[OperationStatus]] = {
    OperationStatus.IDLE: frozenset({OperationStatus.PENDING}),
    OperationStatus.PENDING: frozenset({OperationStatus.CONFIRMED, OperationStatus.INVALIDATED}),
    OperationStatus.CONFIRMED: frozenset(),
    OperationStatus.INVALIDATED: frozenset(),
}


class OperationToken:
    """
    Токен одной мутирующей операции: idle -> pending -> {confirmed | invalidated}.

    Фаза 1 (`begin`) фиксирует, что операция начата (для оптимистичных операций - что
    локальное состояние уже предварительное). Фаза 2 либо подтверждает операцию (`confirm`),
    либо аннулирует ее (`invalidate`), после чего предварительное состояние отбрасывается.
    """

    def __init__(self, kind: str, habit_id: str | None = None):
        self.kind = kind
        self.habit_id = habit_id
        self.status = OperationStatus.IDLE
        self.reason: str | None = None

    def __repr__(self) -> str:
        return f"<OperationToken(kind={self.kind!r}, habit_id={self.habit_id!r}, status={self.status.value!r})>"

    def _move(self, target: OperationStatus) -> None:
        if target not in _TRANSITIONS[self.status]:
            raise RuntimeError(f"Недопустимый переход операции '{self.kind}': {self.status.value} -> {target.value}")
        self.status = target

    def begin(self) -> "OperationToken":
        self._move(OperationStatus.PENDING)
        log.debug(f"Операция '{self.kind}' (привычка {self.habit_id}) начата.")
        return self

    def confirm(self) -> None:
        self._move(OperationStatus.CONFIRMED)
        log.debug(f"Операция '{self.kind}' (привычка {self.habit_id}) подтверждена.")

    def invalidate(self, reason: str) -> None:
        self._move(OperationStatus.INVALIDATED)
        self.reason = reason
        log.debug(f"Операция '{self.kind}' (привычка {self.habit_id}) аннулирована: {reason}")

    @property
    def is_settled(self) -> bool:
        return self.status in (OperationStatus.CONFIRMED, OperationStatus.INVALIDATED)


class StateHolder:
    """
    Ссылка на текущее `AppState`, общая для координаторов одной пользовательской сессии.

    Читатели берут снимок `current`, координаторы заменяют его через `apply`.
    """

    def __init__(self, state: AppState):
        self.current = state

    @classmethod
    def for_user(cls, user_id: str) -> "StateHolder":
        return cls(AppState(user_id=user_id))

    @property
    def user_id(self) -> str:
        return self.current.user_id

    def apply(self, transition: Callable[[AppState], AppState]) -> AppState:
        self.current = transition(self.current)
        return self.current
