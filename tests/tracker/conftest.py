from datetime import date, datetime, timedelta, timezone
from itertools import count
from typing import Any, Callable

import pytest

from src.tracker.ledger import set_day_status
from src.tracker.models import DayStatus, FriendEdge, FriendStatus, Habit, HabitFrequency, UserProfile
from src.tracker.state import StateHolder
from src.tracker.store import StoreError


class FakeDocumentStore:
    """
    Хранилище документов в памяти с внедрением отказов.

    Экземпляры, полученные через `acting_as`, разделяют одни и те же данные,
    но действуют от имени другого пользователя.
    """

    def __init__(self, user_id: str, world: dict[str, Any] | None = None):
        self.user_id = user_id
        self.world = world or {
            "habits": {},
            "edges": {},
            "users": {},
            "ids": count(1),
            "clock": datetime(2024, 3, 1, tzinfo=timezone.utc),
        }
        self.fail_on: set[str] = set()
        self.calls: list[str] = []

    def acting_as(self, user_id: str) -> "FakeDocumentStore":
        return FakeDocumentStore(user_id, self.world)

    @property
    def habits(self) -> dict[str, Habit]:
        return self.world["habits"]

    @property
    def edges(self) -> dict[str, FriendEdge]:
        return self.world["edges"]

    @property
    def users(self) -> dict[str, UserProfile]:
        return self.world["users"]

    def _call(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.fail_on:
            raise StoreError(f"{operation} отклонен", status_code=503)

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}{next(self.world['ids'])}"

    def _tick(self) -> datetime:
        self.world["clock"] += timedelta(seconds=1)
        return self.world["clock"]

    # --- Привычки ---

    def put_habit(self, habit: Habit) -> Habit:
        self.habits[habit.id] = habit
        return habit

    async def fetch_habits(self, user_id: str) -> list[Habit]:
        self._call("fetch_habits")
        owned = [habit for habit in self.habits.values() if habit.user_id == user_id]
        owned.sort(key=lambda habit: habit.created_at, reverse=True)
        return sorted(owned, key=lambda habit: habit.order)

    async def add_habit(self, document: dict[str, Any]) -> Habit:
        self._call("add_habit")
        habit = Habit.model_validate(
            {**document, "id": self._next_id("h"), "userId": self.user_id, "createdAt": self._tick()}
        )
        return self.put_habit(habit)

    async def update_habit(self, habit_id: str, fields: dict[str, Any]) -> None:
        self._call("update_habit")
        existing = self.habits[habit_id].model_dump(by_alias=True)
        self.habits[habit_id] = Habit.model_validate({**existing, **fields})

    async def delete_habit(self, habit_id: str) -> None:
        self._call("delete_habit")
        del self.habits[habit_id]

    async def commit_order_batch(self, orders: dict[str, int]) -> None:
        self._call("commit_order_batch")
        for habit_id, order in orders.items():
            self.habits[habit_id] = self.habits[habit_id].model_copy(update={"order": order})

    # --- Дружба ---

    def put_edge(self, user_id: str, friend_id: str, status: FriendStatus = FriendStatus.PENDING) -> FriendEdge:
        edge = FriendEdge(id=self._next_id("e"), user_id=user_id, friend_id=friend_id, status=status)
        self.edges[edge.id] = edge
        return edge

    async def fetch_friend_edges(self) -> list[FriendEdge]:
        self._call("fetch_friend_edges")
        return [edge for edge in self.edges.values() if edge.user_id == self.user_id]

    async def find_friend_edges(self, user_id: str, friend_id: str) -> list[FriendEdge]:
        self._call("find_friend_edges")
        return [edge for edge in self.edges.values() if (edge.user_id, edge.friend_id) == (user_id, friend_id)]

    async def add_friend_edge(self, friend_id: str) -> FriendEdge:
        self._call("add_friend_edge")
        return self.put_edge(self.user_id, friend_id)

    async def update_friend_edge(self, edge_id: str, status: FriendStatus) -> None:
        self._call("update_friend_edge")
        self.edges[edge_id] = self.edges[edge_id].model_copy(update={"status": FriendStatus(status)})

    async def delete_friend_edge(self, edge_id: str) -> None:
        self._call("delete_friend_edge")
        del self.edges[edge_id]

    # --- Пользователи ---

    def put_user(self, user_id: str, display_name: str) -> UserProfile:
        profile = UserProfile(id=user_id, email=f"{user_id}@example.com", display_name=display_name)
        self.users[user_id] = profile
        return profile

    async def fetch_user(self, user_id: str) -> UserProfile | None:
        self._call("fetch_user")
        return self.users.get(user_id)

    async def search_users(self, prefix: str, limit: int) -> list[UserProfile]:
        self._call("search_users")
        found = sorted(
            (profile for profile in self.users.values() if profile.display_name.startswith(prefix)),
            key=lambda profile: profile.display_name,
        )
        return found[:limit]


def build_habit(
    habit_id: str = "h-test",
    *,
    frequency: HabitFrequency = HabitFrequency.DAILY,
    target: int = 7,
    days: dict[date, DayStatus] | None = None,
    tags: tuple[str, ...] = (),
    order: int = 0,
    user_id: str = "alice",
    name: str | None = None,
    created_at: datetime | None = None,
) -> Habit:
    """Привычка с заданными статусами дней (недели создаются автоматически)."""
    habit = Habit(
        id=habit_id,
        user_id=user_id,
        name=name or f"Habit {habit_id}",
        frequency=frequency,
        target=target,
        tags=tags,
        order=order,
        created_at=created_at or datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    for day, status in (days or {}).items():
        habit = set_day_status(habit, day, status)
    return habit


@pytest.fixture
def habit_factory() -> Callable[..., Habit]:
    return build_habit


@pytest.fixture
def store() -> FakeDocumentStore:
    return FakeDocumentStore("alice")


@pytest.fixture
def holder() -> StateHolder:
    return StateHolder.for_user("alice")
