"""Ядро трекера привычек: недельные записи, расчет выполнения и синхронизация с хранилищем."""

from .calculator import (
    ChartFilter,
    CompletionSlice,
    TimeRange,
    card_completion,
    categories,
    category_completion,
    completion_chart,
    habit_completion,
    overall_completion,
    resolve_range,
    weekly_rollup,
)
from .coordinator import HabitMutationCoordinator
from .exceptions import NotFoundError, PersistenceError, SyncError, TrackerError, ValidationError
from .friends import FriendCoordinator, FriendProgress, ProgressWindows, UserSearchResult, friend_progress
from .ledger import current_week_view, get_or_create_week, new_week, set_day_status
from .models import (
    DateRange,
    DayEntry,
    DayStatus,
    FriendEdge,
    FriendStatus,
    Habit,
    HabitDraft,
    HabitFrequency,
    HabitUpdate,
    UserProfile,
    WeeklyRecord,
    build_habit_draft,
    build_habit_update,
)
from .state import AppState, OperationStatus, OperationToken, StateHolder
from .store import DocumentStore, HttpDocumentStore, StoreError
from .tags import Tag, TagRegistry
from .week_window import week_dates, week_start

__all__ = [
    "AppState",
    "CompletionSlice",
    "ChartFilter",
    "DateRange",
    "DayEntry",
    "DayStatus",
    "DocumentStore",
    "FriendCoordinator",
    "FriendEdge",
    "FriendProgress",
    "FriendStatus",
    "Habit",
    "HabitDraft",
    "HabitFrequency",
    "HabitMutationCoordinator",
    "HabitUpdate",
    "HttpDocumentStore",
    "NotFoundError",
    "OperationStatus",
    "OperationToken",
    "PersistenceError",
    "ProgressWindows",
    "StateHolder",
    "StoreError",
    "SyncError",
    "Tag",
    "TagRegistry",
    "TimeRange",
    "TrackerError",
    "UserProfile",
    "UserSearchResult",
    "ValidationError",
    "WeeklyRecord",
    "build_habit_draft",
    "build_habit_update",
    "card_completion",
    "categories",
    "category_completion",
    "completion_chart",
    "current_week_view",
    "friend_progress",
    "get_or_create_week",
    "habit_completion",
    "new_week",
    "overall_completion",
    "resolve_range",
    "set_day_status",
    "week_dates",
    "week_start",
    "weekly_rollup",
]
