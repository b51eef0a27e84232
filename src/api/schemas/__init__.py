"""Инициализация модуля схем Pydantic."""

from .auth_schema import TokenPayload
from .base_schema import BaseSchema
from .friend_schema import FriendEdgeSchemaCreate, FriendEdgeSchemaRead, FriendEdgeSchemaUpdate
from .habit_schema import (
    HabitOrderBatch,
    HabitOrderItem,
    HabitSchemaBase,
    HabitSchemaCreate,
    HabitSchemaRead,
    HabitSchemaUpdate,
)
from .user_schema import UserSchemaBase, UserSchemaRead, UserSchemaUpsert

__all__ = [
    "BaseSchema",
    "TokenPayload",
    "UserSchemaBase",
    "UserSchemaRead",
    "UserSchemaUpsert",
    "HabitSchemaBase",
    "HabitSchemaCreate",
    "HabitSchemaRead",
    "HabitSchemaUpdate",
    "HabitOrderItem",
    "HabitOrderBatch",
    "FriendEdgeSchemaCreate",
    "FriendEdgeSchemaRead",
    "FriendEdgeSchemaUpdate",
]
