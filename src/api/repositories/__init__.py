"""Инициализация модуля репозиториев."""

from .base_repository import BaseRepository
from .friend_repository import FriendRepository
from .habit_repository import HabitRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "HabitRepository",
    "FriendRepository",
]
