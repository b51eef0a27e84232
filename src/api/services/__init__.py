"""Инициализация модуля сервисов."""

from .base_service import BaseService
from .friend_service import FriendService
from .habit_service import HabitService
from .user_service import UserService

__all__ = [
    "BaseService",
    "UserService",
    "HabitService",
    "FriendService",
]
