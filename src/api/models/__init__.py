from .base import Base, metadata_obj
from .friend import FriendEdge
from .habit import Habit
from .user import User

__all__ = [
    "metadata_obj",
    "Base",
    "User",
    "Habit",
    "FriendEdge",
]
