"""Зависимости FastAPI: сессия БД, репозитории, сервисы и аутентификация."""

from typing import Annotated

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.models import FriendEdge, Habit, User
from src.api.repositories import FriendRepository, HabitRepository, UserRepository
from src.api.services import FriendService, HabitService, UserService

from .database import get_db_session
from .exceptions import UnauthorizedException
from .logging import api_log as log
from .security import verify_and_decode_token

# --- Типизация для инъекции зависимостей ---

# Сессия базы данных
DBSession = Annotated[AsyncSession, Depends(get_db_session)]


# --- Фабрики Репозиториев ---


def get_habit_repository() -> HabitRepository:
    return HabitRepository(Habit)


def get_friend_repository() -> FriendRepository:
    return FriendRepository(FriendEdge)


def get_user_repository() -> UserRepository:
    return UserRepository(User)


# Типизация для репозиториев
HabitRepo = Annotated[HabitRepository, Depends(get_habit_repository)]
FriendRepo = Annotated[FriendRepository, Depends(get_friend_repository)]
UserRepo = Annotated[UserRepository, Depends(get_user_repository)]


# --- Фабрики Сервисов ---


# HabitService зависит от HabitRepo и FriendRepo (доступ к привычкам друзей)
def get_habit_service(repository: HabitRepo, friend_repository: FriendRepo) -> HabitService:
    return HabitService(habit_repository=repository, friend_repository=friend_repository)


def get_friend_service(repository: FriendRepo) -> FriendService:
    return FriendService(friend_repository=repository)


def get_user_service(repository: UserRepo) -> UserService:
    return UserService(user_repository=repository)


# Типизация для сервисов
HabitSvc = Annotated[HabitService, Depends(get_habit_service)]
FriendSvc = Annotated[FriendService, Depends(get_friend_service)]
UserSvc = Annotated[UserService, Depends(get_user_service)]


# --- Зависимость для получения текущего пользователя ---

# Схема для JWT Bearer токена
bearer_schema = HTTPBearer(auto_error=False)


async def get_current_user_id(
    token_credentials: HTTPAuthorizationCredentials | None = Security(bearer_schema),
) -> str:
    """
    Получает ID текущего пользователя из JWT токена провайдера аутентификации.

    Профиль в хранилище для этого не требуется: пользователь может сохранять привычки
    до того, как заполнит профиль.

    Args:
        token_credentials (HTTPAuthorizationCredentials | None): Учетные данные из заголовка Authorization.

    Returns:
        str: ID аутентифицированного пользователя.

    Raises:
        UnauthorizedException: Если токен отсутствует или невалиден.
    """
    if token_credentials is None or not token_credentials.credentials:
        log.debug("Отсутствует токен авторизации.")
        raise UnauthorizedException(message="Токен авторизации не предоставлен.", error_type="token_missing")

    # UnauthorizedException будет выброшен из verify_and_decode_token в случае проблем
    token_payload = verify_and_decode_token(token_credentials.credentials)

    log.debug(f"Аутентифицирован пользователь: ID {token_payload.user_id}")
    return token_payload.user_id


# --- Типизация для инъекции текущего пользователя ---
CurrentUserId = Annotated[str, Depends(get_current_user_id)]
