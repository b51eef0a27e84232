"""Сервис для работы с профилями пользователей."""

from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from src.api.core.logging import api_log as log
from src.api.models import User
from src.api.repositories import UserRepository
from src.api.schemas import UserSchemaUpsert

from .base_service import BaseService


class UserService(BaseService[User, UserRepository]):
    """
    Сервис для управления профилями пользователей.

    ID пользователя выдает провайдер аутентификации; сервис хранит только профиль.
    """

    def __init__(self, user_repository: UserRepository):
        """
        Инициализирует сервис для репозитория UserRepository.

        Args:
            user_repository (UserRepository): Репозиторий для работы с профилями.
        """
        super().__init__(repository=user_repository)

    async def upsert_profile(self, db_session: AsyncSession, *, user_id: str, profile_in: UserSchemaUpsert) -> User:
        """
        Создает профиль пользователя или заменяет существующий.

        Args:
            db_session (AsyncSession): Асинхронная сессия базы данных.
            user_id (str): ID пользователя из токена.
            profile_in (UserSchemaUpsert): Данные профиля.

        Returns:
            User: Сохраненный профиль.
        """
        profile_data = profile_in.model_dump()
        existing = await self.repository.get_by_id(db_session, obj_id=user_id)

        async def work() -> User:
            if existing is None:
                return await self.repository.create(db_session, obj_in_data={**profile_data, "id": user_id})
            return await self.repository.update(db_session, db_obj=existing, update_data=profile_data)

        user = await self._in_transaction(db_session, work, action=f"сохранение профиля {user_id}")

        status = "создан" if existing is None else "обновлен"
        log.info(f"Профиль пользователя ID {user_id} {status}.")
        return user

    async def search_profiles(self, db_session: AsyncSession, *, prefix: str, limit: int) -> Sequence[User]:
        """
        Ищет профили по префиксу отображаемого имени.

        Пустой префикс (после удаления пробелов) дает пустой результат.
        """
        prefix = prefix.strip()
        if not prefix:
            return []

        return await self.repository.search_by_display_name_prefix(db_session, prefix=prefix, limit=limit)
