"""Репозиторий для работы с профилями пользователей."""

from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from src.api.core.logging import api_log as log
from src.api.models import User

from .base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    """
    Репозиторий для выполнения операций с профилями пользователей.

    Наследует общие методы от BaseRepository и содержит специфичные для User запросы.
    """

    async def search_by_display_name_prefix(
        self,
        db_session: AsyncSession,
        *,
        prefix: str,
        limit: int,
    ) -> Sequence[User]:
        """
        Ищет профили, у которых отображаемое имя начинается с `prefix` (с учетом регистра).

        Args:
            db_session (AsyncSession): Асинхронная сессия базы данных.
            prefix (str): Префикс отображаемого имени.
            limit (int): Максимальное количество результатов.

        Returns:
            Sequence[User]: Профили, отсортированные по отображаемому имени.
        """
        users = await self.get_multi_by_filter(
            db_session,
            # startswith с autoescape: символы % и _ в запросе ищутся буквально
            self.model.display_name.startswith(prefix, autoescape=True),
            limit=limit,
            order_by=[self.model.display_name.asc()],
        )

        log.debug(f"По префиксу '{prefix}' найдено {len(users)} пользователей.")
        return users
