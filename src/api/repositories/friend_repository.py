"""Репозиторий для работы со связями дружбы."""

from typing import Sequence

from sqlalchemy import and_, or_
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.core.logging import api_log as log
from src.api.models import FriendEdge
from src.tracker.models import FriendStatus

from .base_repository import BaseRepository


class FriendRepository(BaseRepository[FriendEdge]):
    """
    Репозиторий для выполнения операций со связями дружбы.

    Наследует общие методы от BaseRepository и содержит специфичные для FriendEdge запросы.
    """

    async def get_edges_by_user_id(self, db_session: AsyncSession, *, user_id: str) -> Sequence[FriendEdge]:
        """Связи, где пользователь - владелец (`userId == user_id`), сначала новые."""
        edges = await self.get_multi_by_filter(
            db_session,
            self.model.user_id == user_id,
            order_by=[self.model.created_at.desc()],
        )

        log.debug(f"Найдено {len(edges)} исходящих связей пользователя ID: {user_id}.")
        return edges

    async def get_edges_for_pair(
        self,
        db_session: AsyncSession,
        *,
        user_id: str,
        friend_id: str,
    ) -> Sequence[FriendEdge]:
        """Связи с точной парой (userId, friendId)."""
        return await self.get_multi_by_filter(
            db_session,
            self.model.user_id == user_id,
            self.model.friend_id == friend_id,
        )

    async def has_accepted_edge_between(self, db_session: AsyncSession, *, first_id: str, second_id: str) -> bool:
        """
        Проверяет, есть ли принятая связь между двумя пользователями в любом направлении.

        Args:
            db_session (AsyncSession): Асинхронная сессия базы данных.
            first_id (str): ID первого пользователя.
            second_id (str): ID второго пользователя.

        Returns:
            bool: True, если найдена хотя бы одна связь в статусе ACCEPTED.
        """
        edge = await self.get_by_filter_first_or_none(
            db_session,
            self.model.status == FriendStatus.ACCEPTED,
            or_(
                and_(self.model.user_id == first_id, self.model.friend_id == second_id),
                and_(self.model.user_id == second_id, self.model.friend_id == first_id),
            ),
        )
        return edge is not None
