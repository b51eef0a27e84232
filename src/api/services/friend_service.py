"""Сервис для работы со связями дружбы."""

from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from src.api.core.exceptions import BadRequestException, ConflictException, ForbiddenException
from src.api.core.logging import api_log as log
from src.api.models import FriendEdge
from src.api.repositories import FriendRepository
from src.tracker.models import FriendStatus

from .base_service import BaseService


class FriendService(BaseService[FriendEdge, FriendRepository]):
    """
    Сервис для управления направленными связями дружбы.

    Правила доступа:
    - создать связь можно только от своего имени;
    - сменить статус может только адресат связи (`friend_id`);
    - удалить связь может только ее владелец (`user_id`).
    """

    def __init__(self, friend_repository: FriendRepository):
        super().__init__(repository=friend_repository)

    async def list_edges(self, db_session: AsyncSession, *, user_id: str) -> Sequence[FriendEdge]:
        return await self.repository.get_edges_by_user_id(db_session, user_id=user_id)

    async def lookup_pair(
        self,
        db_session: AsyncSession,
        *,
        user_id: str,
        friend_id: str,
        requester_id: str,
    ) -> Sequence[FriendEdge]:
        """
        Находит связи с точной парой (userId, friendId).

        Raises:
            ForbiddenException: Если запрашивающий не входит в пару.
        """
        if requester_id not in (user_id, friend_id):
            log.warning(f"Пользователь ID: {requester_id} запросил чужую пару связей {user_id} -> {friend_id}")
            raise ForbiddenException(
                message="Можно запрашивать только связи, в которых вы участвуете.",
                error_type="friend_lookup_forbidden",
            )

        return await self.repository.get_edges_for_pair(db_session, user_id=user_id, friend_id=friend_id)

    async def create_request(self, db_session: AsyncSession, *, user_id: str, friend_id: str) -> FriendEdge:
        """
        Создает заявку `user_id -> friend_id` в статусе PENDING.

        Raises:
            BadRequestException: При попытке добавить в друзья себя.
            ConflictException: Если такая связь уже существует.
        """
        if user_id == friend_id:
            raise BadRequestException(
                message="Нельзя отправить заявку в друзья самому себе.",
                error_type="friend_self_request",
                loc=["body", "friendId"],
            )

        existing = await self.repository.get_edges_for_pair(db_session, user_id=user_id, friend_id=friend_id)
        if existing:
            raise ConflictException(
                message="Заявка этому пользователю уже существует.",
                error_type="friend_edge_exists",
            )

        async def work() -> FriendEdge:
            return await self.repository.create(
                db_session,
                obj_in_data={"user_id": user_id, "friend_id": friend_id, "status": FriendStatus.PENDING},
            )

        edge = await self._in_transaction(db_session, work, action=f"заявка в друзья {user_id} -> {friend_id}")

        log.info(f"Создана заявка в друзья ID {edge.id}: {user_id} -> {friend_id}.")
        return edge

    async def update_status(
        self,
        db_session: AsyncSession,
        *,
        edge_id: str,
        status: FriendStatus,
        requester_id: str,
    ) -> FriendEdge:
        """
        Меняет статус связи. Разрешено только адресату связи.

        Raises:
            NotFoundException: Если связь не найдена.
            ForbiddenException: Если запрашивающий не адресат связи.
        """
        edge = await self.get_by_id(db_session, obj_id=edge_id)

        if edge.friend_id != requester_id:
            log.warning(f"Пользователь ID: {requester_id} пытался сменить статус чужой связи ID: {edge_id}")
            raise ForbiddenException(
                message="Статус связи может изменить только адресат заявки.",
                error_type="friend_edge_update_forbidden",
            )

        async def work() -> FriendEdge:
            return await self.repository.update(db_session, db_obj=edge, update_data={"status": status})

        updated = await self._in_transaction(db_session, work, action=f"смена статуса связи {edge_id}")

        log.info(f"Связь ID {edge_id} ({edge.user_id} -> {edge.friend_id}) переведена в статус {status.value}.")
        return updated

    async def remove_edge(self, db_session: AsyncSession, *, edge_id: str, requester_id: str) -> None:
        """
        Удаляет связь. Разрешено только ее владельцу.

        Raises:
            NotFoundException: Если связь не найдена.
            ForbiddenException: Если запрашивающий не владелец связи.
        """
        edge = await self.get_by_id(db_session, obj_id=edge_id)

        if edge.user_id != requester_id:
            log.warning(f"Пользователь ID: {requester_id} пытался удалить чужую связь ID: {edge_id}")
            raise ForbiddenException(
                message="Удалить связь может только ее владелец.",
                error_type="friend_edge_delete_forbidden",
            )

        async def work() -> None:
            await self.repository.remove(db_session, db_obj=edge)

        await self._in_transaction(db_session, work, action=f"удаление связи {edge_id}")
        log.info(f"Связь ID {edge_id} удалена пользователем ID {requester_id}.")
