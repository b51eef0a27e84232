"""
Эндпоинты для работы со связями дружбы (Friends).
"""

from typing import Annotated, Sequence

from fastapi import APIRouter, Query, status

from src.api.core.dependencies import CurrentUserId, DBSession, FriendSvc
from src.api.models import FriendEdge
from src.api.schemas import FriendEdgeSchemaCreate, FriendEdgeSchemaRead, FriendEdgeSchemaUpdate

router = APIRouter(prefix="/friends", tags=["Friends"])


@router.get(
    "/",
    response_model=Sequence[FriendEdgeSchemaRead],
    status_code=status.HTTP_200_OK,
    summary="Исходящие связи текущего пользователя",
    description="Возвращает связи, где `userId` - текущий пользователь.",
)
async def list_friend_edges(
    db_session: DBSession,
    current_user_id: CurrentUserId,
    friend_service: FriendSvc,
) -> Sequence[FriendEdge]:
    return await friend_service.list_edges(db_session, user_id=current_user_id)


@router.get(
    "/lookup",
    response_model=Sequence[FriendEdgeSchemaRead],
    status_code=status.HTTP_200_OK,
    summary="Связи с точной парой (userId, friendId)",
    description="Доступно только участникам пары.",
)
async def lookup_friend_edges(
    db_session: DBSession,
    current_user_id: CurrentUserId,
    friend_service: FriendSvc,
    user_id: Annotated[str, Query(alias="userId", min_length=1, description="Владелец связи")],
    friend_id: Annotated[str, Query(alias="friendId", min_length=1, description="Адресат связи")],
) -> Sequence[FriendEdge]:
    return await friend_service.lookup_pair(
        db_session,
        user_id=user_id,
        friend_id=friend_id,
        requester_id=current_user_id,
    )


@router.post(
    "/",
    response_model=FriendEdgeSchemaRead,
    status_code=status.HTTP_201_CREATED,
    summary="Заявка в друзья",
    description="Создает связь `я -> friendId` в статусе pending.",
)
async def create_friend_request(
    db_session: DBSession,
    current_user_id: CurrentUserId,
    friend_service: FriendSvc,
    edge_in: FriendEdgeSchemaCreate,
) -> FriendEdge:
    """
    Raises:
        BadRequestException: При заявке самому себе.
        ConflictException: Если связь уже существует.
    """
    return await friend_service.create_request(db_session, user_id=current_user_id, friend_id=edge_in.friend_id)


@router.patch(
    "/{edge_id}",
    response_model=FriendEdgeSchemaRead,
    status_code=status.HTTP_200_OK,
    summary="Смена статуса связи",
    description="Доступно только адресату связи (`friendId`).",
)
async def update_friend_edge(
    db_session: DBSession,
    current_user_id: CurrentUserId,
    friend_service: FriendSvc,
    edge_id: str,
    edge_in: FriendEdgeSchemaUpdate,
) -> FriendEdge:
    return await friend_service.update_status(
        db_session,
        edge_id=edge_id,
        status=edge_in.status,
        requester_id=current_user_id,
    )


@router.delete(
    "/{edge_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Удаление связи",
    description="Доступно только владельцу связи (`userId`).",
)
async def delete_friend_edge(
    db_session: DBSession,
    current_user_id: CurrentUserId,
    friend_service: FriendSvc,
    edge_id: str,
) -> None:
    await friend_service.remove_edge(db_session, edge_id=edge_id, requester_id=current_user_id)

    return None
