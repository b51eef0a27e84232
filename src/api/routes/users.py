"""
Эндпоинты для работы с профилями пользователей и их привычками.
"""

from typing import Annotated, Sequence

from fastapi import APIRouter, Query, status

from src.api.core.config import settings
from src.api.core.dependencies import CurrentUserId, DBSession, HabitSvc, UserSvc
from src.api.core.logging import api_log as log
from src.api.models import Habit, User
from src.api.schemas import HabitSchemaRead, UserSchemaRead, UserSchemaUpsert

router = APIRouter(prefix="/users", tags=["Users"])


@router.put(
    "/me",
    response_model=UserSchemaRead,
    status_code=status.HTTP_200_OK,
    summary="Создание или замена собственного профиля",
    description="Сохраняет профиль пользователя, ID которого указан в JWT токене.",
)
async def upsert_users_me(
    db_session: DBSession,
    current_user_id: CurrentUserId,
    user_service: UserSvc,
    profile_in: UserSchemaUpsert,
) -> User:
    log.info(f"Сохранение профиля пользователя ID {current_user_id}")
    return await user_service.upsert_profile(db_session, user_id=current_user_id, profile_in=profile_in)


@router.get(
    "/me",
    response_model=UserSchemaRead,
    status_code=status.HTTP_200_OK,
    summary="Получение собственного профиля",
)
async def read_users_me(db_session: DBSession, current_user_id: CurrentUserId, user_service: UserSvc) -> User:
    return await user_service.get_by_id(db_session, obj_id=current_user_id)


@router.get(
    "/search",
    response_model=Sequence[UserSchemaRead],
    status_code=status.HTTP_200_OK,
    summary="Поиск пользователей по префиксу имени",
    description="Возвращает профили, отображаемое имя которых начинается с `prefix`, в алфавитном порядке.",
)
async def search_users(
    db_session: DBSession,
    current_user_id: CurrentUserId,
    user_service: UserSvc,
    prefix: Annotated[str, Query(max_length=100, description="Префикс отображаемого имени")] = "",
    limit: Annotated[int | None, Query(ge=1, le=50, description="Максимум результатов")] = None,
) -> Sequence[User]:
    """
    Ищет пользователей по префиксу `displayName`.

    Пустой префикс дает пустой список. Текущий пользователь не исключается:
    это решает клиент.
    """
    log.debug(f"Пользователь ID {current_user_id} ищет пользователей по префиксу '{prefix}'")
    return await user_service.search_profiles(
        db_session,
        prefix=prefix,
        limit=limit or settings.USER_SEARCH_LIMIT,
    )


@router.get(
    "/{user_id}",
    response_model=UserSchemaRead,
    status_code=status.HTTP_200_OK,
    summary="Получение профиля пользователя по ID",
)
async def read_user(
    db_session: DBSession,
    current_user_id: CurrentUserId,
    user_service: UserSvc,
    user_id: str,
) -> User:
    """
    Raises:
        NotFoundException: Если профиля нет.
    """
    return await user_service.get_by_id(db_session, obj_id=user_id)


@router.get(
    "/{user_id}/habits",
    response_model=Sequence[HabitSchemaRead],
    status_code=status.HTTP_200_OK,
    summary="Получение привычек пользователя",
    description=(
        "Возвращает привычки пользователя по `order` (по возрастанию), затем по дате создания (сначала новые). "
        "Доступно самому пользователю и его друзьям (принятая связь в любом направлении)."
    ),
)
async def read_user_habits(
    db_session: DBSession,
    current_user_id: CurrentUserId,
    habit_service: HabitSvc,
    user_id: str,
) -> Sequence[Habit]:
    """
    Raises:
        ForbiddenException: Если запрашивающий не владелец и не друг.
    """
    return await habit_service.get_habits_of_user(db_session, owner_id=user_id, requester_id=current_user_id)
