"""
Эндпоинты для управления документами привычек (Habits).
"""

from fastapi import APIRouter, status

from src.api.core.dependencies import CurrentUserId, DBSession, HabitSvc
from src.api.models import Habit
from src.api.schemas import HabitOrderBatch, HabitSchemaCreate, HabitSchemaRead, HabitSchemaUpdate

router = APIRouter(prefix="/habits", tags=["Habits"])


@router.post(
    "/",
    response_model=HabitSchemaRead,
    status_code=status.HTTP_201_CREATED,
    summary="Создание новой привычки",
    description="Сохраняет новый документ привычки текущего пользователя.",
)
async def create_habit(
    db_session: DBSession,
    current_user_id: CurrentUserId,
    habit_service: HabitSvc,
    habit_in: HabitSchemaCreate,
) -> Habit:
    """
    Создает новую привычку для текущего пользователя.

    Args:
        db_session: Асинхронная сессия базы данных.
        current_user_id: ID аутентифицированного пользователя.
        habit_service: Сервис для работы с привычками.
        habit_in: Документ привычки (название, частота, цель, теги, недельные записи, порядок).

    Returns:
        Habit: Созданный документ привычки с выданным ID.
    """
    return await habit_service.create_habit_for_user(db_session, habit_in=habit_in, user_id=current_user_id)


@router.post(
    "/order",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Пакетное изменение порядка привычек",
    description="Применяет новые значения `order` в одной транзакции: все или ничего.",
)
async def commit_order_batch(
    db_session: DBSession,
    current_user_id: CurrentUserId,
    habit_service: HabitSvc,
    batch: HabitOrderBatch,
) -> None:
    """
    Применяет пакет новых позиций привычек.

    Raises:
        NotFoundException: Если какой-либо привычки нет (ничего не изменяется).
        ForbiddenException: Если какая-либо привычка чужая (ничего не изменяется).
    """
    await habit_service.apply_order_batch(db_session, batch=batch, user_id=current_user_id)

    return None  # Для статуса 204 тело ответа должно быть пустым


@router.patch(
    "/{habit_id}",
    response_model=HabitSchemaRead,
    status_code=status.HTTP_200_OK,
    summary="Частичное обновление привычки по ID",
    description="Обновляет только переданные поля документа, если привычка принадлежит пользователю.",
)
async def update_habit(
    db_session: DBSession,
    current_user_id: CurrentUserId,
    habit_service: HabitSvc,
    habit_id: str,
    habit_in: HabitSchemaUpdate,
) -> Habit:
    """
    Частично обновляет документ привычки (включая полный журнал `weeklyProgress`).

    Raises:
        NotFoundException: Если привычка не найдена.
        ForbiddenException: Если привычка принадлежит другому пользователю.
    """
    return await habit_service.update_habit_for_user(
        db_session,
        habit_id=habit_id,
        habit_in=habit_in,
        user_id=current_user_id,
    )


@router.delete(
    "/{habit_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Удаление привычки по ID",
    description="Удаляет привычку, если она принадлежит пользователю.",
)
async def delete_habit(
    db_session: DBSession,
    current_user_id: CurrentUserId,
    habit_service: HabitSvc,
    habit_id: str,
) -> None:
    """
    Удаляет документ привычки вместе с ее недельными записями.

    Raises:
        NotFoundException: Если привычка не найдена.
        ForbiddenException: Если привычка принадлежит другому пользователю.
    """
    await habit_service.remove_habit_for_user(db_session, habit_id=habit_id, user_id=current_user_id)

    return None
