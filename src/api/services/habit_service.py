"""Сервис для работы с документами привычек."""

from typing import Any, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from src.api.core.exceptions import BadRequestException, ForbiddenException, NotFoundException
from src.api.core.logging import api_log as log
from src.api.models import Habit
from src.api.repositories import FriendRepository, HabitRepository
from src.api.schemas import HabitOrderBatch, HabitSchemaCreate, HabitSchemaUpdate

from .base_service import BaseService


def _document_fields(schema: HabitSchemaCreate | HabitSchemaUpdate, *, exclude_unset: bool) -> dict[str, Any]:
    """
    Переводит схему в поля модели.

    Недельные записи сохраняются в JSON колонку в формате документа (camelCase, даты строками).
    """
    data = schema.model_dump(exclude_unset=exclude_unset, exclude={"weekly_progress"})

    if "weekly_progress" in schema.model_fields_set or not exclude_unset:
        records = schema.weekly_progress
        data["weekly_progress"] = (
            [record.model_dump(mode="json", by_alias=True) for record in records] if records is not None else None
        )

    return data


class HabitService(BaseService[Habit, HabitRepository]):
    """
    Сервис для управления привычками.

    Отвечает за создание, чтение, обновление, удаление и пакетное изменение порядка привычек.
    """

    def __init__(self, habit_repository: HabitRepository, friend_repository: FriendRepository):
        """
        Инициализирует сервис.

        Args:
            habit_repository (HabitRepository): Репозиторий для работы с привычками.
            friend_repository (FriendRepository): Репозиторий связей дружбы (для доступа к привычкам друзей).
        """
        super().__init__(repository=habit_repository)
        self.friend_repository = friend_repository

    async def create_habit_for_user(
        self,
        db_session: AsyncSession,
        *,
        habit_in: HabitSchemaCreate,
        user_id: str,
    ) -> Habit:
        """
        Создает новую привычку для указанного пользователя.

        Args:
            db_session (AsyncSession): Асинхронная сессия базы данных.
            habit_in (HabitSchemaCreate): Документ новой привычки.
            user_id (str): Аутентифицированный пользователь, создающий привычку.

        Returns:
            Habit: Созданная привычка.
        """
        habit_data = {**_document_fields(habit_in, exclude_unset=False), "user_id": user_id}

        async def work() -> Habit:
            return await self.repository.create(db_session, obj_in_data=habit_data)

        habit = await self._in_transaction(db_session, work, action=f"создание привычки пользователем {user_id}")

        log.info(f"Привычка ID {habit.id} для пользователя (ID: {user_id}) успешно создана.")
        return habit

    async def get_habit_by_id_for_user(self, db_session: AsyncSession, *, habit_id: str, user_id: str) -> Habit:
        """
        Получает привычку по ID, проверяя, что она принадлежит пользователю.

        Raises:
            NotFoundException: Если привычка не найдена.
            ForbiddenException: Если привычка не принадлежит пользователю.
        """
        habit = await self.get_by_id(db_session, obj_id=habit_id)

        if habit.user_id != user_id:
            log.warning(f"Пользователь ID: {user_id} пытался получить доступ к чужой привычке ID: {habit_id}")
            raise ForbiddenException(
                message="У вас нет прав для доступа к этой привычке.",
                error_type="habit_access_forbidden",
            )

        return habit

    async def get_habits_of_user(
        self,
        db_session: AsyncSession,
        *,
        owner_id: str,
        requester_id: str,
    ) -> Sequence[Habit]:
        """
        Получает привычки пользователя `owner_id`.

        Доступ есть у самого владельца и у пользователей с принятой связью дружбы
        с владельцем (в любом направлении).

        Raises:
            ForbiddenException: Если запрашивающий не владелец и не друг.
        """
        if owner_id != requester_id:
            is_friend = await self.friend_repository.has_accepted_edge_between(
                db_session, first_id=owner_id, second_id=requester_id
            )
            if not is_friend:
                log.warning(f"Пользователь ID: {requester_id} запросил привычки не друга ID: {owner_id}")
                raise ForbiddenException(
                    message="Привычки доступны только владельцу и его друзьям.",
                    error_type="habits_access_forbidden",
                )

        return await self.repository.get_habits_by_user_id(db_session, user_id=owner_id)

    async def update_habit_for_user(
        self,
        db_session: AsyncSession,
        *,
        habit_id: str,
        habit_in: HabitSchemaUpdate,
        user_id: str,
    ) -> Habit:
        """
        Частично обновляет привычку, проверяя ее принадлежность пользователю.

        Явный null допустим только для описания, обязательные поля им не затираются.

        Raises:
            NotFoundException: Если привычка не найдена.
            ForbiddenException: Если привычка принадлежит другому пользователю.
            BadRequestException: Если передан null для обязательного поля.
        """
        habit = await self.get_habit_by_id_for_user(db_session, habit_id=habit_id, user_id=user_id)

        update_data = _document_fields(habit_in, exclude_unset=True)
        nulled = sorted(field for field, value in update_data.items() if value is None and field != "description")
        if nulled:
            raise BadRequestException(
                message=f"Поля {nulled} не могут быть пустыми.",
                error_type="habit_required_field_null",
                loc=["body", *nulled],
            )

        async def work() -> Habit:
            return await self.repository.update(db_session, db_obj=habit, update_data=update_data)

        updated = await self._in_transaction(db_session, work, action=f"обновление привычки {habit_id}")

        log.info(f"Привычка ID {habit_id} обновлена. Поля: {sorted(update_data)}")
        return updated

    async def remove_habit_for_user(self, db_session: AsyncSession, *, habit_id: str, user_id: str) -> None:
        """
        Удаляет привычку, проверяя ее принадлежность пользователю.

        Raises:
            NotFoundException: Если привычка не найдена.
            ForbiddenException: Если привычка принадлежит другому пользователю.
        """
        habit = await self.get_habit_by_id_for_user(db_session, habit_id=habit_id, user_id=user_id)

        async def work() -> None:
            await self.repository.remove(db_session, db_obj=habit)

        await self._in_transaction(db_session, work, action=f"удаление привычки {habit_id}")
        log.info(f"Привычка ID {habit_id} удалена пользователем ID {user_id}.")

    async def apply_order_batch(self, db_session: AsyncSession, *, batch: HabitOrderBatch, user_id: str) -> int:
        """
        Применяет пакет новых позиций привычек в одной транзакции.

        Пакет применяется целиком или не применяется вовсе: если хотя бы одна привычка
        не найдена или принадлежит другому пользователю, не изменяется ничего.

        Args:
            db_session (AsyncSession): Асинхронная сессия базы данных.
            batch (HabitOrderBatch): Новые позиции.
            user_id (str): Аутентифицированный пользователь.

        Returns:
            int: Количество обновленных привычек.

        Raises:
            BadRequestException: Если ID в пакете повторяются.
            NotFoundException: Если какой-либо привычки нет.
            ForbiddenException: Если какая-либо привычка чужая.
        """
        orders = {item.id: item.order for item in batch.items}
        if len(orders) != len(batch.items):
            raise BadRequestException(
                message="ID привычек в пакете не должны повторяться.",
                error_type="order_batch_duplicate_ids",
                loc=["body", "items"],
            )

        async def work() -> int:
            habits = await self.repository.get_habits_by_ids_for_update(db_session, habit_ids=list(orders))

            missing = sorted(set(orders) - {habit.id for habit in habits})
            if missing:
                raise NotFoundException(
                    message=f"Привычки {missing} не найдены.",
                    error_type="habit_not_found",
                )

            foreign = sorted(habit.id for habit in habits if habit.user_id != user_id)
            if foreign:
                log.warning(f"Пользователь ID: {user_id} пытался изменить порядок чужих привычек: {foreign}")
                raise ForbiddenException(
                    message="Пакет содержит чужие привычки.",
                    error_type="habit_access_forbidden",
                )

            for habit in habits:
                habit.order = orders[habit.id]
            await db_session.flush()
            return len(habits)

        updated = await self._in_transaction(db_session, work, action=f"изменение порядка привычек {user_id}")

        log.info(f"Пользователь ID {user_id} изменил порядок {updated} привычек.")
        return updated
