"""Репозиторий для работы с документами Habit."""

from typing import Any, Sequence

from sqlalchemy import ColumnElement, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.core.logging import api_log as log
from src.api.models import Habit

from .base_repository import BaseRepository


class HabitRepository(BaseRepository[Habit]):
    """
    Репозиторий для выполнения операций с документами Habit.

    Наследует общие методы от BaseRepository и содержит специфичные для Habit запросы.
    """

    async def get_habits_by_user_id(self, db_session: AsyncSession, *, user_id: str) -> Sequence[Habit]:
        """
        Получает все привычки пользователя.

        Порядок: по `order` по возрастанию, затем по дате создания (сначала новые).

        Args:
            db_session (AsyncSession): Асинхронная сессия базы данных.
            user_id (str): ID владельца привычек.

        Returns:
            Sequence[Habit]: Привычки пользователя.
        """
        order: list[ColumnElement[Any]] = [self.model.order.asc(), self.model.created_at.desc()]

        habits = await self.get_multi_by_filter(db_session, self.model.user_id == user_id, order_by=order)

        log.debug(f"Найдено {len(habits)} привычек для пользователя ID: {user_id}.")
        return habits

    async def get_habits_by_ids_for_update(self, db_session: AsyncSession, *, habit_ids: list[str]) -> Sequence[Habit]:
        """
        Получает привычки по списку ID и блокирует строки до конца транзакции (SELECT ... FOR UPDATE).

        На SQLite блокировка строк не поддерживается и игнорируется диалектом.

        Args:
            db_session (AsyncSession): Асинхронная сессия базы данных.
            habit_ids (list[str]): ID привычек.

        Returns:
            Sequence[Habit]: Найденные привычки (отсутствующие ID просто не попадают в результат).
        """
        statement = select(self.model).where(self.model.id.in_(habit_ids)).with_for_update()
        result = await db_session.execute(statement)
        habits = result.scalars().all()

        log.debug(f"Для пакетного обновления найдено {len(habits)} из {len(habit_ids)} привычек.")
        return habits
