"""Базовый репозиторий с общими операциями над документами."""

from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import ColumnElement, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.core.logging import api_log as log
from src.api.models import Base as SQLAlchemyBaseModel

# Обобщенный тип модели SQLAlchemy
ModelType = TypeVar("ModelType", bound=SQLAlchemyBaseModel)


class BaseRepository(Generic[ModelType]):
    """
    Базовый класс репозитория для асинхронных операций с документами.

    Репозиторий только готовит изменения в сессии (flush);
    фиксация транзакции - ответственность сервиса.

    Attributes:
        model: Класс модели SQLAlchemy, с которым работает репозиторий.
    """

    def __init__(self, model: type[ModelType]):
        """
        Инициализирует базовый репозиторий.

        Args:
            model (type[ModelType]): Класс модели SQLAlchemy.
        """
        self.model = model

    async def get_by_id(self, db_session: AsyncSession, *, obj_id: str) -> ModelType | None:
        """
        Получает один документ по его ID.

        Args:
            db_session (AsyncSession): Асинхронная сессия базы данных.
            obj_id (str): Идентификатор документа.

        Returns:
            ModelType | None: Экземпляр модели или None, если документ не найден.
        """
        model_name = self.model.__name__

        statement = select(self.model).where(self.model.id == obj_id)
        result = await db_session.execute(statement)
        instance = result.scalar_one_or_none()

        status = "найден" if instance else "не найден"
        log.debug(f"Документ {model_name} с ID {obj_id} {status}.")

        return instance

    async def get_by_filter_first_or_none(
        self, db_session: AsyncSession, *filters: ColumnElement[bool]
    ) -> ModelType | None:
        """
        Получает первый документ, соответствующий критериям фильтрации, или None.

        Args:
            db_session (AsyncSession): Асинхронная сессия базы данных.
            *filters (ColumnElement[bool]): Критерии фильтрации SQLAlchemy (объединяются через AND).

        Returns:
            ModelType | None: Экземпляр модели или None, если документ не найден.
        """
        statement = select(self.model).where(*filters).limit(1)
        result = await db_session.execute(statement)
        return result.scalar_one_or_none()

    async def get_multi_by_filter(
        self,
        db_session: AsyncSession,
        *filters: ColumnElement[bool],
        limit: int | None = None,
        order_by: list[ColumnElement[Any]] | None = None,
    ) -> Sequence[ModelType]:
        """
        Получает документы, соответствующие критериям фильтрации (объединяются через AND).

        Args:
            db_session (AsyncSession): Асинхронная сессия базы данных.
            *filters (ColumnElement[bool]): Критерии фильтрации SQLAlchemy.
            limit (int | None): Максимальное количество документов (None - без ограничения).
            order_by (list[ColumnElement[Any]] | None): Выражения сортировки.

        Returns:
            Sequence[ModelType]: Список экземпляров модели.
        """
        statement = select(self.model)

        if filters:
            statement = statement.where(*filters)

        if order_by:
            statement = statement.order_by(*order_by)

        if limit is not None:
            statement = statement.limit(limit)

        result = await db_session.execute(statement)
        return result.scalars().all()

    async def create(self, db_session: AsyncSession, *, obj_in_data: dict[str, Any]) -> ModelType:
        """
        Создает документ из словаря полей и добавляет его в сессию.

        Args:
            db_session (AsyncSession): Асинхронная сессия базы данных.
            obj_in_data (dict[str, Any]): Поля документа (имена атрибутов модели).

        Returns:
            ModelType: Созданный экземпляр модели с заполненными ID и временными метками.
        """
        db_obj = self.model(**obj_in_data)
        db_session.add(db_obj)

        # Получаем ID и другие сгенерированные значения
        await db_session.flush()
        await db_session.refresh(db_obj)

        log.debug(f"Документ {self.model.__name__} ID {db_obj.id} подготовлен к сохранению.")
        return db_obj

    async def update(self, db_session: AsyncSession, *, db_obj: ModelType, update_data: dict[str, Any]) -> ModelType:
        """
        Частично обновляет документ переданными полями.

        Args:
            db_session (AsyncSession): Асинхронная сессия базы данных.
            db_obj (ModelType): Экземпляр модели для обновления.
            update_data (dict[str, Any]): Только изменяемые поля.

        Returns:
            ModelType: Обновленный экземпляр модели.
        """
        model_name = self.model.__name__

        for field, value in update_data.items():
            if hasattr(db_obj.__class__, field):
                setattr(db_obj, field, value)
            else:
                log.warning(f"Попытка обновить несуществующее поле '{field}' для {model_name} ID: {db_obj.id}")

        db_session.add(db_obj)
        await db_session.flush()
        await db_session.refresh(db_obj)

        return db_obj

    async def remove(self, db_session: AsyncSession, *, db_obj: ModelType) -> None:
        """
        Помечает документ для удаления в сессии.

        Args:
            db_session (AsyncSession): Асинхронная сессия базы данных.
            db_obj (ModelType): Документ для удаления.
        """
        log.debug(f"Пометка на удаление документа {self.model.__name__} (ID: {db_obj.id})")
        await db_session.delete(db_obj)
        await db_session.flush()
