"""
Базовый класс для сервисов.

Реализует общую бизнес-логику и управление транзакциями:
каждый публичный метод конкретного сервиса - одна единица работы (Unit of Work).
"""

from typing import Awaitable, Callable, Generic, TypeVar, cast

from sqlalchemy.ext.asyncio import AsyncSession

from src.api.core.exceptions import AppException, NotFoundException
from src.api.core.logging import api_log as log
from src.api.models import Base as SQLAlchemyBaseModel
from src.api.repositories import BaseRepository

# Обобщенные типы для моделей SQLAlchemy и репозиториев
ModelType = TypeVar("ModelType", bound=SQLAlchemyBaseModel)
RepositoryType = TypeVar("RepositoryType", bound=BaseRepository)
ResultType = TypeVar("ResultType")


class BaseService(Generic[ModelType, RepositoryType]):
    """
    Базовый сервис с общими операциями и управлением транзакциями.

    Attributes:
        repository (RepositoryType): Экземпляр репозитория для работы с данными.
    """

    def __init__(self, repository: RepositoryType):
        """
        Инициализирует базовый сервис.

        Args:
            repository (RepositoryType): Репозиторий для работы с данными.
        """
        self.repository = repository

    async def get_by_id(self, db_session: AsyncSession, *, obj_id: str) -> ModelType:
        """
        Получает документ по ID или выбрасывает исключение, если документ не найден.

        Args:
            db_session (AsyncSession): Асинхронная сессия базы данных.
            obj_id (str): ID документа.

        Returns:
            ModelType: Найденный документ.

        Raises:
            NotFoundException: Если документ с указанным ID не найден.
        """
        model_name = self.repository.model.__name__

        db_obj = await self.repository.get_by_id(db_session, obj_id=obj_id)

        if not db_obj:
            raise NotFoundException(
                message=f"{model_name} с ID {obj_id} не найден.",
                error_type=f"{model_name.lower()}_not_found",
            )

        return cast(ModelType, db_obj)  # Явное приведение типа для mypy

    async def _in_transaction(
        self,
        db_session: AsyncSession,
        work: Callable[[], Awaitable[ResultType]],
        *,
        action: str,
    ) -> ResultType:
        """
        Выполняет `work` и фиксирует транзакцию; при любой ошибке откатывает ее.

        Args:
            db_session (AsyncSession): Асинхронная сессия базы данных.
            work: Корутина-функция с изменениями через репозиторий.
            action (str): Описание операции для лога.

        Returns:
            Результат `work`.
        """
        try:
            result = await work()
            await db_session.commit()
            return result
        except AppException:
            # Отказы бизнес-проверок логирует обработчик исключений API
            await db_session.rollback()
            raise
        except Exception as exc:
            # Откатываем транзакцию, чтобы не оставить частично примененных изменений
            await db_session.rollback()
            log.error(f"Ошибка при операции '{action}': {exc}", exc_info=True)
            raise
