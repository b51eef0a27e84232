"""Настройка подключения к базе данных с использованием SQLAlchemy."""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.api.models import metadata_obj

from .config import settings
from .logging import api_log as log


def engine_options() -> dict[str, Any]:
    """
    Параметры движка в зависимости от СУБД.

    Для SQLite пул с переподключениями не нужен, для PostgreSQL соединения
    проверяются перед использованием и пересоздаются каждый час.
    """
    if settings.IS_SQLITE:
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True, "pool_recycle": 3600}


class Database:
    """
    Менеджер подключений к базе данных.

    Отвечает за:
    - Инициализацию движка и фабрики сессий
    - Проверку подключения при старте
    - Выдачу сессий
    """

    def __init__(self) -> None:
        self.engine: AsyncEngine | None = None
        self.session_factory: async_sessionmaker[AsyncSession] | None = None

    async def connect(self, **kwargs: Any) -> None:
        """
        Устанавливает подключение к базе данных по `settings.DATABASE_URL`.

        Args:
            **kwargs: Дополнительные параметры для create_async_engine (имеют приоритет).

        Raises:
            RuntimeError: При неудачной проверке подключения.
        """
        self.engine = create_async_engine(
            str(settings.DATABASE_URL),
            echo=settings.DEVELOPMENT,  # SQL запросы в лог в режиме DEVELOPMENT
            **{**engine_options(), **kwargs},
        )

        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,  # Управляем flush явно
        )

        await self._verify_connection()
        log.success("Подключение к базе данных установлено.")

    async def disconnect(self) -> None:
        """Корректное закрытие подключения к базе данных."""
        if self.engine:
            log.info("Закрытие подключения к базе данных...")
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None
            log.info("Подключение к базе данных закрыто.")

    async def create_schema(self) -> None:
        """Создает отсутствующие таблицы по метаданным моделей (существующие не изменяются)."""
        if not self.engine:
            raise RuntimeError("Движок БД не инициализирован.")

        async with self.engine.begin() as connection:
            await connection.run_sync(metadata_obj.create_all)
        log.info("Схема базы данных проверена.")

    async def _verify_connection(self) -> None:
        """
        Проверяет работоспособность подключения простым запросом.

        Raises:
            RuntimeError: Если проверка подключения не удалась.
        """
        if not self.session_factory:
            raise RuntimeError("Фабрика сессий не инициализирована.")
        try:
            async with self.session_factory() as session:
                await session.execute(text("SELECT 1"))
        except Exception as exc:
            log.critical(f"Ошибка подключения к базе данных: {exc}", exc_info=True)
            raise RuntimeError("Не удалось проверить подключение к БД.") from exc

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Асинхронный контекстный менеджер сессии БД с откатом при ошибке.

        Yields:
            AsyncSession: Экземпляр сессии БД.

        Raises:
            RuntimeError: При вызове до `db.connect()`.
        """
        if not self.session_factory:
            raise RuntimeError(
                "База данных не инициализирована. Вызовите `await db.connect()` перед использованием сессий."
            )

        session: AsyncSession = self.session_factory()

        try:
            yield session
        except Exception as exc:
            log.error(f"Ошибка во время сессии БД, выполняется откат: {exc}", exc_info=settings.DEVELOPMENT)
            await session.rollback()
            raise
        finally:
            await session.close()


# Глобальный экземпляр менеджера БД
db = Database()


# Dependency для FastAPI
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Зависимость FastAPI для получения асинхронной сессии базы данных.

    Yields:
        AsyncSession: Сессия базы данных, управляемая через `db.session()`.
    """
    async with db.session() as session:
        yield session
