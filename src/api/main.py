"""
Приложение FastAPI сервиса хранения документов трекера привычек.

Отвечает за:
- Сборку экземпляра FastAPI (роутеры, обработчики исключений).
- Жизненный цикл: подключение к БД (схема PostgreSQL создается миграциями Alembic, схема SQLite - при старте).
- Проверку работоспособности (health check) для мониторинга и оркестрации.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from fastapi import FastAPI, Response, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src.api.core.config import settings
from src.api.core.database import db
from src.api.core.dependencies import DBSession
from src.api.core.exceptions import setup_exception_handlers
from src.api.core.logging import api_log as log
from src.api.routes import api_router
from src.core_shared.sentry_sdk_setup import setup_sentry

# Sentry должен быть инициализирован до создания экземпляра FastAPI
if settings.SENTRY_DSN:
    setup_sentry(settings, log_level=settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:  # pragma: no cover
    """
    Подключает БД при старте приложения и отключает при остановке.

    Ошибка подключения при старте не дает приложению запуститься в нерабочем состоянии.
    """
    log.info("Инициализация приложения...")
    try:
        await db.connect()
        if settings.IS_SQLITE:
            await db.create_schema()
        yield
    except Exception as exc:
        log.critical(f"Критическая ошибка при старте приложения: {exc}", exc_info=True)
        raise
    finally:
        await db.disconnect()
        log.info("Приложение остановлено.")


def create_app() -> FastAPI:
    """
    Создает и конфигурирует экземпляр приложения FastAPI.

    Returns:
        FastAPI: Сконфигурированный экземпляр приложения.
    """
    log.info(f"Создание приложения '{settings.PROJECT_NAME}@{settings.API_VERSION}' (DEVELOPMENT={settings.DEVELOPMENT})")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.API_VERSION,
        debug=settings.DEVELOPMENT,
        lifespan=lifespan,
        description="Хранилище документов привычек, профилей и связей дружбы",
    )

    setup_exception_handlers(app)

    # Все документные эндпоинты доступны под /api/v1
    app.include_router(api_router, prefix="/api")

    app.add_api_route(
        "/healthcheck",
        health_check,
        methods=["GET"],
        tags=["Health Check"],
        summary="Проверка работоспособности сервиса и его зависимостей",
        description="Возвращает 503, если база данных недоступна.",
    )

    return app


async def health_check(response: Response, db_session: DBSession) -> dict[str, Any]:
    """
    Проверяет доступность API и базы данных.

    Returns:
        dict: `{"api_status": "ok", "dependencies": {"database": "ok" | "error"}}`.
    """
    try:
        await db_session.execute(text("SELECT 1"))
        database_status = "ok"
    except SQLAlchemyError as exc:
        log.warning(f"Health check провален: нет подключения к базе данных ({exc}).")
        database_status = "error"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return {"api_status": "ok", "dependencies": {"database": database_status}}


# Основной экземпляр приложения
app = create_app()
