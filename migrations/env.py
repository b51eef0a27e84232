import logging

from alembic import context
from sqlalchemy import engine_from_config, pool

# Импортируем метаданные всех моделей документов
from src.api.core.config import settings
from src.api.models import metadata_obj
from src.core_shared.logging_setup import setup_logger

# Настройка логирования

# Получаем базовый логгер Loguru
loguru_logger = setup_logger("Alembic", log_level_override=settings.LOG_LEVEL)


class InterceptHandler(logging.Handler):
    """Перехватывает логи стандартного модуля logging и перенаправляет их в Loguru."""

    # Получаем соответствующий уровень логгера Loguru
    def emit(self, record):
        try:
            level = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Ищем, откуда был вызван лог, чтобы правильно отобразить stack trace
        frame, depth = logging.currentframe(), 2

        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger_opt = loguru_logger.opt(depth=depth, exception=record.exc_info)
        logger_opt.log(level, record.getMessage())


# Подменяем logging
logging.basicConfig(handlers=[InterceptHandler()], level=logging.INFO, force=True)

# Отключаем лишний шум
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

config = context.config

# Указываем Alembic на метаданные моделей (с соглашением об именовании ограничений)
target_metadata = metadata_obj

# URL, переданный извне (например, `alembic -x` или программная конфигурация), имеет приоритет
current_db_url = config.get_main_option("sqlalchemy.url") or str(settings.DATABASE_URL)

if current_db_url.startswith("sqlite"):
    # Для SQLite схема создается приложением при старте, миграции рассчитаны на PostgreSQL
    loguru_logger.warning("Миграции Alembic предназначены для PostgreSQL, получен URL SQLite.")


def run_migrations_offline() -> None:
    """Генерирует SQL миграций без подключения к базе данных."""
    context.configure(
        url=current_db_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Применяет миграции через синхронное подключение (psycopg поддерживает оба режима)."""
    connectable_config = config.get_section(config.config_ini_section, {})
    connectable_config["sqlalchemy.url"] = current_db_url

    connectable = engine_from_config(
        connectable_config,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata, compare_type=True)

        with context.begin_transaction():
            context.run_migrations()

    loguru_logger.info(f"Миграции применены к {connectable.url.render_as_string(hide_password=True)}")


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
