import os
from typing import AsyncGenerator

# Настройки читаются при импорте модулей src, поэтому окружение задается до них
os.environ.setdefault("DEVELOPMENT", "true")
os.environ.setdefault("DB_PASSWORD", "test_password")
os.environ.setdefault("JWT_SECRET_KEY", "test_secret_key_for_habit_progress_tests")
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite://")
os.environ.setdefault("LOG_LEVEL", "INFO")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from src.api.core.config import settings  # noqa: E402
from src.api.models import metadata_obj  # noqa: E402

# --- ФИКСТУРА БЕЗОПАСНОСТИ ---


@pytest.fixture(scope="session", autouse=True)
def verify_test_environment():
    """
    Проверяет, что тесты запускаются с корректными настройками окружения.

    Эта фикстура выполняется автоматически перед началом тестовой сессии.
    """
    assert settings.DEVELOPMENT is True, (
        "❌ ОШИБКА КОНФИГУРАЦИИ: Тесты должны запускаться в режиме разработки/тестирования (DEVELOPMENT=True)."
    )

    # Тесты работают только с базой в памяти, рабочая база не затрагивается
    assert settings.IS_SQLITE, (
        f"❌ ОПАСНОСТЬ: Тесты пытаются использовать базу '{settings.DATABASE_URL}'. "
        "Ожидалась SQLite в памяти (DATABASE_URL_OVERRIDE=sqlite+aiosqlite://)."
    )


# --- ГЛОБАЛЬНЫЕ ФИКСТУРЫ ДЛЯ ВСЕГО ПРОЕКТА ---


@pytest_asyncio.fixture(scope="function")
async def async_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    Создает движок SQLite в памяти со свежей схемой для каждого теста.

    StaticPool держит одно соединение, иначе каждая сессия видела бы свою пустую базу.
    """
    engine = create_async_engine(
        str(settings.DATABASE_URL),
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as connection:
        await connection.run_sync(metadata_obj.create_all)

    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """
    Предоставляет сессию БД для теста.

    Сервисы сами фиксируют транзакции, поэтому изоляция обеспечивается отдельной базой на каждый тест.
    """
    session_factory = async_sessionmaker(bind=async_engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session
