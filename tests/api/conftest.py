from typing import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.core.database import get_db_session
from src.api.core.security import create_access_token
from src.api.main import app

# --- ФИКСТУРЫ, СПЕЦИФИЧНЫЕ ДЛЯ ТЕСТИРОВАНИЯ API ---

API_PREFIX = "/api/v1"


@pytest_asyncio.fixture(scope="function")
async def test_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Создает и предоставляет тестовый клиент FastAPI для каждого API-теста.

    Зависит от фикстуры `db_session` (в корневом conftest.py)
    для переопределения зависимости get_db_session.
    """

    # Функция для переопределения зависимости `get_db_session` в приложении
    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    # Применяем переопределение
    app.dependency_overrides[get_db_session] = override_get_db_session

    # Создаем транспорт для ASGI приложения
    transport = ASGITransport(app=app)

    # Создаем асинхронный HTTP-клиент с транспортом для взаимодействия с приложением
    async with AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client

    # Очищаем переопределение после теста
    del app.dependency_overrides[get_db_session]


@pytest.fixture
def auth_headers_for() -> Callable[[str], dict[str, str]]:
    """Фабрика заголовков авторизации для произвольного пользователя."""

    def make_headers(user_id: str) -> dict[str, str]:
        token = create_access_token(data={"user_id": user_id})
        return {"Authorization": f"Bearer {token}"}

    return make_headers


@pytest.fixture
def user_id() -> str:
    return "alice_uid"


@pytest.fixture
def another_user_id() -> str:
    return "bob_uid"


@pytest.fixture
def user_auth_headers(auth_headers_for: Callable[[str], dict[str, str]], user_id: str) -> dict[str, str]:
    return auth_headers_for(user_id)


@pytest.fixture
def another_auth_headers(auth_headers_for: Callable[[str], dict[str, str]], another_user_id: str) -> dict[str, str]:
    return auth_headers_for(another_user_id)


@pytest.fixture
def habit_document() -> dict:
    """Документ новой привычки в формате клиента (camelCase)."""
    return {
        "name": "Morning Run",
        "description": "5 km before work",
        "frequency": "daily",
        "target": 7,
        "tags": ["Health", "Sport"],
        "color": "#22C55E",
        "order": 1,
        "weeklyProgress": [
            {
                "startDate": "2024-03-04",
                "days": [
                    {"date": f"2024-03-{day:02d}", "status": "completed" if day == 4 else "neutral"}
                    for day in range(4, 11)
                ],
            }
        ],
    }
