from typing import AsyncGenerator

from httpx import AsyncClient
from sqlalchemy.exc import SQLAlchemyError
from starlette import status

from src.api.core.database import get_db_session
from src.api.main import app


class UnavailableSession:
    """Сессия, у которой нет подключения к базе данных."""

    async def execute(self, *args, **kwargs):
        raise SQLAlchemyError("connection refused")


async def test_health_check_returns_ok(test_client: AsyncClient):
    """Проверяет, что эндпоинт /healthcheck возвращает 200 OK и сообщает о доступности базы данных."""

    # Arrange
    url = "/healthcheck"

    # Act
    response = await test_client.get(url)

    # Assert
    assert response.status_code == status.HTTP_200_OK

    response_json = response.json()
    assert response_json["api_status"] == "ok"
    assert response_json["dependencies"]["database"] == "ok"


async def test_health_check_reports_database_error(test_client: AsyncClient):
    """Проверяет, что при недоступной базе данных /healthcheck возвращает 503."""

    # Arrange
    async def override_get_db_session() -> AsyncGenerator[UnavailableSession, None]:
        yield UnavailableSession()

    app.dependency_overrides[get_db_session] = override_get_db_session

    # Act
    response = await test_client.get("/healthcheck")

    # Assert
    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.json() == {"api_status": "ok", "dependencies": {"database": "error"}}
