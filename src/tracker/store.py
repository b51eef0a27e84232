"""
Доступ ядра к удаленному хранилищу документов.

`DocumentStore` описывает контракты запросов и записи, которые использует ядро.
`HttpDocumentStore` реализует их поверх HTTP API сервиса хранения.
"""

from typing import Any, Protocol, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .config import settings
from .logging import tracker_log as log
from .models import FriendEdge, FriendStatus, Habit, UserProfile

ModelType = TypeVar("ModelType", bound=BaseModel)


class StoreError(Exception):
    """
    Ошибка обращения к хранилищу.

    Используется для того, чтобы не пробрасывать исключения httpx в логику ядра.

    Attributes:
        status_code: HTTP статус ответа, если запрос дошел до сервиса.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class DocumentStore(Protocol):
    """Контракты хранилища, которые потребляет ядро."""

    async def fetch_habits(self, user_id: str) -> list[Habit]:
        """Все привычки пользователя: по `order` по возрастанию, затем по `createdAt` по убыванию."""
        ...

    async def add_habit(self, document: dict[str, Any]) -> Habit:
        """Сохраняет новую привычку текущего пользователя и возвращает ее с выданным ID."""
        ...

    async def update_habit(self, habit_id: str, fields: dict[str, Any]) -> None:
        """Частично обновляет документ привычки."""
        ...

    async def delete_habit(self, habit_id: str) -> None: ...

    async def commit_order_batch(self, orders: dict[str, int]) -> None:
        """Атомарно записывает новые значения `order` (все или ничего)."""
        ...

    async def fetch_friend_edges(self) -> list[FriendEdge]:
        """Связи, где `userId` - текущий пользователь."""
        ...

    async def find_friend_edges(self, user_id: str, friend_id: str) -> list[FriendEdge]:
        """Связи с точной парой (userId, friendId)."""
        ...

    async def add_friend_edge(self, friend_id: str) -> FriendEdge: ...

    async def update_friend_edge(self, edge_id: str, status: FriendStatus) -> None: ...

    async def delete_friend_edge(self, edge_id: str) -> None: ...

    async def fetch_user(self, user_id: str) -> UserProfile | None: ...

    async def search_users(self, prefix: str, limit: int) -> list[UserProfile]:
        """Поиск профилей по префиксу `displayName`."""
        ...


class HttpDocumentStore:
    """
    Асинхронный HTTP-клиент сервиса хранения документов.

    Обеспечивает:
    - Передачу токена пользователя, выданного провайдером аутентификации.
    - Преобразование ответов в модели документов.
    - Сведение сетевых и HTTP ошибок к StoreError.
    """

    def __init__(self, token: str, http_client: httpx.AsyncClient | None = None):
        """
        Args:
            token: JWT пользователя.
            http_client: Готовый клиент httpx (например, поверх ASGI транспорта в тестах).
                         Если None, создается клиент на `settings.API_V1_URL`.
        """
        self.token = token

        # Один клиент на время жизни хранилища ради connection pooling
        self.http_client = http_client or httpx.AsyncClient(
            base_url=settings.API_V1_URL,
            timeout=settings.API_TIMEOUT_SECONDS,
        )

    async def close(self) -> None:
        """Корректно закрывает сессию HTTP-клиента."""
        await self.http_client.aclose()

    async def _request(
        self,
        method: str,
        endpoint: str,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """
        Выполняет авторизованный запрос к API.

        Returns:
            Разобранный JSON ответа или None для 204 No Content.

        Raises:
            StoreError: При сетевой ошибке или статусе 4xx/5xx.
        """
        headers = {"Authorization": f"Bearer {self.token}"}

        try:
            log.debug(f"Store Request: {method} {endpoint}")
            response = await self.http_client.request(method, endpoint, json=json, params=params, headers=headers)
            response.raise_for_status()

        except httpx.HTTPStatusError as exc:
            log.warning(f"Хранилище вернуло ошибку {exc.response.status_code} на {method} {endpoint}: {exc.response.text}")
            raise StoreError(
                f"Ошибка запроса к хранилищу: {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc

        except httpx.RequestError as exc:
            log.error(f"Ошибка сети на {method} {endpoint}: {exc}")
            raise StoreError("Хранилище недоступно (сетевая ошибка).") from exc

        if response.status_code == httpx.codes.NO_CONTENT:
            return None

        return response.json()

    @staticmethod
    def _parse(model: type[ModelType], payload: Any) -> ModelType:
        try:
            return model.model_validate(payload)
        except PydanticValidationError as exc:
            log.error(f"Хранилище вернуло некорректный документ {model.__name__}: {exc}")
            raise StoreError(f"Некорректный документ {model.__name__} в ответе хранилища.") from exc

    def _parse_many(self, model: type[ModelType], payload: Any) -> list[ModelType]:
        return [self._parse(model, item) for item in payload or []]

    # --- Привычки ---

    async def fetch_habits(self, user_id: str) -> list[Habit]:
        return self._parse_many(Habit, await self._request("GET", f"/users/{user_id}/habits"))

    async def add_habit(self, document: dict[str, Any]) -> Habit:
        return self._parse(Habit, await self._request("POST", "/habits/", json=document))

    async def update_habit(self, habit_id: str, fields: dict[str, Any]) -> None:
        await self._request("PATCH", f"/habits/{habit_id}", json=fields)

    async def delete_habit(self, habit_id: str) -> None:
        await self._request("DELETE", f"/habits/{habit_id}")

    async def commit_order_batch(self, orders: dict[str, int]) -> None:
        items = [{"id": habit_id, "order": order} for habit_id, order in orders.items()]
        await self._request("POST", "/habits/order", json={"items": items})

    # --- Дружба ---

    async def fetch_friend_edges(self) -> list[FriendEdge]:
        return self._parse_many(FriendEdge, await self._request("GET", "/friends/"))

    async def find_friend_edges(self, user_id: str, friend_id: str) -> list[FriendEdge]:
        params = {"userId": user_id, "friendId": friend_id}
        return self._parse_many(FriendEdge, await self._request("GET", "/friends/lookup", params=params))

    async def add_friend_edge(self, friend_id: str) -> FriendEdge:
        return self._parse(FriendEdge, await self._request("POST", "/friends/", json={"friendId": friend_id}))

    async def update_friend_edge(self, edge_id: str, status: FriendStatus) -> None:
        await self._request("PATCH", f"/friends/{edge_id}", json={"status": FriendStatus(status).value})

    async def delete_friend_edge(self, edge_id: str) -> None:
        await self._request("DELETE", f"/friends/{edge_id}")

    # --- Пользователи ---

    async def fetch_user(self, user_id: str) -> UserProfile | None:
        try:
            payload = await self._request("GET", f"/users/{user_id}")
        except StoreError as exc:
            if exc.status_code == httpx.codes.NOT_FOUND:
                return None
            raise
        return self._parse(UserProfile, payload)

    async def search_users(self, prefix: str, limit: int) -> list[UserProfile]:
        params = {"prefix": prefix, "limit": limit}
        return self._parse_many(UserProfile, await self._request("GET", "/users/search", params=params))
