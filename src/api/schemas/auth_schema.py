"""Схемы Pydantic для аутентификации."""

from pydantic import BaseModel, Field


class TokenPayload(BaseModel):
    """
    Схема для данных (payload), закодированных в JWT провайдером аутентификации.
    Содержит ID пользователя и время истечения (exp).
    """

    user_id: str = Field(..., min_length=1, description="ID пользователя у провайдера аутентификации")
    exp: int | None = Field(None, description="Время истечения токена (Unix timestamp)")
