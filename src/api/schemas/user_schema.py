"""Схемы Pydantic для профиля пользователя."""

from datetime import datetime

from pydantic import Field

from .base_schema import BaseSchema


class UserSchemaBase(BaseSchema):
    """Базовая схема для профиля пользователя."""

    email: str = Field(..., min_length=3, max_length=255, description="Email пользователя")
    display_name: str = Field(..., min_length=1, max_length=100, description="Отображаемое имя")
    photo_url: str | None = Field(None, alias="photoURL", max_length=500, description="URL аватара")


class UserSchemaUpsert(UserSchemaBase):
    """Схема для создания или замены собственного профиля. ID берется из JWT токена."""


class UserSchemaRead(UserSchemaBase):
    """Схема для чтения профиля пользователя (ответа API)."""

    id: str = Field(..., description="ID пользователя")
    created_at: datetime = Field(..., description="Время создания профиля")
