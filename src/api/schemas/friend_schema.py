"""Схемы Pydantic для связи дружбы."""

from datetime import datetime

from pydantic import Field

from src.tracker.models import FriendStatus

from .base_schema import BaseSchema


class FriendEdgeSchemaCreate(BaseSchema):
    """Заявка в друзья. Отправитель берется из JWT токена."""

    friend_id: str = Field(..., min_length=1, description="ID адресата заявки")


class FriendEdgeSchemaUpdate(BaseSchema):
    """Смена статуса связи."""

    status: FriendStatus = Field(..., description="Новый статус связи")


class FriendEdgeSchemaRead(BaseSchema):
    """Схема для чтения связи дружбы (ответа API)."""

    id: str = Field(..., description="ID связи")
    user_id: str = Field(..., description="Владелец связи (отправитель заявки)")
    friend_id: str = Field(..., description="Адресат заявки")
    status: FriendStatus = Field(..., description="Статус связи")
    created_at: datetime = Field(..., description="Время создания связи")
