"""Схемы Pydantic для документа привычки."""

from datetime import datetime

from pydantic import Field, field_validator

from src.tracker.models import DEFAULT_HABIT_COLOR, HabitFrequency, WeeklyRecord

from .base_schema import BaseSchema


def _unique_tags(tags: list[str] | None) -> list[str] | None:
    # Повторы тегов схлопываются, порядок первого появления сохраняется
    return list(dict.fromkeys(tags)) if tags is not None else None


class HabitSchemaBase(BaseSchema):
    """Базовая схема для привычки."""

    name: str = Field(..., min_length=1, max_length=255, description="Название привычки")
    description: str | None = Field(None, description="Описание привычки (может отсутствовать)")
    frequency: HabitFrequency = Field(HabitFrequency.DAILY, description="Режим частоты")
    target: int = Field(..., gt=0, description="Цель; смысл зависит от частоты")
    tags: list[str] = Field(default_factory=list, description="Теги (категории)")
    color: str = Field(DEFAULT_HABIT_COLOR, max_length=32, description="Цвет отображения")


class HabitSchemaCreate(HabitSchemaBase):
    """Схема для создания новой привычки. Владелец берется из JWT токена."""

    weekly_progress: list[WeeklyRecord] = Field(default_factory=list, description="Недельные записи")
    order: int = Field(0, ge=0, description="Позиция в списке пользователя")

    @field_validator("tags")
    @classmethod
    def collapse_tags(cls, value: list[str]) -> list[str]:
        return _unique_tags(value) or []


class HabitSchemaUpdate(BaseSchema):
    """
    Схема для частичного обновления привычки.
    Все поля опциональны, применяются только переданные.
    """

    name: str | None = Field(None, min_length=1, max_length=255, description="Новое название привычки")
    description: str | None = Field(None, description="Новое описание привычки")
    frequency: HabitFrequency | None = Field(None, description="Новый режим частоты")
    target: int | None = Field(None, gt=0, description="Новая цель")
    tags: list[str] | None = Field(None, description="Новые теги")
    color: str | None = Field(None, max_length=32, description="Новый цвет")
    weekly_progress: list[WeeklyRecord] | None = Field(None, description="Полный новый журнал недель")
    order: int | None = Field(None, ge=0, description="Новая позиция")

    @field_validator("tags")
    @classmethod
    def collapse_tags(cls, value: list[str] | None) -> list[str] | None:
        return _unique_tags(value)


class HabitSchemaRead(HabitSchemaBase):
    """Схема для чтения документа привычки (ответа API)."""

    id: str = Field(..., description="ID привычки")
    user_id: str = Field(..., description="ID владельца")
    weekly_progress: list[WeeklyRecord] = Field(default_factory=list, description="Недельные записи")
    order: int = Field(..., description="Позиция в списке пользователя")
    created_at: datetime = Field(..., description="Время создания привычки")


class HabitOrderItem(BaseSchema):
    """Новое значение `order` одной привычки."""

    id: str = Field(..., min_length=1, description="ID привычки")
    order: int = Field(..., ge=0, description="Новая позиция")


class HabitOrderBatch(BaseSchema):
    """Пакет новых позиций, применяется целиком или не применяется вовсе."""

    items: list[HabitOrderItem] = Field(..., min_length=1, description="Новые позиции привычек")
