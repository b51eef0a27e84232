"""Базовые конфигурации и схемы для Pydantic."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """
    Базовая схема Pydantic с общей конфигурацией.

    Поля документов передаются в camelCase (`weeklyProgress`, `createdAt`, ...),
    в коде используются snake_case имена.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        from_attributes=True,  # Позволяет создавать схемы из ORM моделей
        populate_by_name=True,  # Позволяет использовать и alias, и имя поля
        extra="ignore",  # Игнорировать лишние поля при парсинге
    )
