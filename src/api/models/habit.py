"""Модель SQLAlchemy для документа привычки."""

from typing import Any

from sqlalchemy import Integer, String, Text
from sqlalchemy import Enum as SqlEnum
from sqlalchemy.orm import Mapped, mapped_column

from src.tracker.models import DEFAULT_HABIT_COLOR, HabitFrequency

from .base import Base, DocumentJSON


class Habit(Base):
    """
    Документ привычки пользователя.

    Теги и недельные записи хранятся как JSON в формате документа
    (`[{"startDate": ..., "days": [{"date": ..., "status": ...}]}]`).

    Attributes:
        id: Первичный ключ (унаследован от Base).
        user_id: ID владельца.
        name: Название привычки.
        description: Описание привычки (может быть None).
        frequency: Режим частоты (daily, weekly, custom).
        target: Цель; смысл зависит от частоты.
        tags: Список тегов.
        color: Цвет отображения.
        weekly_progress: Недельные записи.
        order: Позиция в списке пользователя.
        created_at: Время создания (унаследовано от TimestampMixin).
        updated_at: Время последнего обновления (унаследовано от TimestampMixin).
    """

    __tablename__ = "habits"

    user_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    frequency: Mapped[HabitFrequency] = mapped_column(
        SqlEnum(
            HabitFrequency,
            name="habit_frequency_enum",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        default=HabitFrequency.DAILY,
        nullable=False,
    )
    target: Mapped[int] = mapped_column(Integer, nullable=False)
    tags: Mapped[list[str]] = mapped_column(DocumentJSON, default=list, nullable=False)
    color: Mapped[str] = mapped_column(String(32), default=DEFAULT_HABIT_COLOR, nullable=False)
    weekly_progress: Mapped[list[dict[str, Any]]] = mapped_column(DocumentJSON, default=list, nullable=False)
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False, index=True)
