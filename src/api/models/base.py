"""Базовое определение модели для SQLAlchemy."""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import JSON, DateTime, MetaData, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Соглашение об именовании для внешних ключей и индексов
# https://docs.sqlalchemy.org/en/20/core/constraints.html#constraint-naming-conventions
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata_obj = MetaData(naming_convention=convention)

# Вложенные части документов (теги, недельные записи): JSONB в PostgreSQL, JSON в остальных БД
DocumentJSON = JSON().with_variant(JSONB(), "postgresql")


def generate_document_id() -> str:
    """ID документа, выдаваемый хранилищем."""
    return uuid4().hex


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """
    Миксин для добавления полей created_at и updated_at к моделям.

    Attributes:
        created_at: Время создания документа.
        updated_at: Время последнего обновления документа (автоматически обновляется при изменении).
    """

    # Значение ставится на стороне приложения: порядок "новые сначала" не зависит от точности часов БД
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        comment="Время создания документа",
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        onupdate=utc_now,
        comment="Время последнего обновления документа",
        nullable=False,
    )


class Base(DeclarativeBase, TimestampMixin):
    """
    Базовый класс для декларативных моделей SQLAlchemy.

    Предоставляет:
    - Стандартный __repr__.
    - Строковый первичный ключ 'id' (uuid4 hex, если не задан явно).
    - Поля created_at и updated_at (через TimestampMixin).
    - Настроенный metadata.
    """

    metadata = metadata_obj  # Применение соглашения об именовании

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=generate_document_id)

    def __repr__(self) -> str:
        """
        Возвращает строковое представление объекта модели.

        Пример: <Habit(id='3f2a...')>
        """
        return f"<{self.__class__.__name__}(id={self.id!r})>"
