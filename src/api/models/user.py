"""Модель SQLAlchemy для профиля пользователя."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class User(Base):
    """
    Профиль пользователя.

    ID выдает провайдер аутентификации, хранилище его не генерирует.

    Attributes:
        id: Идентификатор пользователя у провайдера аутентификации (унаследован от Base).
        email: Email пользователя.
        display_name: Отображаемое имя (по нему работает поиск по префиксу).
        photo_url: URL аватара (может быть None).
        created_at: Время создания профиля (унаследовано от TimestampMixin).
        updated_at: Время последнего обновления профиля (унаследовано от TimestampMixin).
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), nullable=False)
    display_name: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    photo_url: Mapped[str | None] = mapped_column(String(500))
