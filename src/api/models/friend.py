"""Модель SQLAlchemy для направленной связи дружбы."""

from sqlalchemy import String, UniqueConstraint
from sqlalchemy import Enum as SqlEnum
from sqlalchemy.orm import Mapped, mapped_column

from src.tracker.models import FriendStatus

from .base import Base


class FriendEdge(Base):
    """
    Направленная связь дружбы `user_id -> friend_id`.

    Attributes:
        id: Первичный ключ (унаследован от Base).
        user_id: Владелец связи (отправитель заявки).
        friend_id: Адресат заявки.
        status: pending или accepted.
        created_at: Время создания (унаследовано от TimestampMixin).
        updated_at: Время последнего обновления (унаследовано от TimestampMixin).
    """

    __tablename__ = "friends"

    user_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    friend_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    status: Mapped[FriendStatus] = mapped_column(
        SqlEnum(
            FriendStatus,
            name="friend_status_enum",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        default=FriendStatus.PENDING,
        nullable=False,
    )

    # Одна связь на упорядоченную пару пользователей
    __table_args__ = (UniqueConstraint("user_id", "friend_id", name="uq_friend_edge_pair"),)
