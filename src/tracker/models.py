"""
Модели документов трекера.

Имена полей при сериализации совпадают с контрактом хранилища (camelCase:
`weeklyProgress`, `startDate`, `createdAt`, ...). Модели неизменяемы: любая операция
над привычкой возвращает новое значение, а не меняет существующее.
"""

import datetime as dt
from enum import StrEnum
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from .exceptions import ValidationError

# Цвет привычки, если у ее первого тега нет своего цвета
DEFAULT_HABIT_COLOR = "#4F46E5"

# Количество дней в недельной записи (понедельник..воскресенье)
DAYS_IN_WEEK = 7


class HabitFrequency(StrEnum):
    """Режим частоты, определяющий смысл поля `target`."""

    DAILY = "daily"  # Каждый день, target не используется в расчете
    WEEKLY = "weekly"  # Раз в неделю
    CUSTOM = "custom"  # N раз в неделю


class DayStatus(StrEnum):
    """Статус дня. NEUTRAL - полноценное третье состояние, а не отсутствие отметки."""

    NEUTRAL = "neutral"
    COMPLETED = "completed"
    FAILED = "failed"


class FriendStatus(StrEnum):
    """Статус направленной связи дружбы."""

    PENDING = "pending"
    ACCEPTED = "accepted"


# Цель по умолчанию для каждого режима частоты (как в форме создания привычки)
DEFAULT_TARGETS: dict[HabitFrequency, int] = {
    HabitFrequency.DAILY: 7,
    HabitFrequency.WEEKLY: 1,
    HabitFrequency.CUSTOM: 3,
}


class DocumentModel(BaseModel):
    """Базовая модель документа с camelCase алиасами."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,  # Допускаем и snake_case имена при создании в коде
        from_attributes=True,  # Позволяет собирать документы из ORM объектов
        frozen=True,
        extra="ignore",
    )


class DayEntry(DocumentModel):
    """Статус одного календарного дня."""

    date: dt.date = Field(..., description="Дата (YYYY-MM-DD)")
    status: DayStatus = Field(default=DayStatus.NEUTRAL, description="Статус дня")


class WeeklyRecord(DocumentModel):
    """Недельная запись: понедельник и ровно 7 дней начиная с него."""

    start_date: dt.date = Field(..., description="Понедельник недели (YYYY-MM-DD)")
    days: tuple[DayEntry, ...] = Field(..., description="Дни с понедельника по воскресенье")

    @model_validator(mode="after")
    def check_week_shape(self) -> "WeeklyRecord":
        if self.start_date.weekday() != 0:
            raise ValueError(f"Неделя должна начинаться с понедельника, получено {self.start_date}")

        if len(self.days) != DAYS_IN_WEEK:
            raise ValueError(f"Недельная запись должна содержать {DAYS_IN_WEEK} дней, получено {len(self.days)}")

        for offset, day in enumerate(self.days):
            expected = self.start_date + dt.timedelta(days=offset)
            if day.date != expected:
                raise ValueError(f"День {offset} недели {self.start_date} должен быть {expected}, получено {day.date}")

        return self


def _collapse_tags(tags: Any) -> Any:
    """Убирает повторы тегов, сохраняя порядок первого появления."""
    if isinstance(tags, (list, tuple)):
        return tuple(dict.fromkeys(tags))
    return tags


class Habit(DocumentModel):
    """
    Привычка пользователя вместе с ее недельными записями.

    Attributes:
        id: Идентификатор, выданный хранилищем.
        user_id: Владелец привычки.
        name: Название.
        description: Описание (опционально).
        frequency: Режим частоты.
        target: Цель; смысл зависит от частоты.
        tags: Метки категорий (без повторов, порядок не важен для расчетов).
        color: Цвет отображения.
        created_at: Время создания.
        weekly_progress: Недельные записи, новые сначала.
        order: Позиция в списке пользователя.
    """

    id: str
    user_id: str | None = None
    name: str
    description: str | None = None
    frequency: HabitFrequency = HabitFrequency.DAILY
    target: int = 0
    tags: tuple[str, ...] = ()
    color: str = DEFAULT_HABIT_COLOR
    created_at: dt.datetime
    weekly_progress: tuple[WeeklyRecord, ...] = ()
    order: int = 0

    @field_validator("tags", mode="before")
    @classmethod
    def collapse_tags(cls, value: Any) -> Any:
        return _collapse_tags(value)

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags


class HabitDraft(DocumentModel):
    """Данные новой привычки, прошедшие проверку на границе ввода."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    frequency: HabitFrequency = HabitFrequency.DAILY
    target: int = Field(..., gt=0)
    tags: tuple[str, ...] = ()
    color: str = DEFAULT_HABIT_COLOR

    @field_validator("tags", mode="before")
    @classmethod
    def collapse_tags(cls, value: Any) -> Any:
        return _collapse_tags(value)

    @model_validator(mode="before")
    @classmethod
    def fill_default_target(cls, data: Any) -> Any:
        # Цель по умолчанию зависит от частоты
        if not isinstance(data, dict) or data.get("target") is not None:
            return data

        try:
            frequency = HabitFrequency(data.get("frequency", HabitFrequency.DAILY))
        except ValueError:
            # Неизвестную частоту отклонит валидация поля frequency
            return data

        return {**data, "target": DEFAULT_TARGETS[frequency]}


class HabitUpdate(DocumentModel):
    """Частичное обновление полей привычки. Передаются только явно заданные поля."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    frequency: HabitFrequency | None = None
    target: int | None = Field(default=None, gt=0)
    tags: tuple[str, ...] | None = None
    color: str | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def collapse_tags(cls, value: Any) -> Any:
        return _collapse_tags(value)

    def changed_fields(self) -> dict[str, Any]:
        """Словарь явно заданных полей (snake_case) для локального слияния."""
        data = self.model_dump(exclude_unset=True)
        # Явный None допустим только для описания, обязательные поля им не затираются
        return {field: value for field, value in data.items() if value is not None or field == "description"}

    def to_document(self) -> dict[str, Any]:
        """Те же поля в формате документа хранилища (camelCase, JSON-совместимые значения)."""
        return self.model_dump(mode="json", by_alias=True, include=set(self.changed_fields()))


class FriendEdge(DocumentModel):
    """Направленная связь дружбы: владелец `user_id` -> цель `friend_id`."""

    id: str
    user_id: str
    friend_id: str
    status: FriendStatus = FriendStatus.PENDING
    created_at: dt.datetime | None = None


class UserProfile(DocumentModel):
    """Профиль пользователя."""

    id: str
    email: str
    display_name: str
    photo_url: str | None = Field(default=None, alias="photoURL")
    created_at: dt.datetime | None = None


class DateRange(NamedTuple):
    """Диапазон дат, обе границы включительно."""

    start: dt.date
    end: dt.date

    def contains(self, day: dt.date) -> bool:
        return self.start <= day <= self.end


def build_habit_draft(**fields: Any) -> HabitDraft:
    """
    Собирает черновик привычки из сырых данных формы.

    Raises:
        ValidationError: Если название пустое, цель <= 0 или частота неизвестна.
    """
    try:
        return HabitDraft(**fields)
    except PydanticValidationError as exc:
        raise ValidationError(
            message=f"Некорректные данные привычки: {exc.errors(include_url=False)}",
            error_type="invalid_habit_draft",
        ) from exc


def build_habit_update(**fields: Any) -> HabitUpdate:
    """
    Собирает частичное обновление привычки из сырых данных формы.

    Raises:
        ValidationError: Если переданные поля некорректны.
    """
    try:
        return HabitUpdate(**fields)
    except PydanticValidationError as exc:
        raise ValidationError(
            message=f"Некорректные поля привычки: {exc.errors(include_url=False)}",
            error_type="invalid_habit_update",
        ) from exc
