"""
Реестр тегов (категорий) привычек.

Количество привычек у тега - производное значение: оно пересчитывается из текущего списка
привычек при каждом запросе и никогда не хранится как самостоятельный источник данных.
"""

from typing import Iterable

from pydantic import Field

from .exceptions import ValidationError
from .models import DEFAULT_HABIT_COLOR, DocumentModel, Habit


class Tag(DocumentModel):
    """Тег: уникальное имя (с учетом регистра), цвет и производное число привычек."""

    name: str = Field(..., min_length=1)
    color: str = DEFAULT_HABIT_COLOR
    habit_count: int = 0


class TagRegistry(DocumentModel):
    """Неизменяемый реестр тегов. Все изменения возвращают новый реестр."""

    tags: tuple[Tag, ...] = ()

    def get(self, name: str) -> Tag | None:
        return next((tag for tag in self.tags if tag.name == name), None)

    def add_tag(self, tag: Tag) -> "TagRegistry":
        """
        Добавляет тег со сброшенным счетчиком привычек.

        Raises:
            ValidationError: Если тег с таким именем уже есть.
        """
        if self.get(tag.name) is not None:
            raise ValidationError(message=f"Тег '{tag.name}' уже существует.", error_type="tag_exists")

        return self.model_copy(update={"tags": (*self.tags, tag.model_copy(update={"habit_count": 0}))})

    def update_tag(self, old_name: str, new_tag: Tag) -> "TagRegistry":
        """Заменяет тег `old_name`, сохраняя его текущий счетчик привычек."""
        tags = tuple(
            new_tag.model_copy(update={"habit_count": tag.habit_count}) if tag.name == old_name else tag
            for tag in self.tags
        )
        return self.model_copy(update={"tags": tags})

    def delete_tag(self, name: str) -> "TagRegistry":
        return self.model_copy(update={"tags": tuple(tag for tag in self.tags if tag.name != name)})

    def get_color(self, name: str) -> str | None:
        tag = self.get(name)
        return tag.color if tag else None

    def color_for(self, tags: Iterable[str]) -> str:
        """Цвет новой привычки: цвет ее первого тега или цвет по умолчанию."""
        first = next(iter(tags), None)
        return (self.get_color(first) if first else None) or DEFAULT_HABIT_COLOR

    @staticmethod
    def habits_by_tag(name: str, habits: Iterable[Habit]) -> list[Habit]:
        return [habit for habit in habits if habit.has_tag(name)]

    def with_habit_counts(self, habits: Iterable[Habit]) -> "TagRegistry":
        """Проекция реестра с пересчитанными счетчиками привычек."""
        habits = list(habits)
        tags = tuple(
            tag.model_copy(update={"habit_count": sum(1 for habit in habits if habit.has_tag(tag.name))})
            for tag in self.tags
        )
        return self.model_copy(update={"tags": tags})
