from datetime import date

import pytest

from src.tracker.exceptions import ValidationError
from src.tracker.models import (
    DEFAULT_HABIT_COLOR,
    HabitFrequency,
    WeeklyRecord,
    build_habit_draft,
    build_habit_update,
)
from src.tracker.tags import Tag, TagRegistry


@pytest.mark.parametrize(
    "frequency, expected_target",
    [(HabitFrequency.DAILY, 7), (HabitFrequency.WEEKLY, 1), (HabitFrequency.CUSTOM, 3)],
)
def test_draft_default_target_depends_on_frequency(frequency: HabitFrequency, expected_target: int):
    draft = build_habit_draft(name="Stretch", frequency=frequency)

    assert draft.target == expected_target
    assert draft.color == DEFAULT_HABIT_COLOR


def test_draft_strips_name_and_collapses_tags():
    draft = build_habit_draft(name="  Stretch  ", tags=["Health", "Health", "Morning"])

    assert draft.name == "Stretch"
    assert draft.tags == ("Health", "Morning")


@pytest.mark.parametrize(
    "fields",
    [
        {"name": "   "},
        {"name": "Stretch", "target": 0},
        {"name": "Stretch", "frequency": "hourly"},
    ],
)
def test_draft_rejects_invalid_input(fields: dict):
    with pytest.raises(ValidationError) as exc_info:
        build_habit_draft(**fields)

    assert exc_info.value.error_type == "invalid_habit_draft"


def test_update_keeps_only_explicit_fields():
    update = build_habit_update(name="Stretch more", description=None, target=None)

    assert update.changed_fields() == {"name": "Stretch more", "description": None}
    assert update.to_document() == {"name": "Stretch more", "description": None}


def test_update_document_uses_camel_case_json():
    update = build_habit_update(frequency="weekly", tags=["A", "A", "B"])

    assert update.to_document() == {"frequency": "weekly", "tags": ["A", "B"]}


def test_update_rejects_non_positive_target():
    with pytest.raises(ValidationError):
        build_habit_update(target=-1)


def test_weekly_record_parses_document():
    record = WeeklyRecord.model_validate(
        {
            "startDate": "2024-03-04",
            "days": [{"date": f"2024-03-{day:02d}", "status": "neutral"} for day in range(4, 11)],
        }
    )

    assert record.start_date == date(2024, 3, 4)
    assert record.model_dump(mode="json", by_alias=True)["days"][6] == {"date": "2024-03-10", "status": "neutral"}


@pytest.mark.parametrize(
    "start, days",
    [
        ("2024-03-05", range(5, 12)),  # не понедельник
        ("2024-03-04", range(4, 10)),  # 6 дней
        ("2024-03-04", [4, 5, 6, 7, 8, 9, 11]),  # пропуск дня
    ],
)
def test_weekly_record_rejects_broken_shape(start: str, days):
    document = {"startDate": start, "days": [{"date": f"2024-03-{day:02d}"} for day in days]}

    with pytest.raises(ValueError):
        WeeklyRecord.model_validate(document)


# --- Теги ---


def test_tag_registry_add_update_delete():
    registry = TagRegistry().add_tag(Tag(name="Health", color="#16A34A", habit_count=5))

    # Счетчик при добавлении сбрасывается
    assert registry.get("Health").habit_count == 0

    with pytest.raises(ValidationError):
        registry.add_tag(Tag(name="Health"))

    # Теги различаются с учетом регистра
    registry = registry.add_tag(Tag(name="health"))
    assert [tag.name for tag in registry.tags] == ["Health", "health"]

    registry = registry.update_tag("health", Tag(name="Mind", color="#9333EA"))
    assert registry.get_color("Mind") == "#9333EA"

    registry = registry.delete_tag("Mind")
    assert registry.get("Mind") is None


def test_tag_counts_are_derived_from_habits(habit_factory):
    registry = TagRegistry(tags=(Tag(name="Health"), Tag(name="Mind")))
    habits = [
        habit_factory("a", tags=("Health",)),
        habit_factory("b", tags=("Health", "Mind")),
    ]

    counted = registry.with_habit_counts(habits)

    assert [(tag.name, tag.habit_count) for tag in counted.tags] == [("Health", 2), ("Mind", 1)]
    assert [habit.id for habit in TagRegistry.habits_by_tag("Mind", habits)] == ["b"]
    # Исходный реестр не изменился
    assert registry.get("Health").habit_count == 0


def test_color_for_new_habit():
    registry = TagRegistry(tags=(Tag(name="Health", color="#16A34A"),))

    assert registry.color_for(["Health", "Mind"]) == "#16A34A"
    assert registry.color_for(["Mind"]) == DEFAULT_HABIT_COLOR
    assert registry.color_for([]) == DEFAULT_HABIT_COLOR
