from enum import Enum
from typing import TypeVar

from core.domain.errors import ValidationError
from core.domain.models.task import TaskPriority, TaskStatus

MIN_TITLE_LENGTH = 3
MIN_DESCRIPTION_LENGTH = 5

E = TypeVar("E", bound=Enum)


def invalid_choice_message(enum_cls: type[Enum], label: str) -> str:
    allowed = ", ".join(member.value for member in enum_cls)
    return f"Invalid {label}. Must be one of: {allowed}"


def _parse(enum_cls: type[E], value: E | str, label: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(invalid_choice_message(enum_cls, label)) from None


def parse_status(value: TaskStatus | str) -> TaskStatus:
    return _parse(TaskStatus, value, "status")


def parse_priority(value: TaskPriority | str) -> TaskPriority:
    return _parse(TaskPriority, value, "priority")


def clean_title(title: str | None) -> str:
    title = (title or "").strip()
    if len(title) < MIN_TITLE_LENGTH:
        raise ValidationError(
            f"Title must be at least {MIN_TITLE_LENGTH} characters long"
        )
    return title


def clean_description(description: str | None) -> str:
    description = (description or "").strip()
    if len(description) < MIN_DESCRIPTION_LENGTH:
        raise ValidationError(
            f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters long"
        )
    return description


def clean_tags(tags: list[str]) -> list[str]:
    """Quita espacios, descarta vacíos y duplicados conservando el orden."""
    seen: dict[str, None] = {}
    for tag in tags:
        tag = tag.strip()
        if tag:
            seen.setdefault(tag, None)
    return list(seen)
