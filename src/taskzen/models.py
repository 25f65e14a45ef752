"""Task data model and the action result envelope."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError

from taskzen.errors import TaskZenError, ValidationError

T = TypeVar("T")

TITLE_REQUIRED = "Title is required."


class Task(BaseModel):
    """A task as owned by the remote task store."""

    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    description: str = ""
    completed: bool = False

    @field_validator("description", mode="before")
    @classmethod
    def _null_description(cls, value: object) -> object:
        return "" if value is None else value


def _require_title(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(TITLE_REQUIRED)
    return value


class TaskDraft(BaseModel):
    """Validated input for creating a task or editing all of its text fields."""

    title: str
    description: str | None = None

    @field_validator("title", mode="before")
    @classmethod
    def _title_present(cls, value: object) -> object:
        if value is None:
            raise ValueError(TITLE_REQUIRED)
        return value

    @field_validator("title")
    @classmethod
    def _title_not_empty(cls, value: str) -> str:
        return _require_title(value)


class TaskPatch(BaseModel):
    """Partial update; only explicitly set fields are sent to the server."""

    title: str | None = None
    description: str | None = None
    completed: bool | None = None

    @field_validator("title")
    @classmethod
    def _title_not_empty(cls, value: str | None) -> str | None:
        return None if value is None else _require_title(value)

    def payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude_none=True)


def _message_from(exc: PydanticValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid input."
    msg = str(errors[0].get("msg") or "Invalid input.")
    return msg.removeprefix("Value error, ")


def parse_draft(title: object, description: object = None) -> TaskDraft:
    """Validate form input into a draft.

    Raises:
        ValidationError: if the title is missing or blank.
    """

    try:
        return TaskDraft.model_validate({"title": title, "description": description})
    except PydanticValidationError as e:
        raise ValidationError(_message_from(e)) from e


def parse_patch(fields: dict[str, Any]) -> TaskPatch:
    """Validate a partial update.

    Raises:
        ValidationError: if a field is invalid or nothing would change.
    """

    if "id" in fields:
        raise ValidationError("Task id cannot be changed.")
    try:
        patch = TaskPatch.model_validate(fields)
    except PydanticValidationError as e:
        raise ValidationError(_message_from(e)) from e
    if not patch.payload():
        raise ValidationError("Nothing to update.")
    return patch


@dataclass(frozen=True, slots=True)
class ActionResult(Generic[T]):
    """Outcome of an action: either `data` or a human-readable `error`, never both."""

    data: T | None = None
    error: str | None = None
    error_kind: str | None = None

    def __post_init__(self) -> None:
        if self.error is not None and self.data is not None:
            raise ValueError("ActionResult cannot hold both data and an error")

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: T | None = None) -> ActionResult[T]:
        return cls(data=data)

    @classmethod
    def failure(cls, exc: TaskZenError) -> ActionResult[T]:
        return cls(error=exc.message, error_kind=exc.kind)
