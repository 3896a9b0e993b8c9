from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

MAX_NOTES_LENGTH = 600


class CamelModel(BaseModel):
    """Snake-case attributes, camelCase on the wire and in stored documents."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageResponse(BaseModel):
    message: str


def normalize_required_text(value: str, label: str) -> str:
    normalized = value.strip()
    if not normalized:
        raise ValueError(f'{label} is required.')
    return normalized


def normalize_notes(value: str | None) -> str | None:
    if value is None:
        return None

    normalized = value.strip()
    if not normalized:
        return None

    if len(normalized) > MAX_NOTES_LENGTH:
        raise ValueError(f'Notes must be {MAX_NOTES_LENGTH} characters or fewer.')

    return normalized


def sent_changes(model: BaseModel, clearable: tuple[str, ...] = ('notes',)) -> dict:
    """Fields the caller sent, keyed by stored (camelCase) name.

    An explicit null is dropped except on ``clearable`` fields, where it clears the value.
    """
    sent = model.model_dump(exclude_unset=True, by_alias=True)
    return {key: value for key, value in sent.items() if value is not None or key in clearable}


def reject_empty_date(value: Any, label: str) -> Any:
    if isinstance(value, str) and not value.strip():
        raise ValueError(f'{label} cannot be empty.')
    return value
