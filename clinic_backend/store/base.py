"""Document store interface used by every service.

Documents are plain dicts. ``get`` and ``query`` return copies that carry the
document id under ``"id"``; the id is never persisted inside the payload.
"""

import operator
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any, Iterable, Sequence

Filter = tuple[str, str, Any]

FILTER_OPERATORS = {
    '==': operator.eq,
    '<': operator.lt,
    '<=': operator.le,
    '>': operator.gt,
    '>=': operator.ge,
}


class DocumentStore(ABC):
    @abstractmethod
    def create(self, collection: str, data: dict, doc_id: str | None = None) -> str:
        """Insert a document (overwriting ``doc_id`` if given) and return its id."""

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> dict | None:
        ...

    @abstractmethod
    def update(self, collection: str, doc_id: str, data: dict) -> None:
        """Merge ``data`` into an existing document; NotFoundError if it is missing."""

    @abstractmethod
    def delete(self, collection: str, doc_id: str) -> None:
        ...

    @abstractmethod
    def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict]:
        ...

    @abstractmethod
    def delete_many(self, collection: str, doc_ids: Iterable[str]) -> None:
        """Delete all ``doc_ids`` in one all-or-nothing batch."""


def validate_filters(filters: Sequence[Filter]) -> None:
    for field, op, _ in filters:
        if op not in FILTER_OPERATORS:
            raise ValueError(f'Unsupported filter operator {op!r} on {field!r}')


def matches_filters(document: dict, filters: Sequence[Filter]) -> bool:
    for field, op, expected in filters:
        try:
            if not FILTER_OPERATORS[op](document.get(field), expected):
                return False
        except TypeError:
            # Values of different types never satisfy a range comparison.
            return False
    return True


def sort_key(value: Any) -> tuple:
    """Total ordering across mixed value types: null, bool, number, timestamp, string, other."""
    if value is None:
        return (0, 0)
    if isinstance(value, bool):
        return (1, int(value))
    if isinstance(value, (int, float)):
        return (2, value)
    if isinstance(value, datetime):
        return (3, value.timestamp())
    if isinstance(value, date):
        return (3, datetime.combine(value, datetime.min.time()).timestamp())
    if isinstance(value, str):
        return (4, value)
    return (5, str(value))
