"""Domain models for the artist catalog."""
from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class InvalidPayload(ValueError):
    """Raised when a decoded JSON payload cannot be read as an Artist."""


# JSON key -> attribute name, in the order the API emits them.
JSON_FIELDS = {
    "id": "id",
    "image": "image",
    "name": "name",
    "members": "members",
    "creationDate": "creation_date",
    "firstAlbum": "first_album",
    "locations": "locations",
    "concertDates": "concert_dates",
    "relations": "relations",
}

_INT_FIELDS = {"id", "creationDate"}
_LIST_FIELDS = {"members"}


@dataclass
class Artist:
    """A catalog entry. ``id`` is owned by the store."""

    id: int = 0
    name: str = ""
    image: str = ""
    members: List[str] = field(default_factory=list)
    creation_date: int = 0
    first_album: str = ""
    locations: str = ""
    concert_dates: str = ""
    relations: str = ""

    @classmethod
    def from_payload(cls, data: Any) -> "Artist":
        """Build an Artist from a decoded JSON object.

        Missing keys keep their zero value and unknown keys are ignored. A
        non-object payload or a value of the wrong JSON type raises
        InvalidPayload.
        """

        if not isinstance(data, dict):
            raise InvalidPayload("artist payload must be a JSON object")

        values: Dict[str, Any] = {}
        for key, attr in JSON_FIELDS.items():
            if key not in data:
                continue
            value = data[key]
            if value is None:
                # JSON null leaves the zero value in place
                continue
            if key in _INT_FIELDS:
                if isinstance(value, bool) or not isinstance(value, int):
                    raise InvalidPayload(f"'{key}' must be an integer")
            elif key in _LIST_FIELDS:
                if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
                    raise InvalidPayload(f"'{key}' must be an array of strings")
                value = list(value)
            elif not isinstance(value, str):
                raise InvalidPayload(f"'{key}' must be a string")
            values[attr] = value
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return {key: _plain(getattr(self, attr)) for key, attr in JSON_FIELDS.items()}

    def copy(self) -> "Artist":
        return replace(self, members=list(self.members))

    def with_id(self, artist_id: int) -> "Artist":
        return replace(self, id=artist_id, members=list(self.members))

    def overwrite_from(self, other: "Artist") -> None:
        """Copy every field except ``id`` from ``other``."""

        for item in fields(self):
            if item.name == "id":
                continue
            value = getattr(other, item.name)
            setattr(self, item.name, list(value) if isinstance(value, list) else value)


def _plain(value: Any) -> Any:
    return list(value) if isinstance(value, list) else value


class Outcome(str, Enum):
    OK = "ok"
    NOT_FOUND = "not found"
    INVALID = "invalid"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of an operation that can miss or reject its input."""

    outcome: Outcome
    value: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, value: Optional[T] = None) -> "Result[T]":
        return cls(Outcome.OK, value=value)

    @classmethod
    def not_found(cls, error: str = "not found") -> "Result[T]":
        return cls(Outcome.NOT_FOUND, error=error)

    @classmethod
    def invalid(cls, error: str) -> "Result[T]":
        return cls(Outcome.INVALID, error=error)

    @property
    def is_ok(self) -> bool:
        return self.outcome is Outcome.OK
