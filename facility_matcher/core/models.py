"""
Domain models for facility name reconciliation.

These are plain data containers plus their conversion to and from the
JSON-compatible record that session stores persist.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional

RAW_INPUTS_FIELD = "rawInputs"
CLEAN_NAMES_FIELD = "cleanNames"
MATCHES_FIELD = "matches"
LAST_UPDATED_FIELD = "lastUpdated"


@dataclass(frozen=True, slots=True)
class RawInput:
    """One imported line of free-text facility name."""

    id: int
    """Zero-based position in the import batch it came from"""

    text: str

    def to_record(self) -> dict[str, Any]:
        return {"id": self.id, "text": self.text}

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "RawInput":
        return cls(id=int(record["id"]), text=str(record["text"]))


@dataclass(slots=True)
class Session:
    """
    Snapshot of one user's matching work.

    ``matches`` may reference raw ids or clean names that no longer exist;
    nothing here checks that.
    """

    raw_inputs: list[RawInput] = field(default_factory=list)
    clean_names: list[str] = field(default_factory=list)
    matches: dict[int, str] = field(default_factory=dict)
    last_updated: Optional[datetime] = None

    def to_record(self, now: Optional[datetime] = None) -> dict[str, Any]:
        stamp = now or datetime.now(timezone.utc)
        return {
            RAW_INPUTS_FIELD: [item.to_record() for item in self.raw_inputs],
            CLEAN_NAMES_FIELD: list(self.clean_names),
            MATCHES_FIELD: {str(raw_id): name for raw_id, name in self.matches.items()},
            LAST_UPDATED_FIELD: stamp.isoformat(),
        }


def _require_list(name: str, values: Any) -> None:
    # A bare string is iterable too and would split into characters.
    if not isinstance(values, list):
        raise TypeError(f"{name} must be a list, got {type(values).__name__}")


def parse_raw_inputs(values: Iterable[Mapping[str, Any]]) -> list[RawInput]:
    _require_list(RAW_INPUTS_FIELD, values)
    return [RawInput.from_record(value) for value in values]


def parse_clean_names(values: Iterable[Any]) -> list[str]:
    _require_list(CLEAN_NAMES_FIELD, values)
    return [str(value) for value in values]


def parse_matches(values: Mapping[Any, Any]) -> dict[int, str]:
    # Record keys are strings because JSON objects only allow string keys.
    return {int(key): str(value) for key, value in values.items()}


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None
