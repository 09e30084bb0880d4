from __future__ import annotations

import logging
from typing import Dict, Iterable, Mapping, Optional

from .errors import InvalidArgument

logger = logging.getLogger(__name__)


def completion_ratio(raw_inputs_count: int, matches_count: int) -> float:
    """
    Fraction of raw inputs that carry a match.

    Returns 0.0 when there are no raw inputs. Stale matches (ids beyond the
    current import) are counted too, so the ratio can exceed 1.0.
    """
    if raw_inputs_count == 0:
        return 0.0
    return matches_count / raw_inputs_count


def _require_name(clean_name: str) -> str:
    if not clean_name or not clean_name.strip():
        raise InvalidArgument("clean name must not be blank")
    return clean_name


class AssignmentStore:
    """
    Mapping of raw input id to the clean name a user confirmed for it.

    Writes never check that the id or the clean name exist; unknown ids are
    plain inserts. There is no removal operation.
    """

    def __init__(self, matches: Optional[Mapping[int, str]] = None) -> None:
        self._matches: Dict[int, str] = dict(matches or {})

    def assign_one(self, raw_id: int, clean_name: str) -> None:
        self._matches[raw_id] = _require_name(clean_name)

    def assign_bulk(self, raw_ids: Iterable[int], clean_name: str) -> int:
        """
        Assign ``clean_name`` to every id in ``raw_ids``.

        The caller passes the exact target set (normally the ids visible
        under the current filter). The name is validated before anything is
        written, so a rejected call leaves the mapping untouched.

        Returns:
            The number of distinct ids written
        """
        name = _require_name(clean_name)
        targets = list(dict.fromkeys(raw_ids))
        updated = dict(self._matches)
        for raw_id in targets:
            updated[raw_id] = name
        self._matches = updated
        logger.debug("Assigned %r to %d raw input(s)", name, len(targets))
        return len(targets)

    def get(self, raw_id: int) -> Optional[str]:
        return self._matches.get(raw_id)

    def replace(self, matches: Mapping[int, str]) -> None:
        self._matches = dict(matches)

    @property
    def matches(self) -> Dict[int, str]:
        return dict(self._matches)

    @property
    def matched_count(self) -> int:
        return len(self._matches)

    def completion(self, raw_inputs_count: int) -> float:
        return completion_ratio(raw_inputs_count, self.matched_count)

    def __contains__(self, raw_id: object) -> bool:
        return raw_id in self._matches

    def __len__(self) -> int:
        return len(self._matches)
