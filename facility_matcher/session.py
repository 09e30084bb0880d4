"""
Session state for one user's matching work.

SessionModel owns the raw inputs, the clean-name list and the assignment
store, and snapshots all three to a SessionStore. Loading follows a
merge-if-present policy: only fields found in the stored record replace
local state.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Iterable, Optional, Sequence, Union

from .assignment import AssignmentStore
from .config import MatchingSettings
from .core.filtering import FilterResult, filter_raw_inputs
from .core.models import (
    CLEAN_NAMES_FIELD,
    LAST_UPDATED_FIELD,
    MATCHES_FIELD,
    RAW_INPUTS_FIELD,
    RawInput,
    Session,
    parse_clean_names,
    parse_matches,
    parse_raw_inputs,
    parse_timestamp,
)
from .core.similarity import as_percent
from .core.suggestions import suggest_clean_names
from .debounce import SearchDebouncer
from .errors import InvalidArgument, StoreError
from .io_formats import export_csv, parse_lines
from .io_formats import parse_raw_inputs as parse_raw_input_lines
from .store import SessionKey, SessionStore

logger = logging.getLogger(__name__)


class LoadStatus(str, Enum):
    LOADED = "loaded"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class SaveResult:
    ok: bool
    message: str


@dataclass(frozen=True, slots=True)
class LoadResult:
    status: LoadStatus
    message: str

    @property
    def ok(self) -> bool:
        return self.status is LoadStatus.LOADED


class SessionModel:
    def __init__(
        self,
        store: SessionStore,
        key: SessionKey,
        *,
        matching: Optional[MatchingSettings] = None,
    ) -> None:
        self.store = store
        self.key = key
        self.matching = matching or MatchingSettings()
        self.raw_inputs: list[RawInput] = []
        self.clean_names: list[str] = []
        self.assignments = AssignmentStore()
        self.last_updated: Optional[datetime] = None
        self.selected_clean_name: Optional[str] = None
        self.is_saving = False
        self.is_loading = False

    # -- collections -------------------------------------------------

    def import_raw_inputs(self, text: str) -> int:
        """
        Replace all raw inputs with the non-blank lines of ``text``.

        Existing matches are kept as they are, keyed by position, so they
        may now point at different inputs.
        """
        return self.set_raw_inputs(parse_raw_input_lines(text))

    def set_raw_inputs(self, raw_inputs: Sequence[RawInput]) -> int:
        if self.assignments.matched_count:
            logger.warning(
                "Re-import keeps %d existing match(es); they are keyed by line position and may no longer line up",
                self.assignments.matched_count,
            )
        self.raw_inputs = list(raw_inputs)
        logger.info("Imported %d raw input(s)", len(self.raw_inputs))
        return len(self.raw_inputs)

    def import_clean_names(self, text: str) -> int:
        """Append the lines of ``text`` to the clean-name list; returns how many were new."""
        return self.extend_clean_names(parse_lines(text))

    def extend_clean_names(self, names: Iterable[str]) -> int:
        known = set(self.clean_names)
        merged = list(self.clean_names)
        for name in names:
            name = name.strip()
            if name and name not in known:
                known.add(name)
                merged.append(name)
        added = len(merged) - len(self.clean_names)
        self.clean_names = merged
        logger.info("Added %d clean name(s) (%d total)", added, len(self.clean_names))
        return added

    def add_clean_name(self, name: str) -> bool:
        """Add a single clean name and select it. Blank and duplicate names are ignored."""
        name = name.strip()
        if not name or name in self.clean_names:
            return False
        self.clean_names = self.clean_names + [name]
        self.selected_clean_name = name
        return True

    def select_clean_name(self, name: str) -> None:
        if not name or not name.strip():
            raise InvalidArgument("clean name must not be blank")
        self.selected_clean_name = name

    # -- matching ----------------------------------------------------

    def visible_results(self, term: str, threshold: Optional[float] = None) -> list[FilterResult]:
        if threshold is None:
            threshold = self.matching.threshold
        return filter_raw_inputs(self.raw_inputs, term, threshold)

    def suggestions(self, term: str) -> list[str]:
        return suggest_clean_names(
            self.clean_names,
            term,
            limit=self.matching.suggestion_limit,
            min_score=self.matching.suggestion_min_score,
            browse_limit=self.matching.browse_page_size,
        )

    def debouncer(self, on_settled: Optional[Callable[[str], None]] = None) -> SearchDebouncer:
        return SearchDebouncer(self.matching.debounce_seconds, on_settled)

    def _target_name(self, clean_name: Optional[str]) -> str:
        name = clean_name if clean_name is not None else self.selected_clean_name
        if name is None:
            raise InvalidArgument("no clean name selected")
        return name

    def assign(self, raw_id: int, clean_name: Optional[str] = None) -> None:
        self.assignments.assign_one(raw_id, self._target_name(clean_name))

    def bulk_assign(
        self,
        targets: Iterable[Union[int, FilterResult]],
        clean_name: Optional[str] = None,
    ) -> int:
        """Assign to exactly the given ids (or filter results), typically the visible set."""
        ids = [target.id if isinstance(target, FilterResult) else target for target in targets]
        return self.assignments.assign_bulk(ids, self._target_name(clean_name))

    @property
    def matches(self) -> dict[int, str]:
        return self.assignments.matches

    def completion(self) -> float:
        return self.assignments.completion(len(self.raw_inputs))

    def progress(self) -> int:
        """Completion as a whole percentage, halves rounded up."""
        return as_percent(self.completion())

    def export_csv(self) -> str:
        return export_csv(self.raw_inputs, self.assignments.matches)

    # -- persistence -------------------------------------------------

    def snapshot(self) -> Session:
        return Session(
            raw_inputs=list(self.raw_inputs),
            clean_names=list(self.clean_names),
            matches=self.assignments.matches,
            last_updated=self.last_updated,
        )

    def save(self) -> SaveResult:
        self.is_saving = True
        try:
            now = datetime.now(timezone.utc)
            self.store.save(self.key, self.snapshot().to_record(now))
        except (StoreError, OSError) as exc:
            return self._save_failed(exc)
        finally:
            self.is_saving = False
        return self._saved(now)

    def load(self) -> LoadResult:
        self.is_loading = True
        try:
            return self._finish_load(self.store.load(self.key))
        except (StoreError, OSError) as exc:
            return self._load_failed(exc)
        finally:
            self.is_loading = False

    def apply_record(self, record: dict[str, Any]) -> None:
        """
        Merge a stored record into local state.

        Fields missing from the record (or null) leave the local value alone.
        Every present field is parsed before anything is applied, so a
        malformed record changes nothing.

        Raises:
            StoreError: if a present field cannot be parsed
        """
        try:
            raw_inputs = record.get(RAW_INPUTS_FIELD)
            clean_names = record.get(CLEAN_NAMES_FIELD)
            matches = record.get(MATCHES_FIELD)
            parsed_raw = parse_raw_inputs(raw_inputs) if raw_inputs is not None else None
            parsed_clean = parse_clean_names(clean_names) if clean_names is not None else None
            parsed_matches = parse_matches(matches) if matches is not None else None
            stamp = parse_timestamp(record.get(LAST_UPDATED_FIELD))
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise StoreError(f"Malformed session record: {exc}") from exc

        if parsed_raw is not None:
            self.raw_inputs = parsed_raw
        if parsed_clean is not None:
            self.clean_names = parsed_clean
        if parsed_matches is not None:
            self.assignments.replace(parsed_matches)
        if stamp is not None:
            self.last_updated = stamp

    async def save_async(self) -> SaveResult:
        """Like save(), but only the store call runs in the default executor."""
        self.is_saving = True
        try:
            now = datetime.now(timezone.utc)
            record = self.snapshot().to_record(now)
            await asyncio.get_running_loop().run_in_executor(None, self.store.save, self.key, record)
        except (StoreError, OSError) as exc:
            return self._save_failed(exc)
        finally:
            self.is_saving = False
        return self._saved(now)

    async def load_async(self) -> LoadResult:
        """
        Like load(), but only the store call runs in the default executor.

        The fetched record is merged back on the event loop thread, so state
        changes in one step from the loop's point of view.
        """
        self.is_loading = True
        try:
            record = await asyncio.get_running_loop().run_in_executor(None, self.store.load, self.key)
            return self._finish_load(record)
        except (StoreError, OSError) as exc:
            return self._load_failed(exc)
        finally:
            self.is_loading = False

    def _saved(self, now: datetime) -> SaveResult:
        self.last_updated = now
        logger.info("Saved session for %s", self.key.user_id)
        return SaveResult(ok=True, message="Saved successfully!")

    def _save_failed(self, exc: Exception) -> SaveResult:
        logger.error("Error saving session: %s", exc)
        return SaveResult(ok=False, message="Error saving data.")

    def _finish_load(self, record: Optional[dict[str, Any]]) -> LoadResult:
        if record is None:
            return LoadResult(LoadStatus.NOT_FOUND, "No saved session found.")
        self.apply_record(record)
        logger.info("Loaded session for %s", self.key.user_id)
        return LoadResult(LoadStatus.LOADED, "Session loaded!")

    def _load_failed(self, exc: Exception) -> LoadResult:
        logger.error("Error loading session: %s", exc)
        return LoadResult(LoadStatus.FAILED, "Error loading data.")
