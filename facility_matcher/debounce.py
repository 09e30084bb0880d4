from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_DELAY_SECONDS = 0.3


class SearchDebouncer:
    """
    Delays search-term changes until typing has been quiet for ``delay`` seconds.

    Every ``schedule`` call cancels the pending timer and starts a new one;
    only a timer that runs to completion updates ``effective_term`` (and
    calls ``on_settled``). Must be used from within a running event loop.
    """

    def __init__(
        self,
        delay: float = DEFAULT_DELAY_SECONDS,
        on_settled: Optional[Callable[[str], None]] = None,
        *,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self.delay = delay
        self.on_settled = on_settled
        self.effective_term = ""
        self._loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None
        self._pending_term: Optional[str] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, term: str) -> None:
        self.cancel()
        loop = self._loop or asyncio.get_running_loop()
        self._pending_term = term
        self._handle = loop.call_later(self.delay, self._settle)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._pending_term = None

    def flush(self) -> None:
        """Apply the pending term now instead of waiting for the timer."""
        if self._handle is None:
            return
        self._handle.cancel()
        self._settle()

    def _settle(self) -> None:
        term = self._pending_term or ""
        self._handle = None
        self._pending_term = None
        self.effective_term = term
        logger.debug("Search term settled: %r", term)
        if self.on_settled is not None:
            self.on_settled(term)
