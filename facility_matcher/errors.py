from __future__ import annotations


class FacilityMatcherError(Exception):
    """Base class for errors raised by facility_matcher."""


class InvalidArgument(FacilityMatcherError, ValueError):
    """Raised when an operation receives an unusable argument (e.g. a blank clean name)."""


class StoreError(FacilityMatcherError):
    """Raised by session stores when the underlying storage cannot be read or written."""
