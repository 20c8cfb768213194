"""Enumerations for nowlyrics domain models."""

from enum import StrEnum


class LyricsStatus(StrEnum):
    """Status of the now-playing lyrics state.

    OK and NOT_FOUND come from a resolution. The remaining values are
    reasons the engine did not (or could not) resolve the track.
    """

    OK = "ok"
    NOT_FOUND = "not-found"
    ERROR = "error"
    DISABLED = "disabled"
    NO_METADATA = "no-metadata"
    NOT_SUPPORTED_SOURCE = "not-supported-source"
    MISSING_SIGNATURE = "missing-signature"

    @property
    def is_resolved(self) -> bool:
        """Whether this status is the outcome of an upstream lookup."""
        return self in (LyricsStatus.OK, LyricsStatus.NOT_FOUND)


class PrefetchStatus(StrEnum):
    """Progress of a speculative next-track lookup."""

    SKIPPED = "skipped"
    CACHED = "cached"
    START = "start"
    DONE = "done"
    ERROR = "error"


class SkipReason(StrEnum):
    """Why a prefetch was skipped."""

    DISABLED = "disabled"
    MISSING_METADATA = "missing-metadata"
    NOT_SUPPORTED_SOURCE = "not-supported-source"
    MISSING_SIGNATURE = "missing-signature"


class Endpoint(StrEnum):
    """lrclib.net query strategies, labelled as they appear in diagnostics."""

    GET_CACHED = "get-cached"
    GET = "get"
    SEARCH = "search"

    @property
    def path(self) -> str:
        return f"/api/{self.value}"


class RequestResult(StrEnum):
    """Outcome of a single upstream request."""

    HIT = "hit"
    MISS = "miss"
    ERROR = "error"
    DISCARDED = "discarded"  # Still running when another strategy won


class CacheState(StrEnum):
    """Where a now-playing payload came from."""

    MEMORY = "memory"
    MISS = "miss"
