"""Shared type definitions."""

from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

# Raw device metadata as produced by the UPnP polling layer, e.g.
# {"trackMetaData": {"dc:title": ...}, "TrackDuration": "0:03:45", ...}
type RawMetadata = Mapping[str, Any]

# Callable type aliases for dependency injection
type Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock."""
    return datetime.now(UTC)


def to_epoch_ms(moment: datetime) -> int:
    """Convert a datetime to integer epoch milliseconds."""
    return int(moment.timestamp() * 1000)


def elapsed_ms(start: datetime, end: datetime) -> int:
    """Whole milliseconds between two datetimes."""
    return int((end - start).total_seconds() * 1000)
