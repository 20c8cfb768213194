"""Per-resolution diagnostics attached to published lyrics payloads."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from nowlyrics.models.enums import CacheState, RequestResult
from nowlyrics.types import RawMetadata, elapsed_ms, to_epoch_ms


class RequestRecord(BaseModel):
    """One settled (or discarded) upstream request."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    endpoint: str
    duration_ms: int = Field(alias="durationMs")
    result: RequestResult
    error: str | None = None


class Diagnostics(BaseModel):
    """Timing and provenance of one lyrics resolution attempt.

    A Diagnostics object is owned by exactly one attempt and is mutated
    while upstream requests settle, including requests that finish after
    the attempt already returned. Anything published must therefore be a
    ``snapshot()``, never the live object.

    Timestamps are epoch milliseconds, matching what the device layer
    stores in ``metadataTimeStamp`` / ``stateTimeStamp``.
    """

    model_config = ConfigDict(populate_by_name=True)

    requested_at: int = Field(alias="requestedAt")
    metadata_time_stamp: int | None = Field(default=None, alias="metadataTimeStamp")
    metadata_age_ms: int | None = Field(default=None, alias="metadataAgeMs")
    state_time_stamp: int | None = Field(default=None, alias="stateTimeStamp")
    state_age_ms: int | None = Field(default=None, alias="stateAgeMs")
    metadata_poll_interval_ms: int | None = Field(
        default=None, alias="metadataPollIntervalMs"
    )
    requests: list[RequestRecord] = Field(default_factory=list)
    pending_requests: list[str] = Field(default_factory=list, alias="pendingRequests")
    cache: CacheState | None = None
    total_ms: int | None = Field(default=None, alias="totalMs")

    @classmethod
    def build(
        cls,
        now: datetime,
        metadata: RawMetadata | None = None,
        state: Mapping[str, Any] | None = None,
        poll_interval_ms: int | None = None,
    ) -> Diagnostics:
        """Start diagnostics for an attempt requested at ``now``."""
        requested_at = to_epoch_ms(now)
        metadata_ts = _timestamp(metadata, "metadataTimeStamp")
        state_ts = _timestamp(state, "stateTimeStamp")
        return cls(
            requested_at=requested_at,
            metadata_time_stamp=metadata_ts,
            metadata_age_ms=requested_at - metadata_ts if metadata_ts else None,
            state_time_stamp=state_ts,
            state_age_ms=requested_at - state_ts if state_ts else None,
            metadata_poll_interval_ms=poll_interval_ms or None,
        )

    def record(
        self,
        endpoint: str,
        started: datetime,
        finished: datetime,
        result: RequestResult,
        error: str | None = None,
    ) -> None:
        self.requests.append(
            RequestRecord(
                endpoint=endpoint,
                duration_ms=elapsed_ms(started, finished),
                result=result,
                error=error,
            )
        )

    def finish(self, now: datetime) -> None:
        """Stamp the total elapsed time since the attempt was requested."""
        self.total_ms = to_epoch_ms(now) - self.requested_at

    def snapshot(self) -> Diagnostics:
        """Detached deep copy, safe to publish."""
        return self.model_copy(deep=True)


def _timestamp(source: Mapping[str, Any] | None, key: str) -> int | None:
    if not source:
        return None
    value = source.get(key)
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    return int(value) or None
