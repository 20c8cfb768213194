"""Event payloads and names emitted to the real-time transport."""

from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field

from nowlyrics.models.enums import PrefetchStatus
from nowlyrics.models.track import TrackSignature

LYRICS_EVENT: Final = "lyrics"
LYRICS_PREFETCH_EVENT: Final = "lyrics-prefetch"


class PrefetchEvent(BaseModel):
    """Progress of a next-track prefetch (``lyrics-prefetch`` event)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    status: PrefetchStatus
    track_key: str | None = Field(default=None, alias="trackKey")
    signature: TrackSignature | None = None
    reason: str | None = None
    track_source: str | None = Field(default=None, alias="trackSource")
    started_at: int | None = Field(default=None, alias="startedAt")
    total_ms: int | None = Field(default=None, alias="totalMs")
    error: str | None = None

    def to_event(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class EventMessage(BaseModel):
    """Envelope delivered to event bus subscribers."""

    event: str
    data: dict[str, Any]
