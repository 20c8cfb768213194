"""Device state as seen by the lyrics engine."""

from dataclasses import dataclass, field
from typing import Any

from nowlyrics.models.lyrics import LyricsPayload
from nowlyrics.types import RawMetadata


@dataclass
class DeviceInfo:
    """The active renderer, as maintained by the device polling layer.

    Attributes:
        metadata: Latest raw track metadata (None before the first poll).
        state: Latest raw transport state (may carry ``stateTimeStamp``).
        lyrics: Last published now-playing lyrics state. Only the state
            publisher writes this field.
    """

    metadata: RawMetadata | None = None
    state: dict[str, Any] = field(default_factory=dict)
    lyrics: LyricsPayload | None = None
