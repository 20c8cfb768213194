"""Lyrics candidate and payload models.

LyricsCandidate parses lrclib.net responses. LyricsPayload is both the
cached value and the body of the ``lyrics`` event.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from nowlyrics.models.diagnostics import Diagnostics
from nowlyrics.models.enums import LyricsStatus
from nowlyrics.models.track import TrackSignature

PROVIDER = "lrclib"


class LyricsCandidate(BaseModel):
    """A raw lyrics record returned by lrclib.net.

    Transient: candidates are scored and either turned into a payload
    or dropped; they are never cached themselves.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    id: int | None = None
    track_name: str | None = Field(default=None, alias="trackName")
    artist_name: str | None = Field(default=None, alias="artistName")
    album_name: str | None = Field(default=None, alias="albumName")
    duration: float | None = None
    instrumental: bool = False
    plain_lyrics: str | None = Field(default=None, alias="plainLyrics")
    synced_lyrics: str | None = Field(default=None, alias="syncedLyrics")

    @property
    def is_valid(self) -> bool:
        """Has time-synced lyrics and is not flagged instrumental."""
        return bool(self.synced_lyrics) and not self.instrumental


class PrefetchInfo(BaseModel):
    """Timing annotation on payloads returned to a prefetch caller."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source: str = "unknown"
    started_at: int = Field(alias="startedAt")
    total_ms: int = Field(alias="totalMs")


class LyricsPayload(BaseModel):
    """Now-playing lyrics state.

    Resolution outcomes (``ok`` / ``not-found``) carry the provider and,
    for ``ok``, the matched record. Skip and error states only carry the
    reason in ``status`` plus whatever identity was known at the time.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    status: LyricsStatus
    provider: str | None = None
    track_key: str | None = Field(default=None, alias="trackKey")
    signature: TrackSignature | None = None
    id: int | None = None
    track_name: str | None = Field(default=None, alias="trackName")
    artist_name: str | None = Field(default=None, alias="artistName")
    album_name: str | None = Field(default=None, alias="albumName")
    duration: float | None = None
    instrumental: bool | None = None
    synced_lyrics: str | None = Field(default=None, alias="syncedLyrics")
    diagnostics: Diagnostics | None = None
    prefetch: PrefetchInfo | None = None

    @classmethod
    def found(
        cls, candidate: LyricsCandidate, signature: TrackSignature, track_key: str
    ) -> "LyricsPayload":
        return cls(
            status=LyricsStatus.OK,
            provider=PROVIDER,
            track_key=track_key,
            signature=signature,
            id=candidate.id,
            track_name=candidate.track_name,
            artist_name=candidate.artist_name,
            album_name=candidate.album_name,
            duration=candidate.duration,
            instrumental=candidate.instrumental,
            synced_lyrics=candidate.synced_lyrics,
        )

    @classmethod
    def not_found(cls, signature: TrackSignature, track_key: str) -> "LyricsPayload":
        return cls(
            status=LyricsStatus.NOT_FOUND,
            provider=PROVIDER,
            track_key=track_key,
            signature=signature,
        )

    def with_diagnostics(self, diagnostics: Diagnostics | None) -> "LyricsPayload":
        return self.model_copy(update={"diagnostics": diagnostics})

    def with_prefetch(self, prefetch: PrefetchInfo) -> "LyricsPayload":
        return self.model_copy(update={"prefetch": prefetch})

    def to_event(self) -> dict[str, Any]:
        """Wire form of the ``lyrics`` event."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
