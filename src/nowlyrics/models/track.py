"""Track identity models."""

from pydantic import BaseModel, ConfigDict, Field


class TrackSignature(BaseModel):
    """Comparable (track, artist, album, duration) identity of a song.

    Holds the raw field values as reported by the device; normalization
    happens when comparing or deriving the track key. Only built when all
    four fields are present, so none of them is optional.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    track_name: str = Field(alias="trackName", min_length=1)
    artist_name: str = Field(alias="artistName", min_length=1)
    album_name: str = Field(alias="albumName", min_length=1)
    duration: int = Field(gt=0)

    def query_params(self, *, with_duration: bool = True) -> dict[str, str | int]:
        """Query parameters understood by the lrclib.net endpoints."""
        params: dict[str, str | int] = {
            "track_name": self.track_name,
            "artist_name": self.artist_name,
            "album_name": self.album_name,
        }
        if with_duration:
            params["duration"] = self.duration
        return params

    def __str__(self) -> str:
        return f"{self.artist_name} - {self.track_name} ({self.album_name})"
