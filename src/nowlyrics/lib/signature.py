"""Build track signatures and cache keys from raw device metadata."""

import logging

from nowlyrics.lib.normalize import normalize_text
from nowlyrics.models.track import TrackSignature
from nowlyrics.types import RawMetadata

logger = logging.getLogger(__name__)

# DIDL-Lite fields inside trackMetaData
TITLE_FIELD = "dc:title"
ARTIST_FIELD = "upnp:artist"
ALBUM_FIELD = "upnp:album"

TRACK_KEY_SEPARATOR = "|"


def parse_duration_to_seconds(value: object) -> int | None:
    """Parse a track duration to whole seconds.

    Accepts a number of seconds or a "MM:SS" / "H:MM:SS" string.

    Args:
        value: Raw duration as reported by the device.

    Returns:
        Duration in seconds, or None if absent or unparseable.
    """
    if not value or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return round(value)
    if not isinstance(value, str):
        return None

    try:
        parts = [int(part) for part in value.split(":")]
    except ValueError:
        logger.debug("Could not parse duration: %s", value)
        return None

    if len(parts) == 3:
        hours, minutes, seconds = parts
        return hours * 3600 + minutes * 60 + seconds
    if len(parts) == 2:
        minutes, seconds = parts
        return minutes * 60 + seconds
    logger.debug("Unexpected duration format: %s", value)
    return None


def _field(track_meta: RawMetadata, key: str) -> str:
    value = track_meta.get(key)
    return value.strip() if isinstance(value, str) else ""


def build_signature(metadata: RawMetadata | None) -> TrackSignature | None:
    """Extract a TrackSignature from device metadata.

    Returns None unless title, artist, album and a positive duration are
    all present. A track without a signature is never looked up.
    """
    if not metadata:
        return None
    track_meta = metadata.get("trackMetaData")
    if not track_meta:
        return None

    track_name = _field(track_meta, TITLE_FIELD)
    artist_name = _field(track_meta, ARTIST_FIELD)
    album_name = _field(track_meta, ALBUM_FIELD)
    duration = parse_duration_to_seconds(metadata.get("TrackDuration"))

    if not (track_name and artist_name and album_name and duration):
        return None
    if duration <= 0:
        return None

    return TrackSignature(
        track_name=track_name,
        artist_name=artist_name,
        album_name=album_name,
        duration=duration,
    )


def build_track_key(signature: TrackSignature) -> str:
    """Cache and in-flight identity for a signature.

    Signatures that differ only in casing, punctuation or bracketed
    suffixes produce the same key.
    """
    return TRACK_KEY_SEPARATOR.join(
        [
            normalize_text(signature.track_name),
            normalize_text(signature.artist_name),
            normalize_text(signature.album_name),
            str(signature.duration),
        ]
    )


def track_source(metadata: RawMetadata) -> str:
    """Lower-cased ``TrackSource`` of the metadata ("" when missing)."""
    source = metadata.get("TrackSource")
    return source.lower() if isinstance(source, str) else ""


def has_track_metadata(metadata: RawMetadata | None) -> bool:
    return bool(metadata) and bool(metadata.get("trackMetaData"))
