"""Tests for domain models."""

from datetime import UTC, datetime, timedelta

from nowlyrics.models.diagnostics import Diagnostics
from nowlyrics.models.enums import Endpoint, LyricsStatus, RequestResult
from nowlyrics.models.lyrics import LyricsCandidate, LyricsPayload, PrefetchInfo
from nowlyrics.models.track import TrackSignature

NOW = datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)
NOW_MS = int(NOW.timestamp() * 1000)


class TestDiagnostics:
    """Tests for Diagnostics."""

    def test_build_without_timestamps(self) -> None:
        diagnostics = Diagnostics.build(NOW, {"TrackSource": "tidal"}, {})

        assert diagnostics.requested_at == NOW_MS
        assert diagnostics.metadata_time_stamp is None
        assert diagnostics.metadata_age_ms is None
        assert diagnostics.state_age_ms is None
        assert diagnostics.metadata_poll_interval_ms is None

    def test_build_ignores_non_numeric_timestamps(self) -> None:
        diagnostics = Diagnostics.build(NOW, {"metadataTimeStamp": "yesterday"})
        assert diagnostics.metadata_time_stamp is None

    def test_record_and_finish(self) -> None:
        diagnostics = Diagnostics.build(NOW)

        finished = NOW + timedelta(milliseconds=120)
        diagnostics.record(Endpoint.GET.value, NOW, finished, RequestResult.HIT)
        diagnostics.finish(NOW + timedelta(milliseconds=150))

        assert diagnostics.requests[0].duration_ms == 120
        assert diagnostics.total_ms == 150

    def test_snapshot_is_detached(self) -> None:
        diagnostics = Diagnostics.build(NOW)
        diagnostics.pending_requests = ["search"]
        snapshot = diagnostics.snapshot()

        diagnostics.record("search", NOW, NOW, RequestResult.DISCARDED)
        diagnostics.pending_requests.append("get")

        assert snapshot.requests == []
        assert snapshot.pending_requests == ["search"]

    def test_wire_names(self) -> None:
        data = Diagnostics.build(NOW, poll_interval_ms=1000).model_dump(by_alias=True)
        assert {"requestedAt", "metadataPollIntervalMs", "pendingRequests"} <= set(data)


class TestLyricsPayload:
    """Tests for LyricsPayload."""

    def test_found_copies_candidate(self) -> None:
        signature = TrackSignature(
            track_name="T", artist_name="A", album_name="B", duration=100
        )
        candidate = LyricsCandidate.model_validate(
            {
                "id": 3,
                "trackName": "T",
                "artistName": "A",
                "albumName": "B",
                "duration": 100.0,
                "instrumental": False,
                "plainLyrics": "la",
                "syncedLyrics": "[00:00.00] la",
            }
        )

        payload = LyricsPayload.found(candidate, signature, "t|a|b|100")
        event = payload.to_event()

        assert event["status"] == "ok"
        assert event["provider"] == "lrclib"
        assert event["trackKey"] == "t|a|b|100"
        assert event["syncedLyrics"] == "[00:00.00] la"
        assert event["signature"] == {
            "trackName": "T",
            "artistName": "A",
            "albumName": "B",
            "duration": 100,
        }
        assert "plainLyrics" not in event

    def test_with_prefetch_leaves_original(self) -> None:
        payload = LyricsPayload(status=LyricsStatus.NOT_FOUND, track_key="k")

        annotated = payload.with_prefetch(PrefetchInfo(started_at=1, total_ms=2))

        assert payload.prefetch is None
        assert annotated.to_event()["prefetch"] == {
            "source": "unknown",
            "startedAt": 1,
            "totalMs": 2,
        }

    def test_resolved_statuses(self) -> None:
        assert LyricsStatus.OK.is_resolved
        assert LyricsStatus.NOT_FOUND.is_resolved
        assert not LyricsStatus.ERROR.is_resolved
        assert not LyricsStatus.DISABLED.is_resolved


class TestLyricsCandidate:
    """Tests for LyricsCandidate validity."""

    def test_valid(self) -> None:
        assert LyricsCandidate(synced_lyrics="[00:00.00] x").is_valid

    def test_instrumental_invalid(self) -> None:
        candidate = LyricsCandidate(synced_lyrics="[00:00.00] x", instrumental=True)
        assert not candidate.is_valid

    def test_unsynced_invalid(self) -> None:
        assert not LyricsCandidate(plain_lyrics="x").is_valid

    def test_extra_fields_ignored(self) -> None:
        candidate = LyricsCandidate.model_validate({"id": 1, "name": "x", "lang": "en"})
        assert candidate.id == 1
