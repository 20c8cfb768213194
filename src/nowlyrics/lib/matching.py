"""Candidate scoring for lrclib.net search results.

Search results are fuzzy: the endpoint returns anything loosely related
to the query. Each candidate gets an integer confidence score against
the target signature, built from per-field exact/substring matches and
a duration proximity bonus (or penalty). Candidates below the acceptance
threshold are discarded.

The table is a tuned heuristic. The asymmetry between a large duration
mismatch (penalized) and an unknown duration (neutral) is deliberate.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from nowlyrics.lib.normalize import normalize_album, normalize_text
from nowlyrics.models.lyrics import LyricsCandidate
from nowlyrics.models.track import TrackSignature

logger = logging.getLogger(__name__)

# ============================================================================
# PRIVATE CONSTANTS - Scoring table (not exported)
# ============================================================================

# (exact, substring) points per field
_TRACK_POINTS = (50, 25)
_ARTIST_POINTS = (40, 20)
_ALBUM_POINTS = (25, 12)

# (max absolute difference in seconds, points), checked in order
_DURATION_STEPS = ((2, 30), (5, 20), (10, 10))
_DURATION_MISMATCH_PENALTY = -20

# Search candidates further apart than this are dropped before scoring
_MAX_DURATION_DIFF = 10

MATCH_SCORE_THRESHOLD = 70


@dataclass(frozen=True)
class ScoredCandidate:
    """A candidate with its confidence score against a signature."""

    candidate: LyricsCandidate
    score: int

    @property
    def is_acceptable(self) -> bool:
        return self.score >= MATCH_SCORE_THRESHOLD


def _field_score(value: str, target: str, points: tuple[int, int]) -> int:
    exact, partial = points
    if value == target:
        return exact
    if value and target and (target in value or value in target):
        return partial
    return 0


def duration_score(candidate_duration: float | None, target_duration: int) -> int:
    """Points for duration proximity; 0 when either duration is unknown."""
    if not candidate_duration or not target_duration:
        return 0
    diff = abs(candidate_duration - target_duration)
    for max_diff, points in _DURATION_STEPS:
        if diff <= max_diff:
            return points
    return _DURATION_MISMATCH_PENALTY


def score_candidate(candidate: LyricsCandidate, signature: TrackSignature) -> int:
    """Score a candidate against the target signature (may be negative).

    Track and artist use plain normalization; album uses the
    edition-stripped form so "X (Deluxe)" still matches "X".
    """
    score = _field_score(
        normalize_text(candidate.track_name),
        normalize_text(signature.track_name),
        _TRACK_POINTS,
    )
    score += _field_score(
        normalize_text(candidate.artist_name),
        normalize_text(signature.artist_name),
        _ARTIST_POINTS,
    )
    score += _field_score(
        normalize_album(candidate.album_name),
        normalize_album(signature.album_name),
        _ALBUM_POINTS,
    )
    score += duration_score(candidate.duration, signature.duration)
    return score


def is_duration_compatible(
    candidate: LyricsCandidate, signature: TrackSignature
) -> bool:
    """True unless both durations are known and differ by more than 10s."""
    if not candidate.duration or not signature.duration:
        return True
    return abs(candidate.duration - signature.duration) <= _MAX_DURATION_DIFF


def rank_candidates(
    candidates: Iterable[LyricsCandidate], signature: TrackSignature
) -> list[ScoredCandidate]:
    """Filter, score and rank search candidates, best first.

    Drops candidates without synced lyrics, instrumentals, duration
    mismatches and anything under the acceptance threshold. Equal scores
    keep their upstream order.
    """
    scored = [
        ScoredCandidate(candidate=c, score=score_candidate(c, signature))
        for c in candidates
        if c.is_valid and is_duration_compatible(c, signature)
    ]
    accepted = [s for s in scored if s.is_acceptable]
    if len(accepted) < len(scored):
        logger.debug(
            "Rejected %d of %d search candidates below score %d",
            len(scored) - len(accepted),
            len(scored),
            MATCH_SCORE_THRESHOLD,
        )
    return sorted(accepted, key=lambda s: s.score, reverse=True)


def select_best_candidate(
    candidates: Iterable[LyricsCandidate], signature: TrackSignature
) -> LyricsCandidate | None:
    """Highest-scoring acceptable candidate, or None."""
    ranked = rank_candidates(candidates, signature)
    if not ranked:
        return None
    best = ranked[0]
    logger.debug(
        "Best search candidate id=%s score=%d for %s",
        best.candidate.id,
        best.score,
        signature,
    )
    return best.candidate
