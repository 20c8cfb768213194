"""Generic helpers that don't depend on nowlyrics domain models."""

from nowlyrics.utils.race import RaceOutcome, first_match

__all__ = [
    "RaceOutcome",
    "first_match",
]
