"""Multi-source lyrics resolution against lrclib.net.

Three strategies are raced for every signature:

- ``get-cached``: exact lookup of a record lrclib.net already stores
- ``get``: exact lookup that may make lrclib.net query external sources
- ``search``: loose search, then local filtering and scoring

The first strategy to produce a valid record (synced, not instrumental)
wins and the others are cancelled. A strategy that fails only drops out
of the race; if none produces a valid record the track has no match.
"""

import logging
from collections.abc import Awaitable

from nowlyrics.client import LrcLibProtocol
from nowlyrics.lib.matching import select_best_candidate
from nowlyrics.models.diagnostics import Diagnostics
from nowlyrics.models.enums import Endpoint, RequestResult
from nowlyrics.models.lyrics import LyricsCandidate
from nowlyrics.models.track import TrackSignature
from nowlyrics.types import Clock, utc_now
from nowlyrics.utils.race import first_match

logger = logging.getLogger(__name__)


def _is_valid(result: LyricsCandidate | None) -> bool:
    return result is not None and result.is_valid


class MultiSourceResolver:
    """Races the lrclib.net query strategies for a signature."""

    def __init__(self, client: LrcLibProtocol, clock: Clock = utc_now) -> None:
        """Initialize the resolver.

        Args:
            client: lrclib.net client implementation.
            clock: Function returning the current time (enables testing).
        """
        self._client = client
        self._clock = clock

    async def resolve_by_signature(
        self, signature: TrackSignature, diagnostics: Diagnostics | None = None
    ) -> LyricsCandidate | None:
        """Find synced lyrics for a signature.

        Every settled request is recorded into ``diagnostics.requests``;
        requests cancelled because another strategy won are recorded as
        discarded and listed in ``diagnostics.pending_requests``.

        Args:
            signature: Track to look up.
            diagnostics: Optional diagnostics for this attempt.

        Returns:
            The winning candidate, or None if no strategy found a match.
        """
        started = self._clock()
        outcome = await first_match(
            {
                Endpoint.GET_CACHED: self._timed(
                    Endpoint.GET_CACHED,
                    self._client.get_cached(signature),
                    diagnostics,
                ),
                Endpoint.GET: self._timed(
                    Endpoint.GET, self._client.get(signature), diagnostics
                ),
                Endpoint.SEARCH: self._search(signature, diagnostics),
            },
            _is_valid,
        )

        if not outcome.matched:
            logger.debug("No lyrics from any lrclib.net strategy for %s", signature)
            return None

        if diagnostics is not None:
            diagnostics.pending_requests = [str(label) for label in outcome.pending]
            finished = self._clock()
            for label in outcome.pending:
                diagnostics.record(
                    str(label), started, finished, RequestResult.DISCARDED
                )

        logger.debug("Lyrics for %s resolved via %s", signature, outcome.label)
        return outcome.value

    async def _search(
        self, signature: TrackSignature, diagnostics: Diagnostics | None
    ) -> LyricsCandidate | None:
        candidates = await self._timed(
            Endpoint.SEARCH, self._client.search(signature), diagnostics
        )
        return select_best_candidate(candidates, signature)

    async def _timed[T](
        self,
        endpoint: Endpoint,
        request: Awaitable[T],
        diagnostics: Diagnostics | None,
    ) -> T:
        """Await an upstream request and record how it settled."""
        started = self._clock()
        try:
            result = await request
        except Exception as e:
            logger.warning("lrclib.net %s failed: %s", endpoint, e)
            if diagnostics is not None:
                diagnostics.record(
                    endpoint.value, started, self._clock(), RequestResult.ERROR, str(e)
                )
            raise

        if diagnostics is not None:
            outcome = RequestResult.HIT if result else RequestResult.MISS
            diagnostics.record(endpoint.value, started, self._clock(), outcome)
        return result
