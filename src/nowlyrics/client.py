"""lrclib.net API client."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, Protocol

import httpx
from pydantic import ValidationError

from nowlyrics.config import Settings, get_settings
from nowlyrics.exceptions import (
    MalformedResponseError,
    UpstreamAPIError,
    UpstreamConnectionError,
)
from nowlyrics.models.enums import Endpoint
from nowlyrics.models.lyrics import LyricsCandidate
from nowlyrics.models.track import TrackSignature

logger = logging.getLogger(__name__)


class LrcLibProtocol(Protocol):
    """Protocol for lrclib.net clients.

    This protocol enables dependency injection and testing.
    Implement this protocol to create fake clients for testing.
    """

    async def get_cached(self, signature: TrackSignature) -> LyricsCandidate | None:
        """Look up a record lrclib.net already has stored."""
        ...

    async def get(self, signature: TrackSignature) -> LyricsCandidate | None:
        """Look up a record, letting lrclib.net query its own sources."""
        ...

    async def search(self, signature: TrackSignature) -> list[LyricsCandidate]:
        """Search records loosely matching the signature (no duration)."""
        ...


class LrcLibClient:
    """Production lrclib.net client.

    Wraps httpx with consistent error handling and response parsing.
    Implements LrcLibProtocol for type safety.

    Status handling:
        - 2xx: body parsed as JSON
        - 404: no result (None / empty list), not an error
        - anything else: UpstreamAPIError
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Optional settings. Uses get_settings() if not provided.
            transport: Optional httpx transport (e.g. httpx.MockTransport).
        """
        self._settings = settings or get_settings()
        self._http = httpx.AsyncClient(
            base_url=self._settings.lyrics.base_url,
            timeout=self._settings.lyrics.request_timeout,
            headers={"User-Agent": self._settings.user_agent},
            transport=transport,
        )

    async def get_cached(self, signature: TrackSignature) -> LyricsCandidate | None:
        data = await self.fetch_json(Endpoint.GET_CACHED, signature.query_params())
        return self._parse_record(Endpoint.GET_CACHED, data)

    async def get(self, signature: TrackSignature) -> LyricsCandidate | None:
        data = await self.fetch_json(Endpoint.GET, signature.query_params())
        return self._parse_record(Endpoint.GET, data)

    async def search(self, signature: TrackSignature) -> list[LyricsCandidate]:
        data = await self.fetch_json(
            Endpoint.SEARCH, signature.query_params(with_duration=False)
        )
        if not isinstance(data, list):
            return []

        candidates: list[LyricsCandidate] = []
        for item in data:
            if not isinstance(item, dict):
                continue
            try:
                candidates.append(LyricsCandidate.model_validate(item))
            except ValidationError:
                logger.debug("Skipping unparseable search result: %s", item.get("id"))
        logger.debug("Search returned %d candidates", len(candidates))
        return candidates

    async def fetch_json(
        self, endpoint: Endpoint, params: dict[str, str | int]
    ) -> Any | None:
        """GET an endpoint and decode its JSON body.

        Args:
            endpoint: lrclib.net endpoint to query.
            params: Query parameters.

        Returns:
            Decoded JSON, or None for 404.

        Raises:
            UpstreamConnectionError: On network errors or timeouts.
            UpstreamAPIError: On any non-2xx status other than 404.
            MalformedResponseError: If the body is not valid JSON.
        """
        logger.debug("Fetching %s: %s", endpoint.path, params)
        try:
            response = await self._http.get(endpoint.path, params=params)
        except httpx.TransportError as e:
            logger.debug("lrclib.net transport error on %s: %s", endpoint.path, e)
            raise UpstreamConnectionError(f"LRCLIB request failed: {e!r}") from e

        if response.status_code == 404:
            return None
        if not response.is_success:
            raise UpstreamAPIError(
                f"LRCLIB request failed with status {response.status_code}",
                status=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(
                f"LRCLIB returned invalid JSON from {endpoint.path}"
            ) from e

    def _parse_record(self, endpoint: Endpoint, data: Any) -> LyricsCandidate | None:
        if not data:
            return None
        if not isinstance(data, dict):
            raise MalformedResponseError(
                f"LRCLIB returned an unexpected payload from {endpoint.path}"
            )
        try:
            return LyricsCandidate.model_validate(data)
        except ValidationError as e:
            raise MalformedResponseError(
                f"LRCLIB returned an invalid record from {endpoint.path}"
            ) from e

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()

    async def __aenter__(self) -> LrcLibClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()
