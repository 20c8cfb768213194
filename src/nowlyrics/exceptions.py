"""Custom exceptions for nowlyrics.

All exceptions include an HTTP status_code attribute so a host web
server can map them onto responses without extra glue.
"""


class LyricsError(Exception):
    """Base exception for nowlyrics.

    Attributes:
        status_code: HTTP status code for API error responses.
    """

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UpstreamAPIError(LyricsError):
    """lrclib.net answered with an unexpected HTTP status.

    404 is not an error: it maps to "no result" in the client.

    Attributes:
        status: The HTTP status returned by the upstream service.
    """

    status_code: int = 502  # Bad Gateway (upstream failure)

    def __init__(self, message: str, status: int | None = None) -> None:
        self.status = status
        super().__init__(message)


class MalformedResponseError(LyricsError):
    """Upstream response body could not be parsed as JSON."""

    status_code: int = 502  # Bad Gateway (upstream failure)


class UpstreamConnectionError(LyricsError):
    """Network-level failure talking to the upstream service.

    Raised for connection errors and client timeouts.
    """

    status_code: int = 504  # Gateway Timeout
