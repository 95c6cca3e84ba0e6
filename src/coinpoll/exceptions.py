"""Custom exceptions for the coinpoll client.

The HTTP error taxonomy lives here so the API client and the poller can
share it without importing each other.
"""


class CoinPollError(Exception):
    """Base exception for all coinpoll errors."""

    user_message = "Something went wrong"


class UnexpectedFetchError(CoinPollError):
    """Recorded when a sub-fetch fails with a non-HTTP exception."""

    user_message = "Unexpected error while loading data"


class HttpError(CoinPollError):
    """Base class for failures surfaced by the HTTP client."""

    user_message = "Network request failed"


class InvalidRequest(HttpError):
    """Raised when the request URL cannot be constructed."""

    user_message = "Invalid request"


class TransportFailure(HttpError):
    """Raised on network, DNS or timeout failures."""

    user_message = "Network connection failed"


class HttpStatusError(HttpError):
    """Raised when the upstream answers outside the 2xx range."""

    def __init__(self, status_code: int, message: str = "") -> None:
        self.status_code = status_code
        self.user_message = f"Server responded with HTTP {status_code}"
        super().__init__(message or f"HTTP {status_code}")


class RateLimited(HttpStatusError):
    """Raised on HTTP 429: the shared request budget is exhausted."""

    def __init__(self, message: str = "") -> None:
        super().__init__(429, message or "HTTP 429 Too Many Requests")
        self.user_message = "Rate limited by the data provider, backing off"


class EmptyBody(HttpError):
    """Raised when a 2xx response carries no payload."""

    user_message = "Server returned no data"


class DecodeFailure(HttpError):
    """Raised when the payload does not match the expected shape."""

    user_message = "Could not read the server response"
