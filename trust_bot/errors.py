"""Errors raised while talking to the Trust status API."""


class StatusApiError(Exception):
    """Base error for status API failures."""


class NetworkError(StatusApiError):
    """Raised when the request never got a response (connect, read, timeout)."""


class HttpError(StatusApiError):
    """Raised when the API answers with anything other than 200."""

    def __init__(self, status_code: int, url: str = ""):
        self.status_code = status_code
        self.url = url
        super().__init__(f"HTTP {status_code} from {url}" if url else f"HTTP {status_code}")


class ParseError(StatusApiError):
    """Raised when a response body is not valid JSON or not the expected shape."""


class UnknownInstance(StatusApiError):
    """Raised when the API does not know the requested instance or alias."""
