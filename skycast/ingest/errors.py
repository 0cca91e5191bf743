"""Fetch error taxonomy for the weather and geocoding providers."""


class FetchError(Exception):
    """Raised when a weather fetch fails. `message` is user-presentable."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NetworkError(FetchError):
    """Transport-level failure: DNS, connect, timeout."""


class UpstreamError(FetchError):
    """Provider answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class MalformedResponse(FetchError):
    """Provider answered 2xx with a body of unexpected shape."""
