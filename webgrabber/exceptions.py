"""Custom exceptions for WebGrabber services."""


class HttpFetchError(Exception):
    """Raised when an HTTP fetch fails due to network/transport errors."""

    def __init__(self, url: str, original: Exception):
        self.url = url
        self.original = original
        super().__init__(f"HTTP fetch failed for {url}: {original}")


class GrabRequestError(Exception):
    """Raised when a grab/discover request is rejected before any crawl starts."""

    def __init__(self, message: str, field: str = None):
        self.message = message
        self.field = field
        super().__init__(message)


class ImageDecodeError(Exception):
    """Raised when an inline data URI cannot be decoded."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Could not decode data URI: {reason}")
