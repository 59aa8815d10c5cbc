import requests
from typing import Callable, Optional

from webgrabber.domain.http_response import HttpResponse
from webgrabber.exceptions import HttpFetchError


class HttpService:
    """
    HTTP client wrapper for fetching pages and images.

    Requires http_client callable for dependency injection, so tests can fake
    the network without patching and the HTTP library can be swapped.
    """

    def __init__(self, user_agent: str, http_client: Callable, timeout: int = 10):
        self.user_agent = user_agent
        self.timeout = timeout
        self.http_client = http_client

    def _get(self, url: str, headers: dict, binary: bool = False) -> HttpResponse:
        try:
            resp = self.http_client(url, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise HttpFetchError(url, e) from e

        # Extract Content-Type if response has headers; let real exceptions bubble up.
        ct = None
        if hasattr(resp, 'headers'):
            ct = resp.headers.get('Content-Type')

        content = getattr(resp, 'content', b"")
        if not isinstance(content, bytes):
            content = b""
        # image bodies skip .text so requests does not sniff a charset over binary data
        text = "" if binary else resp.text
        return HttpResponse(resp.status_code, text, ct, content, url)

    def fetch(self, url: str, user_agent: Optional[str] = None) -> HttpResponse:
        """Fetch a page and return status code, body text, and Content-Type."""
        headers = {"User-Agent": user_agent or self.user_agent}
        return self._get(url, headers)

    def fetch_binary(self, url: str, referer: Optional[str] = None, user_agent: Optional[str] = None) -> HttpResponse:
        """Fetch an image; sends the embedding page as Referer for servers that check it."""
        headers = {"User-Agent": user_agent or self.user_agent, "Accept": "*/*"}
        if referer:
            headers["Referer"] = referer
        return self._get(url, headers, binary=True)
