from types import SimpleNamespace

import pytest

from webgrabber.services.content_sanitizer import ContentSanitizer
from webgrabber.services.duplicate_image_collapser import DuplicateImageCollapser
from webgrabber.services.grab_executor import GrabExecutor
from webgrabber.services.http_service import HttpService
from webgrabber.services.link_rewriter import LinkRewriter
from webgrabber.services.markdown_converter import MarkdownConverter
from webgrabber.services.media_resolver import MediaResolver
from webgrabber.services.page_processor import PageProcessor

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


class FakeSite:
    """Stands in for `requests.get`: serves registered URLs and records every request."""

    def __init__(self):
        self.responses = {}
        self.calls = []

    def add_page(self, url, html, status=200):
        self.responses[url] = SimpleNamespace(
            status_code=status,
            text=html,
            content=html.encode("utf-8"),
            headers={"Content-Type": "text/html; charset=utf-8"},
        )

    def add_image(self, url, data=PNG_BYTES, content_type="image/png", status=200):
        self.responses[url] = SimpleNamespace(
            status_code=status,
            text="",
            content=data,
            headers={"Content-Type": content_type} if content_type else {},
        )

    def __call__(self, url, headers=None, timeout=None):
        self.calls.append((url, dict(headers or {})))
        resp = self.responses.get(url)
        if resp is None:
            return SimpleNamespace(status_code=404, text="not found", content=b"", headers={})
        return resp

    def count(self, url):
        return sum(1 for called, _ in self.calls if called == url)


@pytest.fixture
def site():
    return FakeSite()


@pytest.fixture
def http_service(site):
    return HttpService(user_agent="TestBot/1.0", http_client=site)


@pytest.fixture
def grab_executor(http_service):
    link_rewriter = LinkRewriter()
    processor = PageProcessor(
        sanitizer=ContentSanitizer(),
        media_resolver=MediaResolver(http_service),
        collapser=DuplicateImageCollapser(),
        link_rewriter=link_rewriter,
        markdown_converter=MarkdownConverter(),
    )
    return GrabExecutor(http_service=http_service, page_processor=processor, link_rewriter=link_rewriter)
