import logging
from pathlib import Path

from bs4 import BeautifulSoup

from webgrabber.domain.crawl_run import CrawlRun
from webgrabber.services.content_sanitizer import ContentSanitizer
from webgrabber.services.duplicate_image_collapser import DuplicateImageCollapser
from webgrabber.services.link_rewriter import LinkRewriter
from webgrabber.services.markdown_converter import MarkdownConverter
from webgrabber.services.media_resolver import MediaResolver
from webgrabber.services.scope_policy import ScopePolicy

logger = logging.getLogger(__name__)


class PageProcessor:
    """Turns one fetched page into a markdown file on disk.

    Order matters: images are relocated before duplicates are collapsed (so
    duplicates share a local path) and before links are rewritten (so anchors
    to images can be pointed at the saved files).
    """

    def __init__(
        self,
        *,
        sanitizer: ContentSanitizer,
        media_resolver: MediaResolver,
        collapser: DuplicateImageCollapser,
        link_rewriter: LinkRewriter,
        markdown_converter: MarkdownConverter,
    ):
        self.sanitizer = sanitizer
        self.media_resolver = media_resolver
        self.collapser = collapser
        self.link_rewriter = link_rewriter
        self.markdown_converter = markdown_converter

    def process(self, url: str, html: str, run: CrawlRun, scope: ScopePolicy) -> Path:
        soup = BeautifulSoup(html, "html.parser")
        self.sanitizer.sanitize(soup)
        self.media_resolver.resolve(soup, url, run)
        self.collapser.collapse_dom(soup)
        removed = self.link_rewriter.rewrite(soup, url, run, scope)
        if removed:
            run.log(f"Removed {removed} out-of-scope links from {url}")

        body = soup.body if soup.body is not None else soup
        markdown = self.markdown_converter.convert(body.decode_contents(), run)
        markdown = self.collapser.collapse_markdown(markdown)

        path = Path(run.config.markdown_folder) / run.page_file_for(url)
        path.write_text(markdown, encoding="utf-8")
        run.log(f"Saved page: {url} -> {path}")
        run.report(f"Saved page: {url}")
        return path
