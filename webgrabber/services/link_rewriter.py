import logging
from typing import Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from webgrabber.domain.crawl_run import CrawlRun
from webgrabber.services.scope_policy import ScopePolicy

logger = logging.getLogger(__name__)


class LinkRewriter:
    """Feeds in-scope links to the frontier and points anchors at local files.

    Anchors to saved images point at the image file, in-scope anchors point at
    the page's markdown file, and out-of-scope anchors are removed together
    with their label.
    """

    def _resolve(self, page_url: str, href: str) -> Optional[str]:
        try:
            return urljoin(page_url, href)
        except ValueError:
            logger.debug("Unresolvable href %r on %s", href, page_url)
            return None

    def rewrite(self, soup: BeautifulSoup, page_url: str, run: CrawlRun, scope: ScopePolicy) -> int:
        """Rewrite anchors in place; returns the number of anchors removed."""
        removed = 0
        for a in soup.find_all("a", href=True):
            if a.decomposed:
                continue
            href = (a.get("href") or "").strip()
            if not href or href.startswith("#"):
                continue

            if href[:5].lower() == "data:":
                if href in run.images:
                    a["href"] = run.images[href]
                else:
                    a.decompose()
                    removed += 1
                continue

            absolute = self._resolve(page_url, href)
            if absolute is None:
                continue
            if absolute in run.images:
                a["href"] = run.images[absolute]
                continue

            if scope.should_skip_out_of_scope(absolute):
                a.decompose()
                removed += 1
                continue

            run.enqueue(absolute)
            a["href"] = run.page_file_for(absolute)
        return removed

    def discover(self, soup: BeautifulSoup, page_url: str, run: CrawlRun, scope: ScopePolicy) -> int:
        """Enqueue in-scope links without touching the document; returns how many were new."""
        added = 0
        for a in soup.find_all("a", href=True):
            href = (a.get("href") or "").strip()
            if not href or href.startswith("#") or href[:5].lower() == "data:":
                continue
            absolute = self._resolve(page_url, href)
            if absolute is None or scope.should_skip_out_of_scope(absolute):
                continue
            if run.enqueue(absolute):
                added += 1
        return added
