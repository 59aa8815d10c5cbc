import logging
import threading
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from webgrabber.domain.crawl_result import CrawlResult
from webgrabber.domain.crawl_run import CrawlRun, ProgressCallback
from webgrabber.domain.grab_config import GrabConfig
from webgrabber.exceptions import HttpFetchError
from webgrabber.services.http_service import HttpService
from webgrabber.services.link_rewriter import LinkRewriter
from webgrabber.services.page_processor import PageProcessor
from webgrabber.services.scope_policy import ScopePolicy

logger = logging.getLogger(__name__)


class GrabExecutor:
    """Runs one grab or discovery job breadth-first from the start URL.

    This class owns the traversal control-flow (frontier, page budget,
    cancellation checks, per-page error isolation). Page conversion is
    delegated to the PageProcessor; discovery mode only collects links.
    """

    def __init__(
        self,
        *,
        http_service: HttpService,
        page_processor: PageProcessor,
        link_rewriter: LinkRewriter,
    ):
        self.http_service = http_service
        self.page_processor = page_processor
        self.link_rewriter = link_rewriter

    def _is_stopped(self, stop_event) -> bool:
        return stop_event is not None and getattr(stop_event, "is_set", lambda: False)()

    def run(
        self,
        config: GrabConfig,
        progress: Optional[ProgressCallback] = None,
        stop_event: Optional[threading.Event] = None,
    ) -> CrawlResult:
        if config is None:
            raise ValueError("config is required for grab")

        run = CrawlRun(config, progress)
        parsed = urlparse(config.start_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            run.report(f"Invalid start URL: {config.start_url}")
            return CrawlResult(False, "Invalid start URL", tuple(run.logs), 0)

        scope = ScopePolicy.for_config(config)
        if not config.discover_only:
            Path(config.markdown_folder).mkdir(parents=True, exist_ok=True)
            config.images_folder.mkdir(parents=True, exist_ok=True)

        run.enqueue(config.start_url)

        while True:
            if self._is_stopped(stop_event):
                run.report("Operation cancelled")
                return CrawlResult(False, "Cancelled", tuple(run.logs), run.pages_found)

            url = run.next_url()
            if url is None:
                break
            run.report(f"Visiting: {url}")

            try:
                response = self.http_service.fetch(url, user_agent=config.user_agent)
            except HttpFetchError as e:
                logger.warning("Fetch failed for %s: %s", url, e)
                run.report(f"Failed to get {url}: {e.original}")
                continue
            if not response.ok:
                run.report(f"Failed to get {url}: {response.status_code}")
                continue

            found = run.mark_reached()
            if config.discover_only:
                run.report(f"Pages found: {found}")
            try:
                if config.discover_only:
                    soup = BeautifulSoup(response.text, "html.parser")
                    self.link_rewriter.discover(soup, url, run, scope)
                else:
                    self.page_processor.process(url, response.text, run, scope)
            except Exception as e:
                logger.error("Error visiting %s: %s", url, e, exc_info=True)
                run.report(f"Error visiting {url}: {e}")

        logger.info("Grab of %s finished: %s pages", config.start_url, run.pages_found)
        return CrawlResult(True, "Completed", tuple(run.logs), run.pages_found)
