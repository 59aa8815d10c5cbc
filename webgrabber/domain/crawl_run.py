import logging
from collections import deque
from pathlib import Path
from typing import Callable, Deque, Dict, List, Optional, Set
from urllib.parse import urldefrag

from webgrabber.domain.grab_config import GrabConfig
from webgrabber.domain.visited_tracker import VisitedTracker
from webgrabber.utils.file_naming import page_file_name, unique_name

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


def url_key(url: str) -> str:
    """Identity of a page URL within a run: absolute, fragment removed."""
    return urldefrag(url)[0]


class CrawlRun:
    """
    Mutable state of one grab or discovery run.

    A new instance is created for every run and discarded afterwards, so
    nothing (visited URLs, image dedup entries, counters) leaks between jobs.
    """

    def __init__(self, config: GrabConfig, progress: Optional[ProgressCallback] = None):
        self.config = config
        self.progress = progress
        self.visited = VisitedTracker()
        self.frontier: Deque[str] = deque()
        # page slug -> number of images named after it so far
        self.image_counters: Dict[str, int] = {}
        # absolute image URL or data URI -> path relative to the markdown folder
        self.images: Dict[str, str] = {}
        # image URLs that already failed once; never requested again
        self.failed_images: Set[str] = set()
        # lower-cased page key -> reserved markdown file name
        self._page_files: Dict[str, str] = {}
        self._reserved_page_files: Set[str] = set()
        self.logs: List[str] = []
        # pages whose fetch returned 2xx; visited also holds URLs that failed
        self.pages_reached = 0

    @property
    def pages_found(self) -> int:
        return self.pages_reached

    def mark_reached(self) -> int:
        self.pages_reached += 1
        return self.pages_reached

    def log(self, message: str) -> None:
        self.logs.append(message)
        logger.debug(message)

    def report(self, message: str) -> None:
        """Log a line and forward it to the progress callback."""
        self.logs.append(message)
        logger.info(message)
        if self.progress is not None:
            try:
                self.progress(message)
            except Exception:
                logger.exception("Progress callback failed for %r", message)

    def enqueue(self, url: str) -> bool:
        """Add an unvisited URL to the frontier while the page budget allows.

        Returns True if the URL was newly scheduled.
        """
        key = url_key(url)
        if self.visited.is_visited(key):
            return False
        if len(self.visited) >= self.config.budget:
            return False
        self.visited.mark(key)
        self.frontier.append(key)
        return True

    def next_url(self) -> Optional[str]:
        return self.frontier.popleft() if self.frontier else None

    def page_file_for(self, url: str) -> str:
        """Markdown file name reserved for `url`.

        The same URL always maps to the same name; different URLs that slug
        identically get numbered names. Names already on disk are avoided.
        """
        key = url_key(url).lower()
        name = self._page_files.get(key)
        if name is None:
            name = unique_name(Path(self.config.markdown_folder), page_file_name(url), self._reserved_page_files)
            self._page_files[key] = name
            self._reserved_page_files.add(name)
        return name

    def next_image_index(self, slug: str) -> int:
        self.image_counters[slug] = self.image_counters.get(slug, 0) + 1
        return self.image_counters[slug]
