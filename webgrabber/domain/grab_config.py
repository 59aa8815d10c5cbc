"""Grab job configuration."""
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class GrabConfig:
    """Immutable parameters of a single grab or discovery job.

    `base_url` is the scope prefix: either an absolute URL or a path that is
    resolved against `start_url` (so "/" means the whole site).
    """
    start_url: str
    markdown_folder: Path
    max_pages: int = 100
    base_url: str = "/"
    user_agent: str = "WebGrabberBot/1.0"
    crawl_limit: int = 500
    # Advisory only; images are always fetched from wherever the page points.
    allow_external_images: bool = False
    discover_only: bool = False

    def __post_init__(self):
        if not self.start_url:
            raise ValueError("start_url is required")
        if int(self.max_pages) <= 0:
            raise ValueError("max_pages must be positive")
        if int(self.crawl_limit) <= 0:
            raise ValueError("crawl_limit must be positive")

    @property
    def budget(self) -> int:
        """Upper bound on visited pages: crawl_limit when discovering, else max_pages."""
        return self.crawl_limit if self.discover_only else self.max_pages

    @property
    def images_folder(self) -> Path:
        return Path(self.markdown_folder) / "images"
