"""Domain objects for WebGrabber - explicit re-exports to satisfy linters."""
from .grab_config import GrabConfig as GrabConfig
from .grab_settings import GrabSettings as GrabSettings
from .crawl_run import CrawlRun as CrawlRun
from .crawl_result import CrawlResult as CrawlResult
from .http_response import HttpResponse as HttpResponse
from .last_discovery import LastDiscovery as LastDiscovery
from .visited_tracker import VisitedTracker as VisitedTracker

__all__ = [
    "GrabConfig",
    "GrabSettings",
    "CrawlRun",
    "CrawlResult",
    "HttpResponse",
    "LastDiscovery",
    "VisitedTracker",
]
