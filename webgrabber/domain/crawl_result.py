"""Crawl result data model."""
from typing import NamedTuple, Optional, Tuple


class CrawlResult(NamedTuple):
    """Result of a grab or discovery run.

    Lets callers distinguish a completed run from a cancelled or rejected one
    and report what happened.
    """
    success: bool
    """False if the run was cancelled or rejected before starting"""

    message: str
    """Short outcome, e.g. "Completed" or "Cancelled" """

    logs: Tuple[str, ...] = ()
    """Log lines in the order they were produced"""

    pages_found: Optional[int] = None
    """Number of distinct URLs visited by the run"""
