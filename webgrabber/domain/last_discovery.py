from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class LastDiscovery:
    """Outcome of the most recent completed discovery run."""
    pages_found: int
    start_url: Optional[str] = None
    timestamp: Optional[datetime] = None

    def to_record(self) -> dict:
        """Shape persisted to disk."""
        return {
            "PagesFound": self.pages_found,
            "Timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "StartUrl": self.start_url,
        }

    def to_api(self) -> dict:
        return {
            "pagesFound": self.pages_found,
            "startUrl": self.start_url,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }
