from typing import Dict, Iterator


class VisitedTracker:
    """
    Tracks which URLs have been visited during a grab.

    URLs compare case-insensitively. The tracker only grows for the lifetime
    of a run, so the visited count doubles as the number of pages found.
    """

    def __init__(self):
        # lower-cased key -> URL as first seen
        self._visited: Dict[str, str] = {}

    @staticmethod
    def _key(url: str) -> str:
        return url.lower()

    def mark(self, url: str) -> bool:
        """Mark a URL as visited. Returns False if it was already visited."""
        key = self._key(url)
        if key in self._visited:
            return False
        self._visited[key] = url
        return True

    def is_visited(self, url: str) -> bool:
        """Check if a URL has been visited."""
        return self._key(url) in self._visited

    def __len__(self) -> int:
        return len(self._visited)

    def __iter__(self) -> Iterator[str]:
        return iter(self._visited.values())
