import threading
from collections import deque
from typing import Deque, Optional

from webgrabber.domain.grab_config import GrabConfig


class BackgroundJobQueue:
    """Unbounded thread-safe FIFO of jobs waiting for the worker."""

    def __init__(self):
        self._lock = threading.Lock()
        self._jobs: Deque[GrabConfig] = deque()

    def enqueue(self, config: GrabConfig) -> None:
        with self._lock:
            self._jobs.append(config)

    def requeue(self, config: GrabConfig) -> None:
        """Put a job back at the head, e.g. when the gate was busy."""
        with self._lock:
            self._jobs.appendleft(config)

    def try_dequeue(self) -> Optional[GrabConfig]:
        with self._lock:
            return self._jobs.popleft() if self._jobs else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)
