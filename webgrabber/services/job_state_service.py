import json
import logging
import os
import threading
from pathlib import Path
from typing import Optional

from webgrabber.domain.last_discovery import LastDiscovery
from webgrabber.utils.datetime_utils import parse_to_utc, utc_now

logger = logging.getLogger(__name__)


def _coerce_count(value) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


class JobStateService:
    """Single-flight gate shared by background jobs and inline discovery,
    plus the persisted record of the last completed discovery.

    At most one job holds the gate at a time. Each acquisition gets a fresh
    stop event so cancelling one job never affects the next.
    """

    def __init__(self, *, state_file: str):
        self._gate_lock = threading.Lock()
        self._record_lock = threading.Lock()
        self._running = False
        self._stop_event: Optional[threading.Event] = None
        self.state_file = Path(state_file)
        self._last_discovery = self._load()

    def try_begin_job(self) -> bool:
        with self._gate_lock:
            if self._running:
                return False
            self._running = True
            self._stop_event = threading.Event()
            return True

    def end_job(self) -> None:
        with self._gate_lock:
            self._running = False
            self._stop_event = None

    @property
    def is_running(self) -> bool:
        with self._gate_lock:
            return self._running

    @property
    def stop_event(self) -> Optional[threading.Event]:
        with self._gate_lock:
            return self._stop_event

    def request_cancel(self) -> bool:
        """Signal the current job to stop. Returns False when nothing is running."""
        with self._gate_lock:
            if not self._running or self._stop_event is None:
                return False
            self._stop_event.set()
            return True

    @property
    def last_discovery(self) -> Optional[LastDiscovery]:
        with self._record_lock:
            return self._last_discovery

    def set_last_discovery(self, pages_found: int, start_url: Optional[str]) -> LastDiscovery:
        record = LastDiscovery(pages_found=int(pages_found), start_url=start_url, timestamp=utc_now())
        with self._record_lock:
            self._last_discovery = record
            try:
                self._write(record)
            except OSError:
                logger.exception("Could not persist job state to %s", self.state_file)
        return record

    def _write(self, record: LastDiscovery) -> None:
        if self.state_file.parent and not self.state_file.parent.exists():
            self.state_file.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.state_file.with_name(self.state_file.name + ".tmp")
        tmp.write_text(json.dumps(record.to_record()), encoding="utf-8")
        os.replace(tmp, self.state_file)

    def _load(self) -> Optional[LastDiscovery]:
        """Read the persisted record; a missing or malformed file means no prior discovery."""
        if not self.state_file.is_file():
            return None
        try:
            data = json.loads(self.state_file.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable job state %s: %s", self.state_file, e)
            return None
        if not isinstance(data, dict):
            return None

        pages_found = _coerce_count(data.get("PagesFound"))
        if pages_found is None:
            logger.warning("Ignoring job state without a valid PagesFound: %s", self.state_file)
            return None
        start_url = data.get("StartUrl")
        return LastDiscovery(
            pages_found=pages_found,
            start_url=start_url if isinstance(start_url, str) else None,
            timestamp=parse_to_utc(data.get("Timestamp")),
        )
