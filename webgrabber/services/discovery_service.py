import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from typing import List, Optional

from webgrabber.domain.grab_config import GrabConfig
from webgrabber.services.grab_executor import GrabExecutor
from webgrabber.services.job_queue import BackgroundJobQueue
from webgrabber.services.job_state_service import JobStateService
from webgrabber.services.progress_broadcaster import ProgressBroadcaster

logger = logging.getLogger(__name__)

BUSY_MESSAGE = "Another job is already running"
BACKGROUND_MESSAGE = "Discovery continues in the background"


@dataclass
class DiscoveryOutcome:
    success: bool
    pages_found: Optional[int]
    message: str
    details: Optional[str] = None
    logs: Optional[List[str]] = None
    busy: bool = False

    def to_dict(self) -> dict:
        payload = {
            "success": self.success,
            "pagesFound": self.pages_found,
            "message": self.message,
        }
        if self.details is not None:
            payload["details"] = self.details
        if self.logs is not None:
            payload["logs"] = self.logs
        return payload


class DiscoveryService:
    """Counts reachable pages inline, handing off to the background worker on timeout.

    The inline run holds the shared gate for its whole duration, including the
    handoff, so a queued job can never start alongside it.
    """

    def __init__(
        self,
        *,
        job_state: JobStateService,
        job_queue: BackgroundJobQueue,
        grab_executor: GrabExecutor,
        broadcaster: ProgressBroadcaster,
        timeout_seconds: float = 14.0,
    ):
        self.job_state = job_state
        self.job_queue = job_queue
        self.grab_executor = grab_executor
        self.broadcaster = broadcaster
        self.timeout_seconds = timeout_seconds

    def discover(self, config: GrabConfig) -> DiscoveryOutcome:
        if not self.job_state.try_begin_job():
            return DiscoveryOutcome(False, None, BUSY_MESSAGE, busy=True)

        stop_event = self.job_state.stop_event
        pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="discovery")
        try:
            future = pool.submit(self.grab_executor.run, config, self.broadcaster.broadcast, stop_event)
            try:
                result = future.result(timeout=self.timeout_seconds)
            except FutureTimeoutError:
                return self._hand_off(config, future, stop_event)
            except Exception as e:
                logger.exception("Discovery of %s failed", config.start_url)
                return DiscoveryOutcome(False, None, "Discovery failed", details=str(e))

            if result.success:
                self.job_state.set_last_discovery(result.pages_found, config.start_url)
            return DiscoveryOutcome(result.success, result.pages_found, result.message, logs=list(result.logs))
        finally:
            pool.shutdown(wait=False)
            self.job_state.end_job()

    def _hand_off(self, config: GrabConfig, future, stop_event) -> DiscoveryOutcome:
        logger.info("Discovery of %s exceeded %ss; moving to background", config.start_url, self.timeout_seconds)
        if stop_event is not None:
            stop_event.set()
        try:
            future.result()
        except Exception:
            logger.exception("Inline discovery of %s failed while stopping", config.start_url)
        self.job_queue.enqueue(config)
        self.broadcaster.broadcast(f"Discovery of {config.start_url} is taking a while; continuing in the background")
        return DiscoveryOutcome(True, None, BACKGROUND_MESSAGE)
