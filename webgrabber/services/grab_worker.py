import logging
import threading
from typing import Optional

from webgrabber.services.grab_executor import GrabExecutor
from webgrabber.services.job_queue import BackgroundJobQueue
from webgrabber.services.job_state_service import JobStateService
from webgrabber.services.progress_broadcaster import ProgressBroadcaster

logger = logging.getLogger(__name__)


class GrabWorker:
    """Single background worker that drains the job queue.

    Jobs run one at a time under the shared gate. When the gate is held by an
    inline discovery the job goes back to the head of the queue and is retried
    on the next poll.
    """

    def __init__(
        self,
        *,
        job_queue: BackgroundJobQueue,
        job_state: JobStateService,
        grab_executor: GrabExecutor,
        broadcaster: ProgressBroadcaster,
        poll_interval_seconds: float = 1.0,
    ):
        self.job_queue = job_queue
        self.job_state = job_state
        self.grab_executor = grab_executor
        self.broadcaster = broadcaster
        self.poll_interval_seconds = poll_interval_seconds
        self._stopping = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stopping.clear()
        self._thread = threading.Thread(target=self._loop, name="grab-worker", daemon=True)
        self._thread.start()
        logger.info("Grab worker started (poll every %ss)", self.poll_interval_seconds)

    def shutdown(self, timeout: Optional[float] = 5.0) -> None:
        """Stop polling and ask the current job to stop at its next page."""
        self._stopping.set()
        self.job_state.request_cancel()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning("Grab worker did not stop within %ss", timeout)
        self._thread = None

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _loop(self) -> None:
        while not self._stopping.is_set():
            try:
                worked = self.run_once()
            except Exception:
                logger.exception("Unexpected error in grab worker loop")
                worked = False
            if not worked:
                self._stopping.wait(self.poll_interval_seconds)

    def run_once(self) -> bool:
        """Run the next queued job if the gate is free. Returns True if a job ran."""
        config = self.job_queue.try_dequeue()
        if config is None:
            return False
        if not self.job_state.try_begin_job():
            self.job_queue.requeue(config)
            logger.info("Another job is running; requeued %s", config.start_url)
            return False

        try:
            logger.info("Starting background job for %s (discover_only=%s)", config.start_url, config.discover_only)
            result = self.grab_executor.run(
                config,
                progress=self.broadcaster.broadcast,
                stop_event=self.job_state.stop_event,
            )
            if config.discover_only and result.success:
                self.job_state.set_last_discovery(result.pages_found, config.start_url)
            self.broadcaster.broadcast(f"Completed: {result.message}")
        except Exception as e:
            logger.exception("Background job for %s failed", config.start_url)
            self.broadcaster.broadcast(f"Error: {e}")
        finally:
            self.job_state.end_job()
        return True
