import logging
from typing import Optional, Union

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from webgrabber.exceptions import GrabRequestError
from webgrabber.services.discovery_service import DiscoveryService
from webgrabber.services.grab_request_parser import GrabRequestParser
from webgrabber.services.job_queue import BackgroundJobQueue
from webgrabber.services.job_state_service import JobStateService

logger = logging.getLogger(__name__)


class GrabRequest(BaseModel):
    # Field names match the grab form; numbers and flags may arrive as strings.
    StartUrl: Optional[str] = None
    MaxPages: Union[int, str, None] = None
    MarkdownFolder: Optional[str] = None
    BaseUrl: Optional[str] = None
    UserAgent: Optional[str] = None
    CrawlLimit: Union[int, str, None] = None
    AllowExternalImages: Union[bool, str, None] = None
    DiscoverOnly: Union[bool, str, None] = None


def _rejected(e: GrabRequestError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"success": False, "message": e.message})


def create_grab_router(
    request_parser: GrabRequestParser,
    job_queue: BackgroundJobQueue,
    job_state: JobStateService,
    discovery_service: DiscoveryService,
):
    router = APIRouter(tags=["Grab"])

    @router.post("/grab")
    def grab(req: GrabRequest):
        """Queue a grab for the background worker."""
        try:
            config = request_parser.parse(data=req.model_dump())
        except GrabRequestError as e:
            return _rejected(e)
        job_queue.enqueue(config)
        logger.info("Enqueued grab of %s into %s", config.start_url, config.markdown_folder)
        return {"success": True, "message": "Job enqueued", "folder": str(config.markdown_folder)}

    @router.post("/discover")
    def discover(req: GrabRequest):
        """Count reachable pages, answering inline unless the run outlasts the timeout."""
        try:
            config = request_parser.parse(data=req.model_dump(), discover_only=True)
        except GrabRequestError as e:
            return _rejected(e)
        outcome = discovery_service.discover(config)
        if outcome.busy:
            return JSONResponse(status_code=409, content=outcome.to_dict())
        return outcome.to_dict()

    @router.get("/jobs/state")
    def job_state_view():
        last = job_state.last_discovery
        return {
            "running": job_state.is_running,
            "queued": len(job_queue),
            "lastDiscovery": last.to_api() if last is not None else None,
        }

    @router.post("/jobs/cancel")
    def cancel_job():
        if job_state.request_cancel():
            return {"success": True, "message": "Cancellation requested"}
        return {"success": False, "message": "No job is running"}

    return router
