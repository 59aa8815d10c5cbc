import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from webgrabber.api.routers import create_grab_router, create_progress_router, create_systems_router

logger = logging.getLogger(__name__)


def create_app(container) -> FastAPI:
    """Build the FastAPI app from a Container; the worker runs for the app's lifetime."""
    worker = container.grab_worker()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        worker.start()
        try:
            yield
        finally:
            logger.info("Shutting down grab worker")
            worker.shutdown()

    app = FastAPI(title="WebGrabber", lifespan=lifespan)
    app.include_router(
        create_grab_router(
            container.request_parser(),
            container.job_queue(),
            container.job_state(),
            container.discovery_service(),
        )
    )
    app.include_router(create_progress_router(container.broadcaster()))
    app.include_router(create_systems_router(container.config(), worker, container.grab_settings()))
    return app
