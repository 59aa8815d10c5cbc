from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter

from webgrabber.domain.grab_settings import GrabSettings
from webgrabber.services.grab_worker import GrabWorker


def _stringify(env: dict) -> dict:
    return {key: None if value is None else str(value) for key, value in env.items()}


def create_systems_router(
    container_env: dict,
    worker: Optional[GrabWorker] = None,
    grab_settings: Optional[GrabSettings] = None,
):
    """Liveness of the grab worker, plus the environment and request defaults in effect."""
    router = APIRouter(prefix="/systems", tags=["System"])

    @router.get("/health")
    def health():
        if worker is None:
            return {"status": "ok"}
        alive = worker.is_alive
        return {
            "status": "ok" if alive else "degraded",
            "worker": "running" if alive else "stopped",
        }

    @router.get("/config")
    def get_config():
        body = {"environment": _stringify(container_env)}
        if grab_settings is not None:
            body["grabDefaults"] = asdict(grab_settings)
        return body

    return router
