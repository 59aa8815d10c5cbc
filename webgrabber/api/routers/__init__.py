"""API router factory functions."""
from .grab import create_grab_router
from .progress import create_progress_router
from .systems import create_systems_router

__all__ = [
    "create_grab_router",
    "create_progress_router",
    "create_systems_router",
]
