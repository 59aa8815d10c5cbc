from unittest.mock import Mock

from webgrabber.api.routers.systems import create_systems_router
from webgrabber.domain.grab_settings import GrabSettings


def _get_endpoint(router, path: str, method: str):
    for route in router.routes:
        if getattr(route, "path", None) != path:
            continue
        methods = getattr(route, "methods", set())
        if method.upper() in methods:
            return route.endpoint
    raise AssertionError(f"No route found for {method} {path}")


def test_health_without_worker():
    router = create_systems_router({})
    assert _get_endpoint(router, "/systems/health", "GET")() == {"status": "ok"}


def test_health_running_worker():
    router = create_systems_router({}, Mock(is_alive=True))
    assert _get_endpoint(router, "/systems/health", "GET")() == {"status": "ok", "worker": "running"}


def test_health_degraded_when_worker_stopped():
    router = create_systems_router({}, Mock(is_alive=False))
    assert _get_endpoint(router, "/systems/health", "GET")() == {"status": "degraded", "worker": "stopped"}


def test_config_stringifies_environment():
    router = create_systems_router({"PORT": 8000, "USER_AGENT": "Bot/1.0", "EMPTY": None})
    body = _get_endpoint(router, "/systems/config", "GET")()
    assert body == {"environment": {"PORT": "8000", "USER_AGENT": "Bot/1.0", "EMPTY": None}}


def test_config_includes_grab_defaults():
    settings = GrabSettings(user_agent="Team/1.0", max_pages=7)
    router = create_systems_router({}, grab_settings=settings)
    defaults = _get_endpoint(router, "/systems/config", "GET")()["grabDefaults"]
    assert defaults["user_agent"] == "Team/1.0"
    assert defaults["max_pages"] == 7
    assert defaults["crawl_limit"] == 500
