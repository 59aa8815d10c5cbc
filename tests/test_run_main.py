"""
Tests for run.py main() and the container wiring behind it.
"""
import asyncio
from unittest.mock import Mock, patch

from run import main
from webgrabber.api.server import create_app
from webgrabber.container import Container


def _container(tmp_path):
    container = Container()
    container.config.USER_AGENT.from_value("TestBot/1.0")
    container.config.HTTP_TIMEOUT.from_value(5)
    container.config.WEBGRABBER_OUTPUT_ROOT.from_value(str(tmp_path))
    container.config.WEBGRABBER_STATE_FILE.from_value(str(tmp_path / "state.json"))
    container.config.WEBGRABBER_SETTINGS_FILE.from_value(str(tmp_path / "settings.yml"))
    container.config.HOST.from_value("127.0.0.1")
    container.config.PORT.from_value(8123)
    return container


def test_container_creates_services(tmp_path):
    container = _container(tmp_path)

    http_service = container.http_service()
    assert http_service.user_agent == "TestBot/1.0"
    assert http_service.timeout == 5
    assert container.grab_executor() is not None
    assert container.discovery_service().job_state is container.job_state()
    assert container.grab_worker().job_queue is container.job_queue()


def test_settings_file_feeds_request_parser(tmp_path):
    (tmp_path / "settings.yml").write_text("max_pages: 9\nmarkdown_folder: kb\n", encoding="utf-8")
    container = _container(tmp_path)

    cfg = container.request_parser().parse(data={"StartUrl": "https://site.test/"})

    assert cfg.max_pages == 9
    assert cfg.markdown_folder == (tmp_path / "kb").resolve()


def test_app_exposes_routes(tmp_path):
    app = create_app(_container(tmp_path))
    paths = set(app.openapi()["paths"])
    assert {"/grab", "/discover", "/jobs/state", "/jobs/cancel", "/sse/logs", "/systems/health"} <= paths


def test_app_lifespan_starts_and_stops_worker(tmp_path):
    container = _container(tmp_path)
    worker = Mock(is_alive=True)
    container.grab_worker.override(worker)
    app = create_app(container)

    async def run():
        async with app.router.lifespan_context(app):
            worker.start.assert_called_once()
            worker.shutdown.assert_not_called()

    asyncio.run(run())
    worker.shutdown.assert_called_once()


def test_main_accepts_injected_container(tmp_path):
    container = _container(tmp_path)
    container.grab_worker.override(Mock(is_alive=False))

    with patch('run.uvicorn.run') as mock_uvicorn:
        main(container=container)

    assert mock_uvicorn.called
    _, kwargs = mock_uvicorn.call_args
    assert kwargs["host"] == "127.0.0.1"
    assert kwargs["port"] == 8123
