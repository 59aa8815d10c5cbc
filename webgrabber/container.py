"""Dependency injection container for the application."""
import os

from dependency_injector import containers, providers
import requests

from webgrabber import config as env
from webgrabber.services.content_sanitizer import ContentSanitizer
from webgrabber.services.discovery_service import DiscoveryService
from webgrabber.services.duplicate_image_collapser import DuplicateImageCollapser
from webgrabber.services.grab_executor import GrabExecutor
from webgrabber.services.grab_request_parser import GrabRequestParser
from webgrabber.services.grab_worker import GrabWorker
from webgrabber.services.http_service import HttpService
from webgrabber.services.job_queue import BackgroundJobQueue
from webgrabber.services.job_state_service import JobStateService
from webgrabber.services.link_rewriter import LinkRewriter
from webgrabber.services.markdown_converter import MarkdownConverter
from webgrabber.services.media_resolver import MediaResolver
from webgrabber.services.page_processor import PageProcessor
from webgrabber.services.progress_broadcaster import ProgressBroadcaster
from webgrabber.services.settings_file_store import SettingsFileStore


# Environment variables used by the container (read via `webgrabber.config` helpers).
#
# USER_AGENT (str, default: "WebGrabberBot/1.0")
#   Fallback User-Agent for outbound requests when a job does not set one.
#
# HTTP_TIMEOUT (int seconds, default: 10)
#   Timeout for page and image requests.
#
# WEBGRABBER_OUTPUT_ROOT (str, default: current directory)
#   Relative MarkdownFolder values are placed under this directory.
#
# WEBGRABBER_STATE_FILE (str, default: "last_discovery.json")
#   JSON record of the last completed discovery; read at startup.
#
# WEBGRABBER_SETTINGS_FILE (str, default: "webgrabber.yml")
#   Optional YAML file with request defaults (see SettingsFileStore).
#
# WEBGRABBER_POLL_INTERVAL (float seconds, default: 1.0)
#   How often the worker checks the queue when idle or blocked by the gate.
#
# WEBGRABBER_DISCOVERY_TIMEOUT (float seconds, default: 14.0)
#   How long /discover answers inline before handing the job to the worker.
#
# WEBGRABBER_SUBSCRIBER_BUFFER (int, default: 1000)
#   Progress lines buffered per live subscriber before new lines are dropped.
#
# HOST / PORT (default: "0.0.0.0" / 8000), LOG_LEVEL (default: "INFO")
ENV = {
    "USER_AGENT": env.get_str_env("USER_AGENT", "WebGrabberBot/1.0"),
    "HTTP_TIMEOUT": env.get_int_env("HTTP_TIMEOUT", 10),
    "WEBGRABBER_OUTPUT_ROOT": env.get_str_env("WEBGRABBER_OUTPUT_ROOT", os.getcwd()),
    "WEBGRABBER_STATE_FILE": env.get_str_env("WEBGRABBER_STATE_FILE", "last_discovery.json"),
    "WEBGRABBER_SETTINGS_FILE": env.get_str_env("WEBGRABBER_SETTINGS_FILE", "webgrabber.yml"),
    "WEBGRABBER_POLL_INTERVAL": env.get_float_env("WEBGRABBER_POLL_INTERVAL", 1.0),
    "WEBGRABBER_DISCOVERY_TIMEOUT": env.get_float_env("WEBGRABBER_DISCOVERY_TIMEOUT", 14.0),
    "WEBGRABBER_SUBSCRIBER_BUFFER": env.get_int_env("WEBGRABBER_SUBSCRIBER_BUFFER", 1000),
    "HOST": env.get_str_env("HOST", "0.0.0.0"),
    "PORT": env.get_int_env("PORT", 8000),
    "LOG_LEVEL": env.get_str_env("LOG_LEVEL", "INFO").strip().upper(),
}


class Container(containers.DeclarativeContainer):
    """Dependency injection container for the WebGrabber application."""

    # Configuration
    config = providers.Configuration(default=ENV)

    http_service = providers.Singleton(
        HttpService,
        user_agent=config.USER_AGENT.as_(str),
        http_client=providers.Object(requests.get),
        timeout=config.HTTP_TIMEOUT.as_(int),
    )

    # Request defaults
    settings_store = providers.Singleton(
        SettingsFileStore,
        settings_path=config.WEBGRABBER_SETTINGS_FILE.as_(str),
    )

    grab_settings = providers.Singleton(
        lambda store: store.load(),
        settings_store,
    )

    request_parser = providers.Singleton(
        GrabRequestParser,
        settings=grab_settings,
        output_root=config.WEBGRABBER_OUTPUT_ROOT.as_(str),
    )

    # Page pipeline
    sanitizer = providers.Singleton(ContentSanitizer)

    media_resolver = providers.Singleton(
        MediaResolver,
        http_service=http_service,
    )

    collapser = providers.Singleton(DuplicateImageCollapser)

    markdown_converter = providers.Singleton(MarkdownConverter)

    link_rewriter = providers.Singleton(LinkRewriter)

    page_processor = providers.Singleton(
        PageProcessor,
        sanitizer=sanitizer,
        media_resolver=media_resolver,
        collapser=collapser,
        link_rewriter=link_rewriter,
        markdown_converter=markdown_converter,
    )

    grab_executor = providers.Singleton(
        GrabExecutor,
        http_service=http_service,
        page_processor=page_processor,
        link_rewriter=link_rewriter,
    )

    # Job coordination
    job_queue = providers.Singleton(BackgroundJobQueue)

    job_state = providers.Singleton(
        JobStateService,
        state_file=config.WEBGRABBER_STATE_FILE.as_(str),
    )

    broadcaster = providers.Singleton(
        ProgressBroadcaster,
        max_buffer=config.WEBGRABBER_SUBSCRIBER_BUFFER.as_(int),
    )

    grab_worker = providers.Singleton(
        GrabWorker,
        job_queue=job_queue,
        job_state=job_state,
        grab_executor=grab_executor,
        broadcaster=broadcaster,
        poll_interval_seconds=config.WEBGRABBER_POLL_INTERVAL.as_(float),
    )

    discovery_service = providers.Singleton(
        DiscoveryService,
        job_state=job_state,
        job_queue=job_queue,
        grab_executor=grab_executor,
        broadcaster=broadcaster,
        timeout_seconds=config.WEBGRABBER_DISCOVERY_TIMEOUT.as_(float),
    )
