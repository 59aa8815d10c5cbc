import logging
from pathlib import Path
from typing import Mapping, Optional
from urllib.parse import urlparse

from webgrabber.domain.grab_config import GrabConfig
from webgrabber.domain.grab_settings import GrabSettings
from webgrabber.exceptions import GrabRequestError

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")


class GrabRequestParser:
    """Parse a grab/discover request into a GrabConfig.

    Responsibility: validation and defaults for user input. Keys follow the
    form field names (StartUrl, MaxPages, ...). Missing values and
    non-positive limits fall back to the configured GrabSettings; a relative
    MarkdownFolder is placed under the output root.
    """

    def __init__(self, *, settings: GrabSettings, output_root: str):
        self.settings = settings
        self.output_root = Path(output_root)

    def parse(self, *, data: Mapping, discover_only: Optional[bool] = None) -> GrabConfig:
        start_url = str(data.get("StartUrl") or "").strip()
        if not start_url:
            raise GrabRequestError("StartUrl is required", "StartUrl")
        parsed = urlparse(start_url)
        if parsed.scheme.lower() not in ("http", "https") or not parsed.netloc:
            raise GrabRequestError("StartUrl must be an absolute http or https URL", "StartUrl")

        if discover_only is None:
            discover_only = self._bool(data, "DiscoverOnly", False)

        return GrabConfig(
            start_url=start_url,
            markdown_folder=self._folder(data.get("MarkdownFolder")),
            max_pages=self._positive_int(data, "MaxPages", self.settings.max_pages),
            base_url=self._text(data, "BaseUrl", self.settings.base_url),
            user_agent=self._text(data, "UserAgent", self.settings.user_agent),
            crawl_limit=self._positive_int(data, "CrawlLimit", self.settings.crawl_limit),
            allow_external_images=self._bool(data, "AllowExternalImages", self.settings.allow_external_images),
            discover_only=discover_only,
        )

    def _folder(self, value) -> Path:
        folder = str(value).strip() if value is not None else ""
        path = Path(folder or self.settings.markdown_folder).expanduser()
        if not path.is_absolute():
            path = self.output_root / path
        return path.resolve()

    @staticmethod
    def _text(data: Mapping, key: str, default: str) -> str:
        value = data.get(key)
        if value is None:
            return default
        return str(value).strip() or default

    @staticmethod
    def _positive_int(data: Mapping, key: str, default: int) -> int:
        value = data.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            return default
        if isinstance(value, bool):
            raise GrabRequestError(f"{key} must be a whole number", key)
        try:
            number = int(str(value).strip())
        except ValueError:
            raise GrabRequestError(f"{key} must be a whole number", key)
        if number <= 0:
            logger.debug("Non-positive %s=%s; using default %s", key, number, default)
            return default
        return number

    @staticmethod
    def _bool(data: Mapping, key: str, default: bool) -> bool:
        value = data.get(key)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
        raise GrabRequestError(f"{key} must be true or false", key)
