import logging
from urllib.parse import urljoin

from webgrabber.domain.grab_config import GrabConfig

logger = logging.getLogger(__name__)


class ScopePolicy:
    """Decides which links belong to the grabbed site.

    A URL is in scope when it equals the scope prefix or continues it with
    "/", "?" or "#". Comparison ignores case and a trailing slash on the prefix,
    so a prefix of https://site/docs does not admit https://site/docsearch.
    """

    def __init__(self, scope_prefix: str):
        self.scope_prefix = scope_prefix
        self._prefix = scope_prefix.rstrip("/").lower()

    @classmethod
    def for_config(cls, config: GrabConfig) -> "ScopePolicy":
        """Scope prefix is `base_url` resolved against the start URL."""
        return cls(urljoin(config.start_url, config.base_url or "/"))

    def is_in_scope(self, url: str) -> bool:
        candidate = url.lower()
        if candidate.rstrip("/") == self._prefix:
            return True
        return any(candidate.startswith(self._prefix + sep) for sep in ("/", "?", "#"))

    def should_skip_out_of_scope(self, url: str) -> bool:
        if self.is_in_scope(url):
            return False
        logger.debug("Skipping (out of scope) %s -> prefix %s", url, self.scope_prefix)
        return True
