import logging

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

_REMOVED_ELEMENTS = ("script", "style")
_URL_ATTRIBUTES = ("href", "src")


class ContentSanitizer:
    """Strips executable content from a parsed page before conversion.

    Removes script and style elements, inline event handlers (on* attributes)
    and javascript: URLs. Everything else, including text, is left in place.
    """

    def sanitize(self, soup: BeautifulSoup) -> BeautifulSoup:
        removed = 0
        for tag in soup.find_all(list(_REMOVED_ELEMENTS)):
            tag.decompose()
            removed += 1

        for tag in soup.find_all(True):
            for name in list(tag.attrs):
                if name.lower().startswith("on"):
                    del tag.attrs[name]
                    continue
                if name.lower() in _URL_ATTRIBUTES and self._is_javascript_url(tag.attrs[name]):
                    del tag.attrs[name]

        logger.debug("Sanitizer removed %s script/style elements", removed)
        return soup

    @staticmethod
    def _is_javascript_url(value) -> bool:
        if isinstance(value, list):
            value = " ".join(value)
        return str(value).lstrip().lower().startswith("javascript:")
