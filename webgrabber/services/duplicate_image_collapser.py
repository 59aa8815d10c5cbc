import logging
import re
from typing import Dict, List, Tuple

from bs4 import BeautifulSoup, NavigableString, Tag

logger = logging.getLogger(__name__)

_TITLE = r'(?:\s+"[^"]*")?'
_PLAIN = r'!\[[^\]]*\]\((?P<src>[^\s)]+)' + _TITLE + r'\)'
_PLAIN_SAME = r'!\[[^\]]*\]\((?P=src)' + _TITLE + r'\)'
_LINK_TARGET = r'\]\([^\s)]+' + _TITLE + r'\)'
_LINKED = r'\[' + _PLAIN + _LINK_TARGET
_LINKED_SAME = r'\[' + _PLAIN_SAME + _LINK_TARGET

# Adjacent references to the same image, separated only by whitespace.
_MARKDOWN_RULES = (
    # image, then the same image wrapped in a link -> image
    re.compile(r'(?P<keep>' + _PLAIN + r')\s*' + _LINKED_SAME),
    # linked image, then the same image -> image
    re.compile(_LINKED + r'\s*(?P<keep>' + _PLAIN_SAME + r')'),
    # image twice -> first
    re.compile(r'(?P<keep>' + _PLAIN + r')\s*' + _PLAIN_SAME),
    # linked image twice -> first
    re.compile(r'(?P<keep>' + _LINKED + r')\s*' + _LINKED_SAME),
)


class DuplicateImageCollapser:
    """Removes repeated occurrences of the same image.

    Pages often show an image and then the same image again as a link to the
    full-size file. After image relocation both point at the same local path,
    so only one occurrence is kept, preferring the bare image.
    """

    def collapse_dom(self, soup: BeautifulSoup) -> int:
        """Collapse duplicate occurrences in the document; returns how many were removed."""
        groups: Dict[str, List[Tuple[Tag, bool]]] = {}
        for img in soup.find_all("img"):
            src = (img.get("src") or "").strip()
            if not src:
                continue
            parent = img.parent
            if isinstance(parent, Tag) and parent.name == "a" and self._wraps_only(parent, img):
                groups.setdefault(src, []).append((parent, True))
            else:
                groups.setdefault(src, []).append((img, False))

        removed = 0
        for src, occurrences in groups.items():
            if len(occurrences) < 2:
                continue
            keep = next((node for node, linked in occurrences if not linked), occurrences[0][0])
            for node, _ in occurrences:
                if node is not keep:
                    node.decompose()
                    removed += 1
            logger.debug("Collapsed %s duplicate occurrences of %s", len(occurrences) - 1, src)
        return removed

    def collapse_markdown(self, markdown: str) -> str:
        """Apply the adjacency rules until the text stops changing."""
        previous = None
        while previous != markdown:
            previous = markdown
            for rule in _MARKDOWN_RULES:
                markdown = rule.sub(r'\g<keep>', markdown)
        return markdown

    @staticmethod
    def _wraps_only(anchor: Tag, img: Tag) -> bool:
        children = [
            child for child in anchor.contents
            if not (isinstance(child, NavigableString) and not child.strip())
        ]
        return len(children) == 1 and children[0] is img
