import logging
import re
from typing import Optional

import markdownify
from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from webgrabber.domain.crawl_run import CrawlRun
from webgrabber.services.protocols import MarkdownRenderer

logger = logging.getLogger(__name__)

_HTML_TAG = re.compile(r"</?[a-zA-Z]")
_EXCESS_BLANK_LINES = re.compile(r"\n(?:[ \t]*\n){3,}")


def normalize_markdown(markdown: str) -> str:
    """Trim, and collapse three or more consecutive blank lines into one."""
    return _EXCESS_BLANK_LINES.sub("\n\n", markdown.strip())


def looks_unconverted(markdown: Optional[str]) -> bool:
    """True when renderer output is empty or still contains HTML tags."""
    if markdown is None or not markdown.strip():
        return True
    return _HTML_TAG.search(markdown) is not None


class MarkdownifyRenderer:
    """Primary renderer backed by markdownify."""

    def __init__(self, heading_style: str = markdownify.ATX, bullets: str = "-"):
        self.heading_style = heading_style
        self.bullets = bullets

    def render(self, html: str) -> str:
        return markdownify.markdownify(html, heading_style=self.heading_style, bullets=self.bullets)


class FallbackMarkdownRenderer:
    """Small DOM walker covering the common elements.

    Used when the primary renderer fails or leaves HTML behind. Each node
    renders to its own string, so link labels never pick up text emitted
    elsewhere in the document.
    """

    def render(self, html: str) -> str:
        soup = BeautifulSoup(html or "", "html.parser")
        return normalize_markdown(self._children(soup, 0))

    def _children(self, node: Tag, level: int) -> str:
        return "".join(self._node(child, level) for child in node.children)

    def _node(self, node, level: int) -> str:
        if isinstance(node, PreformattedString):
            # comments, doctype, CDATA, processing instructions
            return ""
        if isinstance(node, NavigableString):
            text = str(node)
            return text if text.strip() else ""
        if not isinstance(node, Tag):
            return ""

        name = node.name.lower()
        if name in ("h1", "h2", "h3", "h4", "h5", "h6"):
            return "\n" + "#" * int(name[1]) + " " + self._children(node, level).strip() + "\n\n"
        if name == "p":
            return "\n" + self._children(node, level) + "\n\n"
        if name == "br":
            return "\n"
        if name in ("ul", "ol"):
            return self._list(node, level, ordered=name == "ol")
        if name == "a":
            href = node.get("href") or ""
            text = self._children(node, level).strip() or href
            return f"[{text}]({href})"
        if name == "img":
            return f"![{node.get('alt') or ''}]({node.get('src') or ''})"
        if name in ("strong", "b"):
            return "**" + self._children(node, level) + "**"
        if name in ("em", "i"):
            return "*" + self._children(node, level) + "*"
        if name == "pre":
            return "\n```\n" + node.get_text().rstrip() + "\n```\n\n"
        if name == "code":
            return "`" + node.get_text() + "`"
        return self._children(node, level)

    def _list(self, node: Tag, level: int, ordered: bool) -> str:
        indent = "  " * level
        lines = []
        for idx, li in enumerate(node.find_all("li", recursive=False), start=1):
            marker = f"{idx}. " if ordered else "- "
            item = self._children(li, level + 1).strip("\n").rstrip()
            lines.append(indent + marker + item.lstrip())
        # a nested list starts on its own line under the parent item
        return "\n" + "\n".join(lines) + "\n"


class MarkdownConverter:
    """Converts page HTML to Markdown, switching to the fallback renderer when needed."""

    def __init__(self, primary: Optional[MarkdownRenderer] = None, fallback: Optional[MarkdownRenderer] = None):
        self.primary = primary if primary is not None else MarkdownifyRenderer()
        self.fallback = fallback if fallback is not None else FallbackMarkdownRenderer()

    def convert(self, html: str, run: Optional[CrawlRun] = None) -> str:
        try:
            markdown = self.primary.render(html)
        except Exception as e:
            logger.warning("Primary markdown renderer failed: %s", e, exc_info=True)
            markdown = None

        if looks_unconverted(markdown):
            notice = "Using fallback markdown converter"
            if run is not None:
                run.report(notice)
            else:
                logger.info(notice)
            markdown = self.fallback.render(html)

        return normalize_markdown(markdown or "")
