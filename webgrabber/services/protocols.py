"""Protocol (interface) definitions for services."""

from typing import Protocol


class MarkdownRenderer(Protocol):
    """Turns an HTML fragment into Markdown text."""

    def render(self, html: str) -> str:
        ...
