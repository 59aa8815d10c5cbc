import re
from pathlib import Path
from typing import Collection, Optional
from urllib.parse import urlparse

# Characters rejected by common filesystems, plus control characters.
_INVALID_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
_PAGE_NAME_CHARS = re.compile(r"[^a-zA-Z0-9\-_]")

MAX_NAME_LENGTH = 80

MIME_EXTENSIONS = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/svg+xml": ".svg",
    "image/x-icon": ".ico",
    "image/vnd.microsoft.icon": ".ico",
}

DEFAULT_EXTENSION = ".bin"


def extension_for_mime(content_type: Optional[str]) -> Optional[str]:
    """Map a MIME type (parameters allowed) to a file extension, or None if unknown."""
    if not content_type:
        return None
    media_type = content_type.split(";", 1)[0].strip().lower()
    return MIME_EXTENSIONS.get(media_type)


def page_slug(url: str) -> str:
    """Slug for a page URL: its path without slashes, unsafe characters as dashes."""
    path = urlparse(url).path.strip("/")
    if not path:
        path = "index"
    return _PAGE_NAME_CHARS.sub("-", path)


def page_file_name(url: str) -> str:
    """Markdown file name for a page URL, e.g. /docs/intro -> docs-intro.md."""
    return page_slug(url) + ".md"


def sanitize_name(name: Optional[str]) -> str:
    """Make `name` safe as a file name: invalid characters and whitespace become
    dashes, dash runs collapse, and the result is capped at 80 characters."""
    if not name:
        return ""
    name = _INVALID_CHARS.sub("-", name)
    name = re.sub(r"\s+", "-", name).strip("-")
    name = re.sub(r"-+", "-", name)
    if len(name) > MAX_NAME_LENGTH:
        name = name[:MAX_NAME_LENGTH].strip("-")
    return name


def unique_name(folder: Path, file_name: str, reserved: Collection[str] = ()) -> str:
    """Return `file_name`, or `stem-1.ext`, `stem-2.ext`, ... so that the result
    neither exists in `folder` nor appears in `reserved`."""
    path = Path(file_name)
    stem, ext = path.stem, path.suffix
    candidate = file_name
    i = 1
    while candidate in reserved or (Path(folder) / candidate).exists():
        candidate = f"{stem}-{i}{ext}"
        i += 1
    return candidate
