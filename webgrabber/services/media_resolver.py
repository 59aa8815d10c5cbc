import base64
import logging
import os
from pathlib import Path
from typing import List, Optional, Tuple
from urllib.parse import parse_qsl, unquote, unquote_to_bytes, urljoin, urlparse

from bs4 import BeautifulSoup

from webgrabber.domain.crawl_run import CrawlRun
from webgrabber.exceptions import HttpFetchError, ImageDecodeError
from webgrabber.utils.file_naming import (
    DEFAULT_EXTENSION,
    MAX_NAME_LENGTH,
    extension_for_mime,
    page_slug,
    sanitize_name,
    unique_name,
)

logger = logging.getLogger(__name__)

IMAGES_DIR = "images"


def parse_srcset(value: str) -> List[Tuple[str, str]]:
    """Split a srcset attribute into (url, descriptor) candidates.

    The URL is a run of non-whitespace characters, so commas inside it (data
    URIs) survive. A URL ending in a comma has no descriptor; otherwise the
    descriptor runs up to the next comma.
    """
    candidates = []
    pos = 0
    n = len(value)
    while pos < n:
        while pos < n and (value[pos].isspace() or value[pos] == ","):
            pos += 1
        if pos >= n:
            break
        start = pos
        while pos < n and not value[pos].isspace():
            pos += 1
        url = value[start:pos]
        descriptor = ""
        if url.endswith(","):
            url = url.rstrip(",")
        else:
            start = pos
            while pos < n and value[pos] != ",":
                pos += 1
            descriptor = value[start:pos].strip()
            pos += 1
        if url:
            candidates.append((url, descriptor))
    return candidates


def decode_data_uri(uri: str) -> Tuple[str, bytes]:
    """Return (mime type, payload bytes) for a data: URI."""
    comma = uri.find(",")
    if comma < 0:
        raise ImageDecodeError("missing ',' separator")
    meta = uri[5:comma]
    payload = uri[comma + 1:]
    mime = meta.split(";", 1)[0].strip().lower()
    if meta.lower().endswith(";base64"):
        try:
            data = base64.b64decode("".join(unquote(payload).split()), validate=True)
        except ValueError as e:
            raise ImageDecodeError(str(e)) from e
    else:
        data = unquote_to_bytes(payload)
    return mime, data


class MediaResolver:
    """Downloads images referenced by a page and points the page at the local copies.

    Handles `src`, lazy `data-src` and `srcset`. Each distinct image (absolute URL
    or data URI) is fetched and written at most once per run; later occurrences
    reuse the saved path. Failures are logged and leave the attribute unchanged.
    """

    def __init__(self, http_service):
        self.http_service = http_service

    def resolve(self, soup: BeautifulSoup, page_url: str, run: CrawlRun) -> None:
        slug = page_slug(page_url)
        for img in soup.find_all("img"):
            src = (img.get("src") or "").strip()
            data_src = (img.get("data-src") or "").strip()
            srcset = (img.get("srcset") or "").strip()
            hint = img.get("alt") or img.get("title") or ""

            if src:
                new_src = self.save_image(src, page_url, slug, hint, run)
                if new_src:
                    img["src"] = new_src

            if data_src:
                new_data = self.save_image(data_src, page_url, slug, hint, run)
                if new_data:
                    img["data-src"] = new_data
                    if not src:
                        img["src"] = new_data

            if srcset:
                rewritten = []
                first_saved = None
                for url, descriptor in parse_srcset(srcset):
                    new_url = self.save_image(url, page_url, slug, hint, run)
                    if new_url and first_saved is None:
                        first_saved = new_url
                    target = new_url or url
                    rewritten.append(f"{target} {descriptor}" if descriptor else target)
                if first_saved is not None:
                    img["srcset"] = ", ".join(rewritten)
                    if not src and not img.get("src"):
                        img["src"] = first_saved

    def save_image(self, url: str, page_url: str, slug: str, hint: str, run: CrawlRun) -> Optional[str]:
        """Save one image and return its path relative to the markdown folder, or None."""
        url = url.strip()
        if not url:
            return None
        if url[:5].lower() == "data:":
            return self._save_data_uri(url, slug, run)

        if url.startswith("//"):
            url = urlparse(run.config.start_url).scheme + ":" + url
        absolute = urljoin(page_url, url)
        parsed = urlparse(absolute)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            run.log(f"Invalid image URL: {url}")
            return None

        if absolute in run.images:
            return run.images[absolute]
        if absolute in run.failed_images:
            return None

        try:
            resp = self.http_service.fetch_binary(absolute, referer=page_url, user_agent=run.config.user_agent)
        except HttpFetchError as e:
            run.failed_images.add(absolute)
            run.report(f"Failed to save image {absolute}: {e.original}")
            return None
        if not resp.ok:
            run.failed_images.add(absolute)
            run.report(f"Failed to download image {absolute}: {resp.status_code}")
            return None

        file_name = self._file_name_for(parsed, resp.content_type, slug, hint, run)
        rel = self._write(file_name, resp.content, run)
        if rel is None:
            run.failed_images.add(absolute)
            return None
        run.images[absolute] = rel
        run.report(f"Saved image: {absolute}")
        return rel

    def _save_data_uri(self, uri: str, slug: str, run: CrawlRun) -> Optional[str]:
        if uri in run.images:
            return run.images[uri]
        if uri in run.failed_images:
            return None
        try:
            mime, data = decode_data_uri(uri)
        except ImageDecodeError as e:
            run.failed_images.add(uri)
            run.report(f"Failed to save data-uri image: {e}")
            return None

        ext = extension_for_mime(mime) or DEFAULT_EXTENSION
        file_name = _join_name(f"{slug}-image-{run.next_image_index(slug)}", ext)
        rel = self._write(file_name, data, run)
        if rel is None:
            run.failed_images.add(uri)
            return None
        run.images[uri] = rel
        run.report("Saved data-uri image")
        return rel

    def _file_name_for(self, parsed, content_type: Optional[str], slug: str, hint: str, run: CrawlRun) -> str:
        ext_from_content = extension_for_mime(content_type)

        raw = unquote(parsed.path.rsplit("/", 1)[-1])
        if not raw and parsed.query:
            for key, value in parse_qsl(parsed.query):
                if "file" in key.lower() or "name" in key.lower():
                    raw = value
                    break

        stem, current_ext = os.path.splitext(raw)
        if not current_ext:
            ext = ext_from_content or DEFAULT_EXTENSION
        elif ext_from_content and current_ext.lower() != ext_from_content:
            ext = ext_from_content
        else:
            ext = current_ext

        name_only = sanitize_name(stem)
        if not name_only:
            hint_name = sanitize_name(hint)
            if hint_name:
                return _join_name(f"{slug}-{hint_name}", ext)
            return _join_name(f"{slug}-image-{run.next_image_index(slug)}", ext)

        lowered = name_only.lower()
        if lowered == slug.lower() or lowered.startswith(slug.lower() + "-"):
            return _join_name(name_only, ext)
        return _join_name(f"{slug}-{name_only}", ext)

    def _write(self, file_name: str, data: bytes, run: CrawlRun) -> Optional[str]:
        folder = Path(run.config.markdown_folder) / IMAGES_DIR
        try:
            folder.mkdir(parents=True, exist_ok=True)
            name = unique_name(folder, file_name)
            (folder / name).write_bytes(data)
        except OSError as e:
            run.report(f"Failed to write image {file_name}: {e}")
            return None
        logger.debug("Wrote image %s (%s bytes)", folder / name, len(data))
        return f"{IMAGES_DIR}/{name}"


def _join_name(stem: str, ext: str) -> str:
    """Sanitized `stem + ext`, shortening the stem so the extension survives the length cap."""
    ext = sanitize_name(ext)
    stem = sanitize_name(stem)[:max(1, MAX_NAME_LENGTH - len(ext))].strip("-")
    return (stem or "image") + ext
