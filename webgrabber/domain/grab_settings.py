from dataclasses import dataclass


@dataclass(frozen=True)
class GrabSettings:
    """Defaults applied to grab requests that leave a field out."""
    user_agent: str = "WebGrabberBot/1.0"
    markdown_folder: str = "grabbed"
    base_url: str = "/"
    max_pages: int = 100
    crawl_limit: int = 500
    allow_external_images: bool = False
