from pathlib import Path

import pytest

from webgrabber.domain.grab_config import GrabConfig


def test_budget_is_max_pages_for_full_grab(tmp_path):
    cfg = GrabConfig(start_url="https://site.test/", markdown_folder=tmp_path, max_pages=7, crawl_limit=50)
    assert cfg.budget == 7


def test_budget_is_crawl_limit_for_discovery(tmp_path):
    cfg = GrabConfig(start_url="https://site.test/", markdown_folder=tmp_path, max_pages=7, crawl_limit=50, discover_only=True)
    assert cfg.budget == 50


def test_images_folder_is_under_markdown_folder(tmp_path):
    cfg = GrabConfig(start_url="https://site.test/", markdown_folder=str(tmp_path))
    assert cfg.images_folder == Path(tmp_path) / "images"


@pytest.mark.parametrize("field", ["max_pages", "crawl_limit"])
def test_non_positive_limits_are_rejected(tmp_path, field):
    with pytest.raises(ValueError):
        GrabConfig(start_url="https://site.test/", markdown_folder=tmp_path, **{field: 0})


def test_start_url_is_required(tmp_path):
    with pytest.raises(ValueError):
        GrabConfig(start_url="", markdown_folder=tmp_path)


def test_config_is_immutable(tmp_path):
    cfg = GrabConfig(start_url="https://site.test/", markdown_folder=tmp_path)
    with pytest.raises(Exception):
        cfg.max_pages = 3
