from unittest.mock import Mock

from webgrabber.domain.crawl_run import CrawlRun, url_key
from webgrabber.domain.grab_config import GrabConfig


def _run(tmp_path, max_pages=3, progress=None):
    cfg = GrabConfig(start_url="https://site.test/", markdown_folder=tmp_path, max_pages=max_pages)
    return CrawlRun(cfg, progress)


def test_url_key_strips_fragment():
    assert url_key("https://site.test/a#intro") == "https://site.test/a"


def test_enqueue_respects_budget(tmp_path):
    run = _run(tmp_path, max_pages=2)
    assert run.enqueue("https://site.test/")
    assert run.enqueue("https://site.test/a")
    assert not run.enqueue("https://site.test/b")
    assert len(run.visited) == 2
    assert list(run.frontier) == ["https://site.test/", "https://site.test/a"]


def test_enqueue_skips_visited_regardless_of_case_and_fragment(tmp_path):
    run = _run(tmp_path)
    assert run.enqueue("https://site.test/A")
    assert not run.enqueue("https://site.test/a")
    assert not run.enqueue("https://site.test/A#top")
    assert len(run.visited) == 1


def test_next_url_is_fifo(tmp_path):
    run = _run(tmp_path)
    run.enqueue("https://site.test/1")
    run.enqueue("https://site.test/2")
    assert run.next_url() == "https://site.test/1"
    assert run.next_url() == "https://site.test/2"
    assert run.next_url() is None


def test_report_logs_and_forwards(tmp_path):
    progress = Mock()
    run = _run(tmp_path, progress=progress)
    run.report("Visiting: x")
    run.log("quiet")
    progress.assert_called_once_with("Visiting: x")
    assert run.logs == ["Visiting: x", "quiet"]


def test_report_survives_failing_progress_callback(tmp_path):
    run = _run(tmp_path, progress=Mock(side_effect=RuntimeError("boom")))
    run.report("still logged")
    assert run.logs == ["still logged"]


def test_page_file_for_is_stable_and_unique(tmp_path):
    run = _run(tmp_path)
    first = run.page_file_for("https://site.test/a/b")
    assert first == "a-b.md"
    assert run.page_file_for("https://site.test/a/b#frag") == "a-b.md"
    # different URL with the same slug
    assert run.page_file_for("https://site.test/a-b") == "a-b-1.md"


def test_page_file_for_avoids_existing_files(tmp_path):
    (tmp_path / "index.md").write_text("old")
    run = _run(tmp_path)
    assert run.page_file_for("https://site.test/") == "index-1.md"


def test_image_counter_per_slug(tmp_path):
    run = _run(tmp_path)
    assert run.next_image_index("index") == 1
    assert run.next_image_index("index") == 2
    assert run.next_image_index("about") == 1


def test_pages_found_counts_reached_pages_not_visited(tmp_path):
    run = _run(tmp_path)
    run.enqueue("https://site.test/")
    run.enqueue("https://site.test/missing")
    assert run.pages_found == 0
    assert run.mark_reached() == 1
    assert run.pages_found == 1
    assert len(run.visited) == 2
