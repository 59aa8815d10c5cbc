import logging

from webgrabber.domain.grab_settings import GrabSettings
from webgrabber.services.settings_file_store import SettingsFileStore


def test_missing_file_gives_defaults(tmp_path):
    store = SettingsFileStore(settings_path=str(tmp_path / "nope.yml"))
    assert store.load_yaml_dict() is None
    assert store.load() == GrabSettings()


def test_values_override_defaults(tmp_path):
    path = tmp_path / "settings.yml"
    path.write_text(
        "user_agent: MyBot/2.0\n"
        "markdown_folder: pages\n"
        "max_pages: 50\n"
        "allow_external_images: true\n",
        encoding="utf-8",
    )
    settings = SettingsFileStore(settings_path=str(path)).load()
    assert settings.user_agent == "MyBot/2.0"
    assert settings.markdown_folder == "pages"
    assert settings.max_pages == 50
    assert settings.allow_external_images is True
    assert settings.crawl_limit == 500


def test_invalid_values_are_ignored(tmp_path, caplog):
    path = tmp_path / "settings.yml"
    path.write_text(
        "max_pages: -1\n"
        "crawl_limit: lots\n"
        "allow_external_images: 1\n"
        "user_agent: '   '\n"
        "colour: blue\n",
        encoding="utf-8",
    )
    with caplog.at_level(logging.WARNING):
        settings = SettingsFileStore(settings_path=str(path)).load()
    assert settings == GrabSettings()
    assert "Ignoring invalid max_pages" in caplog.text
    assert "Unknown settings" in caplog.text
    assert "colour" in caplog.text


def test_malformed_yaml_gives_defaults(tmp_path):
    path = tmp_path / "settings.yml"
    path.write_text("max_pages: [1, 2\n", encoding="utf-8")
    store = SettingsFileStore(settings_path=str(path))
    assert store.load_yaml_dict() is None
    assert store.load() == GrabSettings()


def test_non_mapping_yaml_gives_defaults(tmp_path):
    path = tmp_path / "settings.yml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    assert SettingsFileStore(settings_path=str(path)).load() == GrabSettings()
