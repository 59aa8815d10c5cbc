import logging
import os
from dataclasses import fields
from typing import Optional

import yaml

from webgrabber.domain.grab_settings import GrabSettings

logger = logging.getLogger(__name__)


class SettingsFileStore:
    """Filesystem/YAML IO for the grab defaults file.

    The file is optional; a missing or invalid file yields the built-in
    defaults. Example:

        user_agent: MyBot/2.0
        markdown_folder: pages
        max_pages: 50
    """

    def __init__(self, *, settings_path: str):
        self.settings_path = settings_path

    def load_yaml_dict(self) -> Optional[dict]:
        """Return parsed YAML dict, or None if missing/invalid."""
        if not os.path.isfile(self.settings_path):
            return None
        try:
            with open(self.settings_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Could not read settings file %s: %s", self.settings_path, e)
            return None
        return data if isinstance(data, dict) else None

    def load(self) -> GrabSettings:
        defaults = GrabSettings()
        data = self.load_yaml_dict()
        if data is None:
            return defaults

        values = {}
        for field in fields(GrabSettings):
            if field.name not in data:
                continue
            raw = data[field.name]
            expected = type(getattr(defaults, field.name))
            if expected is int and not isinstance(raw, bool) and isinstance(raw, int) and raw > 0:
                values[field.name] = raw
            elif expected is bool and isinstance(raw, bool):
                values[field.name] = raw
            elif expected is str and isinstance(raw, str) and raw.strip():
                values[field.name] = raw.strip()
            else:
                logger.warning("Ignoring invalid %s=%r in %s", field.name, raw, self.settings_path)

        unknown = set(data) - {f.name for f in fields(GrabSettings)}
        if unknown:
            logger.warning("Unknown settings in %s: %s", self.settings_path, ", ".join(sorted(map(str, unknown))))
        logger.info("Loaded grab defaults from %s", self.settings_path)
        return GrabSettings(**values)
