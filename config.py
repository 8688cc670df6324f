import os
import yaml

from settings_schema import SettingsSchema, validate_settings

APP_VERSION = "1.0.0"


class YamlConfig:
    """Load and save analytics settings to a YAML file."""

    ENV_PATH = "GYMLOG_SETTINGS"

    def __init__(self, path: str | None = None) -> None:
        self.path = path or os.environ.get(self.ENV_PATH, "settings.yaml")

    def load(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} must contain a mapping")
        return data

    def save(self, data: dict) -> None:
        validate_settings(data)
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(dict(data), f, allow_unicode=True)

    def settings(self) -> SettingsSchema:
        """Return the validated settings, defaults filled in."""
        return validate_settings(self.load())
