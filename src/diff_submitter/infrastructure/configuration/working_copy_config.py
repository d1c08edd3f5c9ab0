"""Per-working-copy settings read from a ``.arcconfig`` JSON file.

The file lives at the working-copy root. Keys are mapped onto settings fields
through the ``arcconfig_keys`` class attribute of the settings class, so each
settings class picks only the keys it owns.
"""

import json
from pathlib import Path
from typing import Any

from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

ARCCONFIG_FILENAME = ".arcconfig"


def find_working_copy_config(start: Path | None = None) -> Path | None:
    """Walk up from ``start`` (default: cwd) to the nearest ``.arcconfig``."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / ARCCONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_working_copy_config(path: Path | None) -> dict[str, Any]:
    if path is None:
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {path}, got {type(data).__name__}")
    return data


class WorkingCopyConfigSource(PydanticBaseSettingsSource):
    """Settings source that maps ``.arcconfig`` keys onto settings fields."""

    def __init__(self, settings_cls: type[BaseSettings], config_path: Path | None = None) -> None:
        super().__init__(settings_cls)
        self._data = load_working_copy_config(config_path or find_working_copy_config())
        self._keys: dict[str, str] = getattr(settings_cls, "arcconfig_keys", {})

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        for config_key, target in self._keys.items():
            if target == field_name and config_key in self._data:
                return self._data[config_key], field_name, False
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for field_name, field in self.settings_cls.model_fields.items():
            value, key, _ = self.get_field_value(field, field_name)
            if value is not None:
                values[key] = value
        return values
