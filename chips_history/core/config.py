from typing import Any, Optional
import json
import os
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from loguru import logger
from .events import Signal


# --- Settings Models ---
class HistorySettings(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    max_history: int = Field(default=100, ge=1)
    merge_window: int = Field(default=500, ge=0)  # milliseconds
    debug: bool = False


class GeneralSettings(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    debug_mode: bool = False
    log_dir: str = "logs"


class AppConfig(BaseModel):
    general: GeneralSettings = Field(default_factory=GeneralSettings)
    history: HistorySettings = Field(default_factory=HistorySettings)


# --- Manager ---
class ConfigManager:
    """
    Manages application configuration with persistence and reactivity.

    Pass filepath=None for an in-memory configuration that never touches disk.
    """
    def __init__(self, filepath: Optional[str] = "config.json", data: Optional[AppConfig] = None):
        self.filepath = filepath
        self._data = data or AppConfig()
        self.on_changed = Signal("ConfigChanged")
        if data is None:
            self._load()

    @property
    def data(self) -> AppConfig:
        return self._data

    def update(self, section: str, key: str, value: Any):
        """Update a setting, validate via Pydantic, autosave, and emit change event."""
        if not hasattr(self._data, section):
            raise ValueError(f"Invalid section: {section}")

        section_obj = getattr(self._data, section)
        if key not in type(section_obj).model_fields:
            raise ValueError(f"Invalid key: {key} in section {section}")

        try:
            setattr(section_obj, key, value)
        except ValidationError as e:
            raise ValueError(f"Invalid value for {section}.{key}: {value!r}") from e

        self._save()
        self.on_changed.emit(section, key, getattr(section_obj, key))

    def get(self, section: str, key: str) -> Any:
        section_obj = getattr(self._data, section)
        return getattr(section_obj, key)

    def _load(self):
        """Load settings from JSON or TOML file if present; otherwise keep defaults."""
        if not self.filepath:
            return
        if os.path.isfile(self.filepath):
            try:
                if self.filepath.endswith('.toml'):
                    import tomllib
                    with open(self.filepath, "rb") as f:
                        raw = tomllib.load(f)
                else:
                    with open(self.filepath, "r", encoding="utf-8") as f:
                        raw = json.load(f)
                self._data = AppConfig.model_validate(raw)
            except Exception as e:
                logger.error(f"Failed to load config from {self.filepath}: {e}")
                self._save()
        else:
            self._save()

    def _save(self):
        """Persist current config to JSON file."""
        if not self.filepath or self.filepath.endswith('.toml'):
            return
        try:
            dirname = os.path.dirname(self.filepath)
            if dirname:
                os.makedirs(dirname, exist_ok=True)
            with open(self.filepath, "w", encoding="utf-8") as f:
                json.dump(self._data.model_dump(), f, indent=4)
        except Exception as e:
            logger.error(f"Failed to save config to {self.filepath}: {e}")
