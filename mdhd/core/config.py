from typing import Any, List
import json
import os
from pydantic import BaseModel, Field
from loguru import logger

# --- Settings Models ---
class GeneralSettings(BaseModel):
    debug_mode: bool = False

class MongoSettings(BaseModel):
    host: str = 'localhost'
    port: int = 27017
    database_name: str = "mdhd_files"
    files_collection: str = "files"
    directories_collection: str = "directories"

class IngestSettings(BaseModel):
    accepted_extensions: List[str] = Field(default_factory=lambda: [".md", ".markdown"])
    directory_batch_size: int = 100  # Entries returned per local directory read
    encoding: str = "utf-8"

class LoggingSettings(BaseModel):
    log_dir: str = "logs"
    file_logging: bool = False

class AppConfig(BaseModel):
    general: GeneralSettings = Field(default_factory=GeneralSettings)
    mongo: MongoSettings = Field(default_factory=MongoSettings)
    ingest: IngestSettings = Field(default_factory=IngestSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

# --- Manager ---
class ConfigManager:
    """
    Loads, validates and persists application configuration.
    """
    def __init__(self, filepath: str = "config.json"):
        self.filepath = filepath
        self._data = AppConfig()
        self._load()

    @property
    def data(self) -> AppConfig:
        return self._data

    def update(self, section: str, key: str, value: Any):
        """Update a setting, validate via Pydantic and autosave."""
        if not hasattr(self._data, section):
            raise ValueError(f"Invalid section: {section}")

        section_obj = getattr(self._data, section)
        if not hasattr(section_obj, key):
            raise ValueError(f"Invalid key: {key} in section {section}")

        candidate = section_obj.model_copy(update={key: value})
        validated = type(section_obj).model_validate(candidate.model_dump())
        setattr(self._data, section, validated)
        self._save()

    def get(self, section: str, key: str) -> Any:
        section_obj = getattr(self._data, section)
        return getattr(section_obj, key)

    def _load(self):
        """Load settings from JSON or TOML file if present; otherwise keep defaults."""
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
        """Persist current config. TOML files are read-only here."""
        if self.filepath.endswith('.toml'):
            return
        try:
            dirname = os.path.dirname(self.filepath)
            if dirname:
                os.makedirs(dirname, exist_ok=True)
            with open(self.filepath, "w", encoding="utf-8") as f:
                json.dump(self._data.model_dump(), f, indent=4)
        except Exception as e:
            logger.error(f"Failed to save config to {self.filepath}: {e}")
