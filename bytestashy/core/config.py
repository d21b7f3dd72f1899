"""Persistent, non-secret CLI configuration."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from platformdirs import user_config_path
from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError

from bytestashy.core.errors import ConfigError

logger = logging.getLogger(__name__)

APP_NAME = "bytestashy"
CONFIG_FILENAME = "config.json"
DEFAULT_PAGE_SIZE = 10


class Config(BaseModel):
    """Configuration for the bytestashy CLI.

    The API key is deliberately absent: it lives in the keyring only.
    """

    model_config = ConfigDict(extra="ignore")

    # Base URL of the ByteStash server, e.g. "https://snippets.example.tld"
    server_url: Optional[str] = None
    default_page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=100)

    @property
    def is_configured(self) -> bool:
        return bool(self.server_url)


def default_config_dir() -> Path:
    """Per-user config directory following the OS convention."""
    return user_config_path(APP_NAME)


class ConfigStore:
    """Loads and saves :class:`Config` as JSON at ``<config_dir>/config.json``."""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = Path(config_dir) if config_dir is not None else default_config_dir()

    @property
    def path(self) -> Path:
        return self.config_dir / CONFIG_FILENAME

    def load(self) -> Config:
        """Load the config, returning defaults if the file does not exist."""
        if not self.path.exists():
            logger.debug("No config at %s, using defaults", self.path)
            return Config()

        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Couldn't read config file {self.path}: {e}") from e

        try:
            return Config.model_validate(json.loads(raw))
        except (json.JSONDecodeError, PydanticValidationError) as e:
            raise ConfigError(f"Invalid config file {self.path}: {e}") from e

    def save(self, config: Config) -> None:
        """Write the config as pretty JSON, readable by the owner only."""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(config.model_dump(mode="json"), indent=2) + "\n",
                encoding="utf-8",
            )
            if os.name == "posix":
                self.path.chmod(0o600)
        except OSError as e:
            raise ConfigError(f"Couldn't write config file {self.path}: {e}") from e

        logger.debug("Saved config to %s", self.path)
