from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="BYTESTASHY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    config_dir: Optional[Path] = None
    timeout: float = 30.0
    keyring_service: str = "bytestashy"
    log_level: str = "WARNING"
