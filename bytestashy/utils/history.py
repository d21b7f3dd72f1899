"""Shell history for the interactive mode."""

from __future__ import annotations

import logging
from pathlib import Path

from platformdirs import user_state_path
from prompt_toolkit.history import FileHistory, History, InMemoryHistory

logger = logging.getLogger(__name__)


def default_history_file() -> Path:
    return user_state_path("bytestashy") / "history"


def open_history(history_file: Path | None = None) -> History:
    """File-backed history, or in-memory if the directory cannot be created."""
    path = history_file or default_history_file()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.warning("History disabled, cannot create %s: %s", path.parent, e)
        return InMemoryHistory()
    return FileHistory(str(path))
