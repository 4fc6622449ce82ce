"""JSON file persistence for the history state.

The whole HistoryState is written as one JSON document after every check
cycle. Writes go to a temporary sibling file that replaces the target, so a
crash mid-write leaves the previous document in place.
"""
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .models import HistoryState

logger = logging.getLogger(__name__)


class HistoryLoadError(Exception):
    """The history file exists but could not be read or parsed."""


class JsonHistoryFile:
    """Load/save port backed by a single JSON file."""

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)

    def load(self) -> Optional[HistoryState]:
        """Read the stored state.

        Returns:
            The stored state, or None if the file does not exist.

        Raises:
            HistoryLoadError: If the file is unreadable or malformed.
        """
        if not self.path.exists():
            return None
        try:
            raw = self.path.read_text(encoding="utf-8")
            return HistoryState.model_validate_json(raw)
        except (OSError, ValidationError, ValueError) as e:
            raise HistoryLoadError(f"Could not load {self.path}: {e}") from e

    def save(self, state: HistoryState) -> None:
        """Overwrite the file with the given state. Raises OSError on failure."""
        if self.path.parent and not self.path.parent.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.write_text(state.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
        os.replace(tmp_path, self.path)
        logger.debug(f"Saved {len(state.checks)} checks to {self.path}")
