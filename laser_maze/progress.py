"""Persistence of completed level ids.

Stores never surface I/O problems to gameplay: a failed load yields an empty
set and a failed save is logged and dropped.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Iterable, Optional, Set

logger = logging.getLogger(__name__)

PROGRESS_ENV_VAR = "LASER_MAZE_PROGRESS_PATH"


def default_progress_path() -> Path:
    value = os.environ.get(PROGRESS_ENV_VAR)
    if value:
        return Path(value).expanduser()
    return Path.home() / ".laser_maze" / "completed.json"


class MemoryStore:
    """In-memory store, mostly for tests and the text demo."""

    def __init__(self, initial: Iterable[int] = ()):
        self._completed: Set[int] = set(initial)

    def load(self) -> Set[int]:
        return set(self._completed)

    def save(self, completed: Iterable[int]) -> None:
        self._completed = set(completed)

    def add(self, level_id: int) -> Set[int]:
        completed = self.load() | {level_id}
        self.save(completed)
        return completed


class CompletedLevelStore(MemoryStore):
    """JSON file holding a sorted list of completed level ids."""

    def __init__(self, path: Optional[Path] = None):
        super().__init__()
        self.path = Path(path) if path is not None else default_progress_path()

    def load(self) -> Set[int]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return set()
        except UnicodeDecodeError as exc:
            logger.warning("Ignoring corrupt progress file %s: %s", self.path, exc)
            return set()
        except OSError as exc:
            logger.warning("Could not read progress file %s: %s", self.path, exc)
            return set()
        try:
            data = json.loads(raw)
        except ValueError as exc:
            logger.warning("Ignoring corrupt progress file %s: %s", self.path, exc)
            return set()
        if not isinstance(data, list) or not all(
            isinstance(value, int) and not isinstance(value, bool) for value in data
        ):
            logger.warning("Ignoring corrupt progress file %s: expected a list of level ids", self.path)
            return set()
        return set(data)

    def save(self, completed: Iterable[int]) -> None:
        payload = json.dumps(sorted(set(completed)))
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(payload, encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not write progress file %s: %s", self.path, exc)
