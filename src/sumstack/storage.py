"""High-score persistence.

The core only needs a get/set capability for a single integer. Stores never
raise on I/O problems: a failed read yields 0 and a failed write is skipped.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Protocol

from sumstack.constants import HIGH_SCORE_KEY

logger = logging.getLogger(__name__)


class HighScoreStore(Protocol):
    def load(self) -> int: ...

    def save(self, value: int) -> None: ...


class MemoryHighScoreStore:
    """Keeps the high score in process memory; used by tests and headless runs."""

    def __init__(self, value: int = 0) -> None:
        self.value = int(value)
        self.writes = 0

    def load(self) -> int:
        return self.value

    def save(self, value: int) -> None:
        self.value = int(value)
        self.writes += 1


class JsonHighScoreStore:
    """Stores the high score under a fixed key in a small JSON document."""

    def __init__(self, save_path: Path | None = None, *, key: str = HIGH_SCORE_KEY) -> None:
        self._save_path = Path(save_path) if save_path is not None else self._default_save_path()
        self._key = key

    @staticmethod
    def _default_save_path() -> Path:
        return Path(__file__).resolve().parents[2] / "data" / "high_score.json"

    @property
    def path(self) -> Path:
        return self._save_path

    def load(self) -> int:
        try:
            with self._save_path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except FileNotFoundError:
            return 0
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("could not read high score from %s: %s", self._save_path, exc)
            return 0
        if not isinstance(payload, dict):
            return 0
        try:
            return max(0, int(payload.get(self._key, 0)))
        except (TypeError, ValueError):
            logger.warning("ignoring malformed high score in %s", self._save_path)
            return 0

    def save(self, value: int) -> None:
        payload: Dict[str, int] = {self._key: int(value)}
        try:
            self._save_path.parent.mkdir(parents=True, exist_ok=True)
            with self._save_path.open("w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2)
        except OSError as exc:
            logger.warning("could not write high score to %s: %s", self._save_path, exc)
