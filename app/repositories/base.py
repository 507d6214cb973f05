"""Base repository class - one JSON document per file under a root directory."""

import json
import os
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from loguru import logger


class BaseRepository:
    """Base repository with common file handling.

    The synchronous helpers here are meant to run on a worker thread
    (``asyncio.to_thread``); the async public API lives in subclasses.
    """

    def __init__(self, root: Path | str, clock: Callable[[], float] = time.time):
        self._root = Path(root)
        self._clock = clock
        logger.debug("{} initialized at {}", self.__class__.__name__, self._root)

    @property
    def root(self) -> Path:
        return self._root

    def now_ms(self) -> int:
        return int(self._clock() * 1000)

    def ensure_dir(self) -> None:
        """Create the root directory if missing."""
        self._root.mkdir(parents=True, exist_ok=True)

    def json_files(self) -> list[Path]:
        """All ``*.json`` documents (temp and lock siblings excluded)."""
        if not self._root.is_dir():
            return []
        return sorted(p for p in self._root.glob("*.json") if p.is_file())

    @staticmethod
    def read_json(path: Path) -> Any:
        return json.loads(path.read_text(encoding="utf-8"))

    @staticmethod
    def write_atomic(path: Path, content: str, lock_path: Path | None = None) -> None:
        """Write to a temp sibling then rename over ``path``.

        While ``lock_path`` is given, the marker exists for the whole write
        window. On failure both temp and marker are removed and the error
        propagates.
        """
        temp_path = path.with_name(path.name + ".tmp")
        try:
            if lock_path is not None:
                lock_path.touch()
            temp_path.write_text(content, encoding="utf-8")
            os.replace(temp_path, path)
            if lock_path is not None:
                lock_path.unlink(missing_ok=True)
        except OSError:
            temp_path.unlink(missing_ok=True)
            if lock_path is not None:
                lock_path.unlink(missing_ok=True)
            raise

    @staticmethod
    def remove(path: Path) -> bool:
        """Unlink a file; False if it was already gone."""
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
