"""Directory-backed persistence for exports and clean copies."""

from __future__ import annotations

import os
from pathlib import Path

from loguru import logger


class DirectorySaveTarget:
    """Write byte blobs into a directory without overwriting existing files."""

    def __init__(self, directory: str | Path) -> None:
        self._dir = Path(os.path.expanduser(os.path.expandvars(str(directory))))

    @property
    def directory(self) -> Path:
        """Destination directory."""
        return self._dir

    def save(self, data: bytes, suggested_name: str) -> str:
        """Write `data` under `suggested_name` (or a numbered variant); return the path."""
        self._dir.mkdir(parents=True, exist_ok=True)
        target = self._unique_path(Path(suggested_name).name)
        with target.open("wb") as f:
            f.write(data)
        logger.info("Saved {} bytes to {}", len(data), target)
        return str(target)

    def _unique_path(self, name: str) -> Path:
        candidate = self._dir / name
        stem, suffix = Path(name).stem, Path(name).suffix
        n = 1
        while candidate.exists():
            candidate = self._dir / f"{stem} ({n}){suffix}"
            n += 1
        return candidate
