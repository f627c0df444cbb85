"""FileStorage: the notes blob as a JSON file on local disk.

The default backend. The file path defaults to `.gitscope-notes.json` in
the current working directory; configure with `store_path` in .gitscope.yml.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from gitscope_store.base import BaseStorage

logger = logging.getLogger(__name__)


class FileStorage(BaseStorage):
    def __init__(self, path: str = ".gitscope-notes.json"):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> str | None:
        try:
            return self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def write(self, blob: str) -> None:
        # Write beside the target and rename so a crash never leaves half a blob.
        if self._path.parent != Path(""):
            self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_name(self._path.name + ".tmp")
        tmp.write_text(blob, encoding="utf-8")
        os.replace(tmp, self._path)
        logger.debug("Wrote notes blob to %s (%d bytes)", self._path, len(blob))
