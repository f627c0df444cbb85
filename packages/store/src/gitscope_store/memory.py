"""In-memory storage: nothing survives the process."""

from __future__ import annotations

from gitscope_store.base import BaseStorage


class MemoryStorage(BaseStorage):
    """Holds the blob in an attribute. Used by tests and `store: memory`."""

    def __init__(self, blob: str | None = None):
        self.blob = blob

    def read(self) -> str | None:
        return self.blob

    def write(self, blob: str) -> None:
        self.blob = blob
