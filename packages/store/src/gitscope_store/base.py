"""Abstract storage port for the notes blob.

The notes store keeps its whole state in one serialized JSON blob. Backends
only move that blob in and out of a medium (a local file, a Gist, memory),
so they are swappable without touching NotesStore.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseStorage(ABC):
    """Single-blob persistence medium."""

    @abstractmethod
    def read(self) -> str | None:
        """Return the stored blob, or None if nothing has been written yet."""

    @abstractmethod
    def write(self, blob: str) -> None:
        """Replace the stored blob."""

    def close(self) -> None:
        """Release any resources held by the storage.

        Optional: the default is a no-op so callers can always call close().
        """
