"""NotesStore: keyed notes over a single-blob storage port.

The whole `{noteId: Note}` mapping is the unit of persistence. The blob is
read once on construction; every add/update/remove rewrites the full blob.
There is no merge with concurrent writers, so the last writer wins.

A missing, empty or corrupt blob is an empty store. Deserialization errors
are logged and absorbed, never raised.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from typing import Callable

from gitscope_store.base import BaseStorage
from gitscope_store.models import Note, NoteTarget

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


def decode_notes(blob: str | None) -> dict[str, Note]:
    """Deserialize a notes blob, dropping anything that is not a valid note."""
    if not blob:
        return {}
    try:
        raw = json.loads(blob)
    except (TypeError, ValueError) as e:
        logger.warning("Ignoring corrupt notes blob: %s", e)
        return {}
    if not isinstance(raw, dict):
        logger.warning("Ignoring notes blob of type %s; expected an object", type(raw).__name__)
        return {}

    notes: dict[str, Note] = {}
    for key, entry in raw.items():
        try:
            note = Note.from_dict(entry)
        except (KeyError, TypeError, ValueError, AttributeError):
            logger.warning("Skipping malformed note entry %r", key)
            continue
        notes[note.id] = note
    return notes


def encode_notes(notes: dict[str, Note]) -> str:
    return json.dumps({note_id: note.to_dict() for note_id, note in notes.items()})


class NotesStore:
    def __init__(
        self,
        storage: BaseStorage,
        clock: Callable[[], int] = _now_ms,
        id_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
    ):
        self._storage = storage
        self._clock = clock
        self._new_id = id_factory
        try:
            blob = storage.read()
        except Exception as e:
            # Any storage medium failure on load is treated as "no notes yet".
            logger.warning("Could not read notes from %s: %s", type(storage).__name__, e)
            blob = None
        self._notes = decode_notes(blob)

    def _persist(self) -> None:
        self._storage.write(encode_notes(self._notes))

    def list(self) -> list[Note]:
        """All notes, most recently updated first."""
        return sorted(self._notes.values(), key=lambda n: n.updated_at, reverse=True)

    def list_for(self, target_type: NoteTarget, target_key: str) -> list[Note]:
        target_type = NoteTarget(target_type)
        return [n for n in self.list() if n.target_type == target_type and n.target_key == target_key]

    def get(self, note_id: str) -> Note | None:
        return self._notes.get(note_id)

    def add(self, target_type: NoteTarget, target_key: str, content: str) -> Note:
        now = self._clock()
        note = Note(
            id=self._new_id(),
            target_type=NoteTarget(target_type),
            target_key=target_key,
            content=content,
            created_at=now,
            updated_at=now,
        )
        self._notes[note.id] = note
        self._persist()
        return note

    def update(self, note_id: str, content: str) -> Note | None:
        """Replace a note's content. Returns None (and writes nothing) if the id is unknown."""
        current = self._notes.get(note_id)
        if current is None:
            return None
        updated = Note(
            id=current.id,
            target_type=current.target_type,
            target_key=current.target_key,
            content=content,
            created_at=current.created_at,
            updated_at=self._clock(),
        )
        self._notes[note_id] = updated
        self._persist()
        return updated

    def remove(self, note_id: str) -> bool:
        """Delete a note. Returns False (and writes nothing) if the id is unknown."""
        if note_id not in self._notes:
            return False
        del self._notes[note_id]
        self._persist()
        return True

    def close(self) -> None:
        self._storage.close()
