"""Note data model.

Decoupled from gitscope_core so the notes layer can be used on its own and
gitscope_core has no knowledge of persistence concerns.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class NoteTarget(str, Enum):
    """What a note is attached to. Values are the persisted spelling."""

    PROFILE = "user"
    REPOSITORY = "repo"


def profile_key(login: str) -> str:
    return f"user:{login}"


def repository_key(full_name: str) -> str:
    return f"repo:{full_name}"


@dataclass
class Note:
    """A free-text note attached to a profile or a repository."""

    id: str
    target_type: NoteTarget
    target_key: str  # "user:<login>" | "repo:<owner>/<name>"
    content: str
    created_at: int  # epoch milliseconds
    updated_at: int  # epoch milliseconds

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "targetType": self.target_type.value,
            "targetKey": self.target_key,
            "content": self.content,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, d: dict) -> Note:
        """Build a Note from its persisted form. Raises on a malformed entry."""
        return cls(
            id=str(d["id"]),
            target_type=NoteTarget(d["targetType"]),
            target_key=str(d["targetKey"]),
            content=str(d.get("content") or ""),
            created_at=int(d["createdAt"]),
            updated_at=int(d["updatedAt"]),
        )
