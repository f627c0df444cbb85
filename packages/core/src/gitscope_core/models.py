"""GitHub snapshot data models.

Records are frozen: once fetched (or decoded from a request body) a profile,
repository or event is never mutated. ``from_dict`` accepts the JSON shapes
the GitHub REST API returns and tolerates missing keys, because a snapshot
posted back to the HTTP service may have been trimmed by the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def _count(value: Any) -> int:
    # GitHub never sends null counts, but posted snapshots sometimes do.
    return value if isinstance(value, int) and not isinstance(value, bool) else 0


def _text(value: Any) -> str | None:
    return None if value is None else str(value)


@dataclass(frozen=True)
class Profile:
    login: str
    name: str | None = None
    bio: str | None = None
    followers: int = 0
    following: int = 0
    public_repos: int = 0
    avatar_url: str = ""
    html_url: str = ""
    company: str | None = None
    blog: str | None = None
    location: str | None = None

    @classmethod
    def from_dict(cls, d: dict) -> Profile:
        return cls(
            login=d.get("login") or "",
            name=d.get("name"),
            bio=d.get("bio"),
            followers=_count(d.get("followers")),
            following=_count(d.get("following")),
            public_repos=_count(d.get("public_repos")),
            avatar_url=d.get("avatar_url") or "",
            html_url=d.get("html_url") or "",
            company=d.get("company"),
            blog=d.get("blog"),
            location=d.get("location"),
        )

    def to_dict(self) -> dict:
        return {
            "login": self.login,
            "name": self.name,
            "bio": self.bio,
            "followers": self.followers,
            "following": self.following,
            "public_repos": self.public_repos,
            "avatar_url": self.avatar_url,
            "html_url": self.html_url,
            "company": self.company,
            "blog": self.blog,
            "location": self.location,
        }


@dataclass(frozen=True)
class Repository:
    id: int
    name: str
    full_name: str
    description: str | None = None
    stargazers_count: int = 0
    language: str | None = None
    forks_count: int = 0
    html_url: str = ""

    @classmethod
    def from_dict(cls, d: dict) -> Repository:
        return cls(
            id=_count(d.get("id")),
            name=d.get("name") or "",
            full_name=d.get("full_name") or "",
            description=d.get("description"),
            stargazers_count=_count(d.get("stargazers_count")),
            language=_text(d.get("language")),
            forks_count=_count(d.get("forks_count")),
            html_url=d.get("html_url") or "",
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "full_name": self.full_name,
            "description": self.description,
            "stargazers_count": self.stargazers_count,
            "language": self.language,
            "forks_count": self.forks_count,
            "html_url": self.html_url,
        }


@dataclass(frozen=True)
class Event:
    """A public GitHub event.

    Only ``PushEvent`` payloads are interpreted (their ``commits`` list);
    every other type is carried through untouched.
    """

    id: str
    type: str
    created_at: str  # ISO-8601 UTC timestamp, e.g. "2024-05-01T12:00:00Z"
    repo_name: str = ""
    payload: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: dict) -> Event:
        repo = d.get("repo")
        payload = d.get("payload")
        return cls(
            id=str(d.get("id") or ""),
            type=d.get("type") or "",
            created_at=d.get("created_at") or "",
            repo_name=repo.get("name", "") if isinstance(repo, dict) else "",
            payload=payload if isinstance(payload, dict) else {},
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "created_at": self.created_at,
            "repo": {"name": self.repo_name},
            "payload": self.payload,
        }


@dataclass(frozen=True)
class Snapshot:
    """Profile, repositories and events for one account at one point in time."""

    username: str
    user: Profile
    repos: list[Repository] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Return the JSON body accepted by the summarize endpoint."""
        return {
            "username": self.username,
            "user": self.user.to_dict(),
            "repos": [r.to_dict() for r in self.repos],
            "events": [e.to_dict() for e in self.events],
        }
