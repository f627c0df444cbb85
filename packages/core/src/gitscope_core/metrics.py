"""Aggregate metrics over repository and event lists.

Every function here is pure and total: malformed entries contribute nothing
rather than raising, so a narration request never fails on odd input data.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from gitscope_core.models import Event, Repository, Snapshot

PUSH_EVENT = "PushEvent"


@dataclass(frozen=True)
class SnapshotMetrics:
    total_stars: int
    top_repos: str
    top_languages: str
    commit_count: int


def total_stars(repos: Iterable[Repository]) -> int:
    return sum(r.stargazers_count or 0 for r in repos)


def top_repositories(repos: Sequence[Repository], n: int = 5) -> str:
    """Render the n most-starred repositories as ``"name (X★)"``.

    ``sorted`` is stable even with ``reverse=True``, so equal star counts keep
    their input order.
    """
    ranked = sorted(repos, key=lambda r: r.stargazers_count or 0, reverse=True)
    return ", ".join(f"{r.name} ({r.stargazers_count or 0}★)" for r in ranked[:n])


def top_languages(repos: Iterable[Repository], n: int = 3) -> str:
    """Render the n most common primary languages as ``"lang (count)"``.

    Repositories with no language, or a blank one, are left out of the count.
    """
    counts: Counter[str] = Counter()
    for repo in repos:
        lang = str(repo.language or "").strip()
        if lang:
            counts[lang] += 1
    # Counter keeps insertion order and most_common() is a stable sort,
    # so ties resolve to the language seen first.
    return ", ".join(f"{lang} ({count})" for lang, count in counts.most_common(n))


def _parse_timestamp(value: str) -> datetime | None:
    try:
        ts = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def commit_activity(events: Iterable[Event], window_days: int = 30, now: datetime | None = None) -> int:
    """Count commits pushed within the last ``window_days``.

    Only ``PushEvent`` entries whose timestamp falls in ``[now - window, now]``
    count; each contributes the length of its ``payload.commits`` list.
    """
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(days=window_days)
    commits = 0
    for event in events:
        if event.type != PUSH_EVENT:
            continue
        ts = _parse_timestamp(event.created_at)
        if ts is None or ts < cutoff or ts > now:
            continue
        pushed = (event.payload or {}).get("commits")
        if isinstance(pushed, list):
            commits += len(pushed)
    return commits


def compute_metrics(
    snapshot: Snapshot,
    window_days: int = 30,
    now: datetime | None = None,
    top_repo_count: int = 5,
    top_language_count: int = 3,
) -> SnapshotMetrics:
    return SnapshotMetrics(
        total_stars=total_stars(snapshot.repos),
        top_repos=top_repositories(snapshot.repos, top_repo_count),
        top_languages=top_languages(snapshot.repos, top_language_count),
        commit_count=commit_activity(snapshot.events, window_days, now),
    )
