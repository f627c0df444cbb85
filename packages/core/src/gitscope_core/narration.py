"""Narration service: summarize one snapshot or compare two.

Each request ends in exactly one of:
  - ValidationError: the payload failed decoding; nothing else ran
  - fallback narration: no provider credential; text built from the numbers
  - model narration: the provider's completion text
  - UpstreamError / RateLimitedError / NetworkError from the provider call

Payloads are the JSON bodies of the HTTP endpoints, decoded once at the
boundary into Snapshot records.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from gitscope_core.config import provider_api_key
from gitscope_core.errors import ValidationError
from gitscope_core.metrics import SnapshotMetrics, compute_metrics
from gitscope_core.models import Event, Profile, Repository, Snapshot
from gitscope_core.prompts import (
    SYSTEM_COMPARE,
    SYSTEM_SUMMARY,
    CompareSide,
    build_compare_prompt,
    build_summary_prompt,
)
from gitscope_core.providers.base import BaseNarrator

logger = logging.getLogger(__name__)

VIA_FALLBACK = "fallback"


@dataclass(frozen=True)
class NarrationResult:
    summary: str
    via: str  # provider name, or "fallback"

    def to_dict(self) -> dict:
        return {"summary": self.summary, "via": self.via}


# ---------------------------------------------------------------------- #
# Payload decoding                                                         #
# ---------------------------------------------------------------------- #


def _decode_snapshot(payload, label: str = "") -> Snapshot:
    prefix = f"{label}." if label else ""
    if not isinstance(payload, dict):
        raise ValidationError(f"Invalid payload: {label or 'body'} must be an object")

    username = payload.get("username")
    if not isinstance(username, str) or not username.strip():
        raise ValidationError(f"Invalid payload: {prefix}username must be a non-empty string")

    user = payload.get("user")
    if not isinstance(user, dict):
        raise ValidationError(f"Invalid payload: {prefix}user must be an object")

    repos = payload.get("repos")
    if not isinstance(repos, list) or not all(isinstance(r, dict) for r in repos):
        raise ValidationError(f"Invalid payload: {prefix}repos must be a list of objects")

    events = payload.get("events")
    if events is None:
        events = []
    if not isinstance(events, list) or not all(isinstance(e, dict) for e in events):
        raise ValidationError(f"Invalid payload: {prefix}events must be a list of objects")

    return Snapshot(
        username=username,
        user=Profile.from_dict(user),
        repos=[Repository.from_dict(r) for r in repos],
        events=[Event.from_dict(e) for e in events],
    )


def parse_summary_request(payload) -> Snapshot:
    """Decode a ``{username, user, repos, events}`` body into a Snapshot."""
    return _decode_snapshot(payload)


def parse_compare_request(payload) -> tuple[Snapshot, Snapshot]:
    """Decode a ``{a: Snapshot, b: Snapshot}`` body."""
    if not isinstance(payload, dict):
        raise ValidationError("Invalid payload: body must be an object")
    if "a" not in payload or "b" not in payload:
        raise ValidationError("Invalid payload: both a and b snapshots are required")
    return _decode_snapshot(payload["a"], "a"), _decode_snapshot(payload["b"], "b")


# ---------------------------------------------------------------------- #
# Provider selection                                                       #
# ---------------------------------------------------------------------- #


def get_narrator(config: dict) -> BaseNarrator | None:
    """Return the configured provider, or None when its credential is unset."""
    api_key = provider_api_key(config)
    if not api_key:
        return None

    provider = config.get("provider", "openai")
    if provider == "anthropic":
        from gitscope_core.providers.anthropic import AnthropicNarrator

        return AnthropicNarrator(api_key=api_key, model=config.get("anthropic_model"))

    from gitscope_core.providers.openai import OpenAINarrator

    return OpenAINarrator(api_key=api_key, model=config.get("openai_model"), base_url=config.get("openai_base_url"))


# ---------------------------------------------------------------------- #
# Fallback texts                                                           #
# ---------------------------------------------------------------------- #


def fallback_summary(snapshot: Snapshot, metrics: SnapshotMetrics) -> str:
    user = snapshot.user
    focus = (snapshot.repos[0].language if snapshot.repos else None) or "varied languages"
    return (
        f"@{snapshot.username} has {user.public_repos} public repos and {user.followers} followers. "
        f"Total stars across repositories is {metrics.total_stars}. "
        f"Top repositories: {metrics.top_repos or 'N/A'}. "
        f"Recent push activity shows ~{metrics.commit_count} commits. "
        f"Overall, the profile suggests areas of focus around {focus}. "
        "Consider improving README quality, adding topics, and contributing to trending projects."
    )


def fallback_compare(a: CompareSide, b: CompareSide, window_days: int = 30) -> str:
    ap, bp = a.profile, b.profile
    am, bm = a.metrics, b.metrics
    return f"""Summary: @{a.username} vs @{b.username}. A stars={am.total_stars}, repos={ap.public_repos}, commits{window_days}d={am.commit_count}. B stars={bm.total_stars}, repos={bp.public_repos}, commits{window_days}d={bm.commit_count}.

- **Total stars:** A {am.total_stars} vs B {bm.total_stars}
- **Public repos:** A {ap.public_repos} vs B {bp.public_repos}
- **Commit activity ({window_days}d):** A {am.commit_count} vs B {bm.commit_count}

Suggestions:
- A: improve docs, tests, topics; promote top repos.
- B: collaborate more, add CI, contribute to OSS."""  # noqa: E501


# ---------------------------------------------------------------------- #
# Request handlers                                                         #
# ---------------------------------------------------------------------- #


def summarize(payload, config: dict, now: datetime | None = None) -> NarrationResult:
    """Narrate a single-profile snapshot."""
    snapshot = parse_summary_request(payload)
    window = config.get("commit_window_days", 30)
    metrics = compute_metrics(snapshot, window_days=window, now=now)

    narrator = get_narrator(config)
    if narrator is None:
        logger.info("No %s credential configured; using fallback summary.", config.get("provider", "openai"))
        return NarrationResult(fallback_summary(snapshot, metrics), VIA_FALLBACK)

    user_prompt = build_summary_prompt(snapshot.username, snapshot.user, metrics, window)
    return NarrationResult(narrator.narrate(SYSTEM_SUMMARY, user_prompt), narrator.NAME)


def compare(payload, config: dict, now: datetime | None = None) -> NarrationResult:
    """Narrate the contrast between two snapshots."""
    snap_a, snap_b = parse_compare_request(payload)
    window = config.get("commit_window_days", 30)
    a = CompareSide(snap_a.username, snap_a.user, compute_metrics(snap_a, window_days=window, now=now))
    b = CompareSide(snap_b.username, snap_b.user, compute_metrics(snap_b, window_days=window, now=now))

    narrator = get_narrator(config)
    if narrator is None:
        logger.info("No %s credential configured; using fallback comparison.", config.get("provider", "openai"))
        return NarrationResult(fallback_compare(a, b, window), VIA_FALLBACK)

    user_prompt = build_compare_prompt(a, b, window)
    return NarrationResult(narrator.narrate(SYSTEM_COMPARE, user_prompt), narrator.NAME)
