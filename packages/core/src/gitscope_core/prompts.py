"""Prompt templates for profile summaries and comparisons.

Templates always fill every slot. Missing optional fields render as ``N/A``
and the instructions separately tell the model not to mention missing data.
"""

from __future__ import annotations

from dataclasses import dataclass

from gitscope_core.metrics import SnapshotMetrics
from gitscope_core.models import Profile

NOT_AVAILABLE = "N/A"

SYSTEM_SUMMARY = (
    "You are a senior developer relations writer. Produce concise, accurate, high-signal profile "
    "summaries using only the provided data. Do NOT infer, guess, or mention private activity. "
    "Keep the tone neutral, developer-focused, and avoid fluff. Format the answer in Markdown with "
    "the exact sections and limits requested. If some data is missing, omit that detail without speculating."
)

SYSTEM_COMPARE = (
    "You are a senior developer relations writer. Produce concise, accurate, high-signal comparisons "
    "using only the provided data. Do NOT infer or guess. Keep tone neutral and developer-focused. "
    "Format strictly as requested."
)


@dataclass(frozen=True)
class CompareSide:
    """One side of a comparison: who it is and what their numbers are."""

    username: str
    profile: Profile
    metrics: SnapshotMetrics


def _or_na(value: str | None) -> str:
    return value or NOT_AVAILABLE


def build_summary_prompt(username: str, profile: Profile, metrics: SnapshotMetrics, window_days: int = 30) -> str:
    return f"""Analyze GitHub user @{username} using ONLY this snapshot:

Profile
- Name: {_or_na(profile.name)}
- Bio: {_or_na(profile.bio)}
- Followers: {profile.followers}
- Public repos: {profile.public_repos}

Repos summary
- Total stars: {metrics.total_stars}
- Top repos (by stars, up to 5): {_or_na(metrics.top_repos)}
- Primary languages (top 3 by repo count): {_or_na(metrics.top_languages)}

Recent activity
- Push events (last {window_days}d): {metrics.commit_count}

Write:
1) Summary (max 90 words) focusing on concrete strengths supported by the data.
2) Strengths (3-5 bullets). Each bullet starts with a **bold noun phrase**.
3) Suggestions (3-5 bullets) that are specific and actionable (docs, tests, topics, CI, issues, collaboration, visibility).

Rules:
- Do NOT mention missing/unknown data.
- Do NOT suggest things already evidenced as strong.
- No marketing language. Be direct.
- Markdown only. No preamble. No closing sentence."""


def _compare_block(label: str, side: CompareSide, window_days: int) -> str:
    p, m = side.profile, side.metrics
    return (
        f"User {label}: @{side.username}\n"
        f"Profile: name={_or_na(p.name)}, followers={p.followers}, public_repos={p.public_repos}\n"
        f"Repos: total_stars={m.total_stars}, top_repos={_or_na(m.top_repos)}, "
        f"top_languages={_or_na(m.top_languages)}\n"
        f"Activity: push_commits_{window_days}d={m.commit_count}"
    )


def build_compare_prompt(a: CompareSide, b: CompareSide, window_days: int = 30) -> str:
    return f"""Compare two GitHub users using ONLY this snapshot.

{_compare_block("A", a, window_days)}

{_compare_block("B", b, window_days)}

Write:
1) Summary (max 80 words) with data-backed contrast.
2) A vs B (3-6 bullets) with bold metric labels (e.g., **Total stars:** A X vs B Y).
3) Suggestions (3-5 bullets) tailored for each, prefixed with A: or B:.

Rules:
- No speculation; only use given data.
- No marketing language; be direct.
- Markdown only."""
