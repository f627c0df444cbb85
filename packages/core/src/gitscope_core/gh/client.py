"""Read-only GitHub REST client for profile snapshots.

Requests are anonymous, so they are subject to GitHub's unauthenticated rate
limit. A non-success status is raised with the status code and the raw body
text; nothing is retried.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from urllib.parse import quote

import requests

from gitscope_core.errors import NetworkError, NotFoundError, UpstreamError
from gitscope_core.models import Event, Profile, Repository, Snapshot

logger = logging.getLogger(__name__)

GITHUB_API_BASE = "https://api.github.com"
REPOS_PER_PAGE = 100
EVENTS_PER_PAGE = 100
REQUEST_TIMEOUT = 30

_HEADERS = {"Accept": "application/vnd.github+json"}


def _get_json(url: str, params: dict | None = None, timeout: int = REQUEST_TIMEOUT):
    logger.debug("GET %s %s", url, params or "")
    try:
        response = requests.get(url, params=params, headers=_HEADERS, timeout=timeout)
    except requests.RequestException as e:
        raise NetworkError(f"Network error: {e}") from e

    if not response.ok:
        message = f"GitHub API error {response.status_code}: {response.text}"
        if response.status_code == 404:
            raise NotFoundError(message, body=response.text)
        raise UpstreamError(response.status_code, message, body=response.text)
    return response.json()


def _user_url(username: str, base_url: str) -> str:
    return f"{base_url.rstrip('/')}/users/{quote(username, safe='')}"


def fetch_profile(username: str, base_url: str = GITHUB_API_BASE, timeout: int = REQUEST_TIMEOUT) -> Profile:
    return Profile.from_dict(_get_json(_user_url(username, base_url), timeout=timeout))


def fetch_repositories(
    username: str,
    base_url: str = GITHUB_API_BASE,
    per_page: int = REPOS_PER_PAGE,
    timeout: int = REQUEST_TIMEOUT,
) -> list[Repository]:
    """Return the user's repositories, most recently updated first."""
    data = _get_json(
        f"{_user_url(username, base_url)}/repos",
        params={"per_page": per_page, "sort": "updated"},
        timeout=timeout,
    )
    return [Repository.from_dict(r) for r in data]


def fetch_recent_events(
    username: str,
    base_url: str = GITHUB_API_BASE,
    per_page: int = EVENTS_PER_PAGE,
    timeout: int = REQUEST_TIMEOUT,
) -> list[Event]:
    """Return the user's public events, most recent first."""
    data = _get_json(
        f"{_user_url(username, base_url)}/events/public",
        params={"per_page": per_page},
        timeout=timeout,
    )
    return [Event.from_dict(e) for e in data]


def fetch_snapshot(username: str, config: dict | None = None) -> Snapshot:
    """Fetch profile, repositories and events concurrently.

    The three reads are independent; the snapshot exists only if all three
    succeed. The first failure (in profile, repos, events order) is raised.
    """
    config = config or {}
    base_url = config.get("github_api_base") or GITHUB_API_BASE
    timeout = config.get("request_timeout") or REQUEST_TIMEOUT

    with ThreadPoolExecutor(max_workers=3) as pool:
        profile_future = pool.submit(fetch_profile, username, base_url, timeout)
        repos_future = pool.submit(
            fetch_repositories, username, base_url, config.get("repos_per_page") or REPOS_PER_PAGE, timeout
        )
        events_future = pool.submit(
            fetch_recent_events, username, base_url, config.get("events_per_page") or EVENTS_PER_PAGE, timeout
        )
        profile = profile_future.result()
        repos = repos_future.result()
        events = events_future.result()

    return Snapshot(username=profile.login or username, user=profile, repos=repos, events=events)
