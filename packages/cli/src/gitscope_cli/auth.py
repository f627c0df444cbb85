"""GitHub token lookup for the Gist notes backend.

Profile, repository and event reads go to the GitHub API anonymously, so
gitscope asks for a token only when `store: gist` is configured: editing a
private Gist needs an authenticated session.

Lookup order:
  1. GITHUB_TOKEN environment variable
  2. `gh auth token`, i.e. the session `gitscope init` uses to create the Gist
"""

from __future__ import annotations

import logging
import os
import subprocess

logger = logging.getLogger(__name__)


def resolve_github_token() -> str | None:
    """Return a token able to edit the notes Gist, or None. Never raises.

    None makes the CLI fall back to local file notes with a warning.
    """
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        return token

    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        logger.debug("gh CLI unavailable for Gist notes token: %s", type(e).__name__)
        return None

    gh_token = result.stdout.strip() if result.returncode == 0 else ""
    if not gh_token:
        logger.debug("gh CLI has no active session; Gist notes need GITHUB_TOKEN.")
        return None
    logger.debug("Using gh CLI session token for Gist notes.")
    return gh_token
