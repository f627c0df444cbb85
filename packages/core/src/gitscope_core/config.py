import os
from pathlib import Path
from typing import Optional

import yaml

from gitscope_core.errors import ConfigError

DEFAULT_CONFIG: dict = {
    "provider": "openai",
    "openai_model": "gpt-4o-mini",
    "anthropic_model": "claude-3-5-haiku-latest",
    "openai_base_url": None,  # None = the SDK default endpoint
    "github_api_base": "https://api.github.com",
    "repos_per_page": 100,
    "events_per_page": 100,
    "commit_window_days": 30,
    "request_timeout": 30,
    "store": "file",  # file | memory | gist
    "store_path": ".gitscope-notes.json",
    "gist_id": None,
}

# Environment variable holding the credential for each narration provider.
PROVIDER_KEY_ENV = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}


def load_config(config_path: str = ".gitscope.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .gitscope.yml in the current directory
      3. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    # Resolve credentials from environment variables
    config["github_token"] = os.environ.get("GITHUB_TOKEN")
    config["openai_api_key"] = os.environ.get("OPENAI_API_KEY")
    config["anthropic_api_key"] = os.environ.get("ANTHROPIC_API_KEY")

    return config


def provider_api_key(config: dict) -> str | None:
    """Return the credential for the configured provider, or None when unset."""
    provider = config.get("provider", "openai")
    if provider not in PROVIDER_KEY_ENV:
        raise ConfigError(f"Unknown narration provider: {provider!r}. Choose 'openai' or 'anthropic'.")
    return config.get(f"{provider}_api_key") or None
