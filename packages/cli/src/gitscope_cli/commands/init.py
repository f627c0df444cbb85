"""init command: interactive setup wizard.

Writes .gitscope.yml with the narration provider and the notes backend, and
can create the private Gist that backs `store: gist`.
"""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from pathlib import Path

import click
import yaml
from rich.console import Console

from gitscope_core.config import PROVIDER_KEY_ENV
from gitscope_store.gist import GIST_FILENAME

console = Console()
logger = logging.getLogger(__name__)

CONFIG_FILE = ".gitscope.yml"


@click.command("init")
def init_cmd():
    """Set up gitscope in the current directory.

    Creates .gitscope.yml and, for Gist-backed notes, a private GitHub Gist.
    """
    console.print("\n[bold cyan]gitscope init[/bold cyan]: setup wizard\n")

    provider = click.prompt(
        "Narration provider",
        type=click.Choice(sorted(PROVIDER_KEY_ENV)),
        default="openai",
    )

    console.print("\nNotes store:")
    console.print("  [bold]file[/bold]    local JSON file (default)")
    console.print("  [bold]gist[/bold]    private GitHub Gist, shared between your machines")
    console.print("  [bold]memory[/bold]  nothing is saved")
    store_type = click.prompt(
        "Notes store",
        type=click.Choice(["file", "gist", "memory"]),
        default="file",
    )

    config: dict = {"provider": provider, "store": store_type}

    if store_type == "file":
        store_path = click.prompt("Notes file path", default=".gitscope-notes.json")
        config["store_path"] = store_path
        console.print(f"[green]Notes will be saved to {store_path}[/green]")

    elif store_type == "gist":
        gist_id = _create_notes_gist()
        if gist_id:
            console.print(f"[green]Created notes Gist: {gist_id}[/green]")
            config["gist_id"] = gist_id
        else:
            console.print(f"[yellow]Gist creation failed; add gist_id manually to {CONFIG_FILE}[/yellow]")

    _write_config(config)
    console.print(f"[green]Created {CONFIG_FILE}[/green]")

    api_key_env = PROVIDER_KEY_ENV[provider]
    if not os.environ.get(api_key_env):
        console.print(
            f"\n[yellow]Set [bold]{api_key_env}[/bold] for model-written summaries; "
            "without it gitscope uses its built-in summary.[/yellow]"
        )

    console.print("\n[bold green]Setup complete![/bold green]")
    console.print("Try: [bold]gitscope profile octocat[/bold]")


def _create_notes_gist() -> str | None:
    """Create a private Gist holding an empty notes object and return its ID."""
    tmp_dir = tempfile.mkdtemp(prefix="gitscope-")
    # gh names gist files after their path, so the file gets its final name up front.
    named_path = os.path.join(tmp_dir, GIST_FILENAME)
    try:
        with open(named_path, "w") as f:
            f.write("{}")
        result = subprocess.run(
            ["gh", "gist", "create", "--public=false", "--desc", "gitscope notes", named_path],
            capture_output=True,
            text=True,
            timeout=15,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    finally:
        if os.path.exists(named_path):
            os.unlink(named_path)
        os.rmdir(tmp_dir)

    if result.returncode == 0:
        gist_url = result.stdout.strip()
        return gist_url.rstrip("/").split("/")[-1]
    logger.warning("gh gist create failed: %s", result.stderr.strip())
    return None


def _write_config(config: dict) -> None:
    """Write or update .gitscope.yml, preserving any existing keys."""
    path = Path(CONFIG_FILE)
    existing: dict = {}
    if path.exists():
        existing = yaml.safe_load(path.read_text()) or {}
    existing.update(config)
    path.write_text(yaml.dump(existing, default_flow_style=False, sort_keys=False))
