"""CLI entry point for gitscope.

Commands:
  profile    show a user's profile, metrics and repositories
  summarize  narrate one profile (model-backed, or fallback without a key)
  compare    compare two profiles side by side
  notes      list, add, edit and remove local notes
  serve      run the narration HTTP service
  init       interactive setup wizard
"""

from __future__ import annotations

import importlib.metadata

import click
from rich.console import Console

from gitscope_cli.commands.init import init_cmd
from gitscope_cli.commands.notes import notes_group
from gitscope_cli.commands.profile import profile_cmd
from gitscope_cli.commands.serve import serve_cmd
from gitscope_cli.commands.summarize import compare_cmd, summarize_cmd

console = Console()


def _build_storage(config: dict):
    """Instantiate the configured notes storage from .gitscope.yml settings.

    Storage selection:
      store: gist   → GistStorage   (requires gist_id and a GitHub token)
      store: memory → MemoryStorage (notes last for one command only)
      (default)     → FileStorage   (store_path, or .gitscope-notes.json)

    This factory lives in cli.py so neither gitscope_core nor gitscope_store
    know about the CLI config format.
    """
    store_type = config.get("store", "file")

    if store_type == "gist":
        from gitscope_store.gist import GistStorage

        gist_id = config.get("gist_id")
        token = config.get("github_token")
        if gist_id and token:
            return GistStorage(gist_id=gist_id, token=token)
        console.print("[yellow]Gist storage requires gist_id and a GitHub token. Falling back to a local file.[/yellow]")

    if store_type == "memory":
        from gitscope_store.memory import MemoryStorage

        return MemoryStorage()

    from gitscope_store.file import FileStorage

    return FileStorage(config.get("store_path") or ".gitscope-notes.json")


def _package_version() -> str:
    try:
        return importlib.metadata.version("gitscope")
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0"


@click.group()
@click.version_option(version=_package_version(), prog_name="gitscope")
@click.option(
    "--config",
    "config_path",
    default=".gitscope.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="GITSCOPE_CONFIG",
)
@click.pass_context
def main(ctx: click.Context, config_path: str):
    """Explore GitHub profiles, narrate them, and keep notes."""
    from gitscope_cli.auth import resolve_github_token
    from gitscope_core.config import load_config
    from gitscope_store.notes import NotesStore

    ctx.ensure_object(dict)

    config = load_config(config_path)

    # Only the gist notes backend needs a token; the GitHub reads are anonymous.
    if config.get("store") == "gist" and not config.get("github_token"):
        config["github_token"] = resolve_github_token()

    notes = NotesStore(_build_storage(config))
    ctx.obj["config"] = config
    ctx.obj["notes"] = notes
    ctx.call_on_close(notes.close)


main.add_command(profile_cmd)
main.add_command(summarize_cmd)
main.add_command(compare_cmd)
main.add_command(notes_group)
main.add_command(serve_cmd)
main.add_command(init_cmd)
