"""summarize and compare commands: narrate one profile or contrast two."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table

from gitscope_cli.commands.profile import load_snapshot
from gitscope_core import narration
from gitscope_core.errors import GitScopeError, RateLimitedError
from gitscope_core.metrics import compute_metrics

console = Console()


def _narrate(handler, payload: dict, config: dict) -> narration.NarrationResult:
    try:
        with console.status("Narrating…"):
            return handler(payload, config)
    except RateLimitedError as e:
        wait = f" Try again in {e.retry_after}s." if e.retry_after is not None else " Please wait a moment and try again."
        raise click.ClickException(f"Rate limit exceeded: {e.message}.{wait}")
    except GitScopeError as e:
        raise click.ClickException(e.message)


def _print_result(result: narration.NarrationResult) -> None:
    console.print()
    console.print(Markdown(result.summary or "_(empty response)_"))
    console.print(f"\n[dim]via {result.via}[/dim]")


@click.command("summarize")
@click.argument("username")
@click.pass_context
def summarize_cmd(ctx, username: str):
    """Summarize a GitHub profile.

    Uses the configured LLM provider when its API key is set, and a
    deterministic summary built from the profile's numbers otherwise.

    \b
    Environment variables:
      OPENAI_API_KEY       Used when provider is openai (the default)
      ANTHROPIC_API_KEY    Used when provider is anthropic
    """
    config = ctx.obj["config"]
    snapshot = load_snapshot(username, config)
    _print_result(_narrate(narration.summarize, snapshot.to_dict(), config))


@click.command("compare")
@click.argument("user_a")
@click.argument("user_b")
@click.option("--no-narration", is_flag=True, help="Only print the metrics table.")
@click.pass_context
def compare_cmd(ctx, user_a: str, user_b: str, no_narration: bool):
    """Compare two GitHub profiles."""
    config = ctx.obj["config"]
    window = config.get("commit_window_days", 30)

    snap_a = load_snapshot(user_a, config)
    snap_b = load_snapshot(user_b, config)
    metrics_a = compute_metrics(snap_a, window_days=window)
    metrics_b = compute_metrics(snap_b, window_days=window)

    table = Table(title="Comparison", show_header=True, header_style="bold cyan")
    table.add_column("Metric", style="bold")
    table.add_column(f"@{snap_a.user.login or snap_a.username}", justify="right")
    table.add_column(f"@{snap_b.user.login or snap_b.username}", justify="right")
    table.add_row("Public repos", str(snap_a.user.public_repos), str(snap_b.user.public_repos))
    table.add_row("Followers", str(snap_a.user.followers), str(snap_b.user.followers))
    table.add_row("Total stars", str(metrics_a.total_stars), str(metrics_b.total_stars))
    table.add_row(f"Commit activity ({window}d)", str(metrics_a.commit_count), str(metrics_b.commit_count))
    table.add_row("Top languages", metrics_a.top_languages or "-", metrics_b.top_languages or "-")
    console.print(table)

    if no_narration:
        return

    payload = {"a": snap_a.to_dict(), "b": snap_b.to_dict()}
    _print_result(_narrate(narration.compare, payload, config))
