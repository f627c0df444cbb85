"""profile command: show a user's profile, metrics and repositories."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from gitscope_core.errors import GitScopeError
from gitscope_core.gh.client import fetch_snapshot
from gitscope_core.metrics import compute_metrics
from gitscope_core.models import Snapshot
from gitscope_store.models import NoteTarget, profile_key, repository_key

console = Console()


def load_snapshot(username: str, config: dict) -> Snapshot:
    """Fetch a snapshot, turning any client failure into a CLI error."""
    username = username.strip()
    if not username:
        raise click.UsageError("A GitHub username is required.")
    try:
        with console.status(f"Loading @{username}…"):
            return fetch_snapshot(username, config)
    except GitScopeError as e:
        raise click.ClickException(e.message)


@click.command("profile")
@click.argument("username")
@click.option("--repos", "repo_limit", default=20, show_default=True, help="Maximum number of repositories to list.")
@click.pass_context
def profile_cmd(ctx, username: str, repo_limit: int):
    """Show a GitHub user's profile, metrics and repositories."""
    config = ctx.obj["config"]
    notes = ctx.obj["notes"]
    window = config.get("commit_window_days", 30)

    snapshot = load_snapshot(username, config)
    user = snapshot.user
    metrics = compute_metrics(snapshot, window_days=window)

    title = f"[bold]{user.name}[/bold] (@{user.login})" if user.name else f"[bold]@{user.login}[/bold]"
    console.print(f"\n{title}")
    if user.bio:
        console.print(f"  {user.bio}")
    details = [d for d in (user.company, user.location, user.blog) if d]
    if details:
        console.print(f"  [dim]{' · '.join(details)}[/dim]")
    console.print(
        f"  Followers: {user.followers}  Following: {user.following}  Public repos: {user.public_repos}"
    )
    if user.html_url:
        console.print(f"  [dim]{user.html_url}[/dim]")

    console.print(f"\n  Total stars: {metrics.total_stars}  ·  Recent commit activity ({window}d): {metrics.commit_count}")
    if metrics.top_languages:
        console.print(f"  Top languages: {metrics.top_languages}")

    profile_notes = notes.list_for(NoteTarget.PROFILE, profile_key(user.login))
    if profile_notes:
        console.print("\n[bold]Notes[/bold]")
        for note in profile_notes:
            console.print(f"  [dim]{note.id[:8]}[/dim]  {note.content}")

    if not snapshot.repos:
        console.print("\n[yellow]No repositories found.[/yellow]")
        return

    table = Table(title=f"Repositories: @{user.login}", show_header=True, header_style="bold cyan")
    table.add_column("Name", style="bold", max_width=30)
    table.add_column("Stars", justify="right", width=7)
    table.add_column("Forks", justify="right", width=7)
    table.add_column("Language", width=14)
    table.add_column("Notes", justify="right", width=6)
    table.add_column("Description", max_width=50)

    for repo in snapshot.repos[:repo_limit]:
        note_count = len(notes.list_for(NoteTarget.REPOSITORY, repository_key(repo.full_name)))
        table.add_row(
            repo.name,
            str(repo.stargazers_count),
            str(repo.forks_count),
            repo.language or "",
            str(note_count) if note_count else "",
            (repo.description or "")[:50],
        )

    console.print(table)
