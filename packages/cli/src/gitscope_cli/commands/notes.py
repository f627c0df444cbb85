"""notes commands: keep free-text notes on profiles and repositories."""

from __future__ import annotations

from datetime import datetime

import click
from rich.console import Console
from rich.table import Table

from gitscope_store.models import NoteTarget, profile_key, repository_key

console = Console()


def _target(user: str | None, repo: str | None) -> tuple[NoteTarget, str] | None:
    if user and repo:
        raise click.UsageError("Use either --user or --repo, not both.")
    if user:
        return NoteTarget.PROFILE, profile_key(user)
    if repo:
        if "/" not in repo:
            raise click.UsageError("--repo must be in owner/name format.")
        return NoteTarget.REPOSITORY, repository_key(repo)
    return None


def _resolve_id(notes, note_id: str) -> str:
    """Accept a full note id or an unambiguous prefix of one, as printed by `notes list`."""
    if notes.get(note_id) is not None:
        return note_id
    matches = [n.id for n in notes.list() if n.id.startswith(note_id)]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        raise click.ClickException(f"No note with id {note_id!r}.")
    raise click.ClickException(f"Note id {note_id!r} is ambiguous; use more characters.")


def _format_ms(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000).strftime("%Y-%m-%d %H:%M")


@click.group("notes")
def notes_group():
    """Manage notes attached to profiles and repositories."""


@notes_group.command("list")
@click.option("--user", default=None, help="Only notes on this GitHub user.")
@click.option("--repo", default=None, help="Only notes on this repository (owner/name).")
@click.pass_context
def list_cmd(ctx, user: str | None, repo: str | None):
    """Show saved notes, most recently updated first."""
    notes = ctx.obj["notes"]
    target = _target(user, repo)
    records = notes.list_for(*target) if target else notes.list()

    if not records:
        console.print("[yellow]No notes yet.[/yellow]")
        return

    table = Table(title="Notes", show_header=True, header_style="bold cyan")
    table.add_column("ID", width=8)
    table.add_column("Target", max_width=40)
    table.add_column("Note")
    table.add_column("Updated", width=16)
    for note in records:
        table.add_row(note.id[:8], note.target_key, note.content, _format_ms(note.updated_at))
    console.print(table)


@notes_group.command("add")
@click.option("--user", default=None, help="Attach the note to this GitHub user.")
@click.option("--repo", default=None, help="Attach the note to this repository (owner/name).")
@click.argument("content")
@click.pass_context
def add_cmd(ctx, user: str | None, repo: str | None, content: str):
    """Add a note to a user or a repository."""
    target = _target(user, repo)
    if target is None:
        raise click.UsageError("Pass --user LOGIN or --repo OWNER/NAME.")
    content = content.strip()
    if not content:
        raise click.UsageError("Note content cannot be empty.")

    note = ctx.obj["notes"].add(*target, content)
    console.print(f"[green]Saved note {note.id[:8]} on {note.target_key}[/green]")


@notes_group.command("edit")
@click.argument("note_id")
@click.argument("content")
@click.pass_context
def edit_cmd(ctx, note_id: str, content: str):
    """Replace the content of a note."""
    notes = ctx.obj["notes"]
    note = notes.update(_resolve_id(notes, note_id), content)
    console.print(f"[green]Updated note {note.id[:8]}[/green]")


@notes_group.command("rm")
@click.argument("note_id")
@click.pass_context
def rm_cmd(ctx, note_id: str):
    """Delete a note."""
    notes = ctx.obj["notes"]
    resolved = _resolve_id(notes, note_id)
    notes.remove(resolved)
    console.print(f"[green]Deleted note {resolved[:8]}[/green]")
