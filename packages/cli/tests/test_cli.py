"""Tests for the CLI entry point."""

import subprocess
from unittest.mock import MagicMock, patch

import yaml
from click.testing import CliRunner

from gitscope_cli.cli import _build_storage, main
from gitscope_core.errors import NotFoundError, RateLimitedError
from gitscope_core.models import Event, Profile, Repository, Snapshot
from gitscope_core.narration import NarrationResult
from gitscope_store.file import FileStorage
from gitscope_store.gist import GistStorage
from gitscope_store.memory import MemoryStorage
from gitscope_store.models import NoteTarget
from gitscope_store.notes import NotesStore


def _make_config(provider="openai", openai_key=None, store="memory"):
    return {
        "provider": provider,
        "openai_api_key": openai_key,
        "anthropic_api_key": None,
        "github_token": None,
        "commit_window_days": 30,
        "store": store,
        "store_path": ".gitscope-notes.json",
        "gist_id": None,
    }


def _make_snapshot(login="octocat", stars=(10, 2)):
    return Snapshot(
        username=login,
        user=Profile(login=login, name="The Octocat", bio="Mascot", followers=7, following=1, public_repos=2),
        repos=[
            Repository(id=i, name=f"repo{i}", full_name=f"{login}/repo{i}", stargazers_count=s, language="Go")
            for i, s in enumerate(stars)
        ],
        events=[Event(id="1", type="WatchEvent", created_at="2024-01-01T00:00:00Z")],
    )


def _patch_common(mocker, config=None, storage=None):
    """Patch load_config and _build_storage for most tests."""
    cfg = config or _make_config()
    storage = storage if storage is not None else MemoryStorage()
    mocker.patch("gitscope_core.config.load_config", return_value=cfg)
    mocker.patch("gitscope_cli.cli._build_storage", return_value=storage)
    return cfg, storage


# ---------------------------------------------------------------------------
# profile command
# ---------------------------------------------------------------------------


class TestProfileCommand:
    def test_shows_profile_metrics_and_repos(self, mocker):
        _patch_common(mocker)
        mocker.patch("gitscope_cli.commands.profile.fetch_snapshot", return_value=_make_snapshot())

        result = CliRunner().invoke(main, ["profile", "octocat"])

        assert result.exit_code == 0
        assert "@octocat" in result.output
        assert "Total stars: 12" in result.output
        assert "repo0" in result.output
        assert "Go (2)" in result.output

    def test_shows_profile_notes(self, mocker):
        storage = MemoryStorage()
        NotesStore(storage).add(NoteTarget.PROFILE, "user:octocat", "Met at conf")
        _patch_common(mocker, storage=storage)
        mocker.patch("gitscope_cli.commands.profile.fetch_snapshot", return_value=_make_snapshot())

        result = CliRunner().invoke(main, ["profile", "octocat"])

        assert "Met at conf" in result.output

    def test_no_repositories_message(self, mocker):
        _patch_common(mocker)
        mocker.patch("gitscope_cli.commands.profile.fetch_snapshot", return_value=_make_snapshot(stars=()))

        result = CliRunner().invoke(main, ["profile", "octocat"])

        assert result.exit_code == 0
        assert "No repositories found" in result.output

    def test_fetch_failure_exits_nonzero(self, mocker):
        _patch_common(mocker)
        mocker.patch(
            "gitscope_cli.commands.profile.fetch_snapshot",
            side_effect=NotFoundError('GitHub API error 404: {"message":"Not Found"}'),
        )

        result = CliRunner().invoke(main, ["profile", "ghost"])

        assert result.exit_code != 0
        assert "GitHub API error 404" in result.output

    def test_blank_username_rejected(self, mocker):
        _patch_common(mocker)
        fetch = mocker.patch("gitscope_cli.commands.profile.fetch_snapshot")

        result = CliRunner().invoke(main, ["profile", "  "])

        assert result.exit_code != 0
        fetch.assert_not_called()


# ---------------------------------------------------------------------------
# summarize / compare commands
# ---------------------------------------------------------------------------


class TestSummarizeCommand:
    def test_fallback_without_key(self, mocker):
        _patch_common(mocker)
        mocker.patch("gitscope_cli.commands.profile.fetch_snapshot", return_value=_make_snapshot())

        result = CliRunner().invoke(main, ["summarize", "octocat"])

        assert result.exit_code == 0
        assert "@octocat has" in result.output
        assert "via fallback" in result.output

    def test_model_narration(self, mocker):
        _patch_common(mocker, config=_make_config(openai_key="sk-test"))
        mocker.patch("gitscope_cli.commands.profile.fetch_snapshot", return_value=_make_snapshot())
        handler = mocker.patch(
            "gitscope_core.narration.summarize", return_value=NarrationResult("Prolific Go author.", "openai")
        )

        result = CliRunner().invoke(main, ["summarize", "octocat"])

        assert result.exit_code == 0
        assert "Prolific Go author." in result.output
        assert "via openai" in result.output
        payload = handler.call_args.args[0]
        assert payload["username"] == "octocat"
        assert len(payload["repos"]) == 2

    def test_rate_limit_shows_retry_hint(self, mocker):
        _patch_common(mocker, config=_make_config(openai_key="sk-test"))
        mocker.patch("gitscope_cli.commands.profile.fetch_snapshot", return_value=_make_snapshot())
        mocker.patch("gitscope_core.narration.summarize", side_effect=RateLimitedError("Too many requests", 30))

        result = CliRunner().invoke(main, ["summarize", "octocat"])

        assert result.exit_code != 0
        assert "Rate limit exceeded" in result.output
        assert "30s" in result.output

    def test_unknown_provider_is_reported_without_traceback(self, mocker):
        _patch_common(mocker, config=_make_config(provider="gemini"))
        mocker.patch("gitscope_cli.commands.profile.fetch_snapshot", return_value=_make_snapshot())

        result = CliRunner().invoke(main, ["summarize", "octocat"])

        assert result.exit_code == 1
        assert "Unknown narration provider" in result.output
        assert not isinstance(result.exception, ValueError)


class TestCompareCommand:
    def test_prints_table_and_fallback(self, mocker):
        _patch_common(mocker)
        mocker.patch(
            "gitscope_cli.commands.profile.fetch_snapshot",
            side_effect=[_make_snapshot("alice", (5,)), _make_snapshot("bob", (1, 1))],
        )

        result = CliRunner().invoke(main, ["compare", "alice", "bob"])

        assert result.exit_code == 0
        assert "@alice" in result.output
        assert "@bob" in result.output
        assert "Total stars" in result.output
        assert "via fallback" in result.output

    def test_no_narration_flag(self, mocker):
        _patch_common(mocker)
        mocker.patch(
            "gitscope_cli.commands.profile.fetch_snapshot",
            side_effect=[_make_snapshot("alice"), _make_snapshot("bob")],
        )
        handler = mocker.patch("gitscope_core.narration.compare")

        result = CliRunner().invoke(main, ["compare", "alice", "bob", "--no-narration"])

        assert result.exit_code == 0
        handler.assert_not_called()


# ---------------------------------------------------------------------------
# notes commands
# ---------------------------------------------------------------------------


class TestNotesCommands:
    def test_add_then_list(self, mocker):
        _, storage = _patch_common(mocker)

        add = CliRunner().invoke(main, ["notes", "add", "--repo", "octocat/hello", "Needs CI"])
        listing = CliRunner().invoke(main, ["notes", "list", "--repo", "octocat/hello"])

        assert add.exit_code == 0
        assert "Saved note" in add.output
        assert "Needs CI" in listing.output
        assert storage.blob is not None

    def test_add_requires_target(self, mocker):
        _patch_common(mocker)
        result = CliRunner().invoke(main, ["notes", "add", "orphan"])
        assert result.exit_code != 0

    def test_add_rejects_both_targets(self, mocker):
        _patch_common(mocker)
        result = CliRunner().invoke(main, ["notes", "add", "--user", "a", "--repo", "a/b", "x"])
        assert result.exit_code != 0

    def test_add_rejects_blank_content(self, mocker):
        _patch_common(mocker)
        result = CliRunner().invoke(main, ["notes", "add", "--user", "octocat", "   "])
        assert result.exit_code != 0

    def test_edit_by_id_prefix(self, mocker):
        storage = MemoryStorage()
        note = NotesStore(storage).add(NoteTarget.PROFILE, "user:octocat", "old")
        _patch_common(mocker, storage=storage)

        result = CliRunner().invoke(main, ["notes", "edit", note.id[:8], "new"])

        assert result.exit_code == 0
        reloaded = NotesStore(storage).get(note.id)
        assert reloaded.content == "new"
        assert reloaded.created_at == note.created_at

    def test_rm(self, mocker):
        storage = MemoryStorage()
        note = NotesStore(storage).add(NoteTarget.PROFILE, "user:octocat", "bye")
        _patch_common(mocker, storage=storage)

        result = CliRunner().invoke(main, ["notes", "rm", note.id])

        assert result.exit_code == 0
        assert NotesStore(storage).list() == []

    def test_rm_unknown_id(self, mocker):
        _patch_common(mocker)
        result = CliRunner().invoke(main, ["notes", "rm", "deadbeef"])
        assert result.exit_code != 0
        assert "No note" in result.output

    def test_empty_list(self, mocker):
        _patch_common(mocker)
        result = CliRunner().invoke(main, ["notes", "list"])
        assert result.exit_code == 0
        assert "No notes yet" in result.output


# ---------------------------------------------------------------------------
# serve command
# ---------------------------------------------------------------------------


class TestServeCommand:
    def test_runs_uvicorn(self, mocker):
        _patch_common(mocker)
        run = mocker.patch("uvicorn.run")

        result = CliRunner().invoke(main, ["serve", "--port", "9000"])

        assert result.exit_code == 0
        assert run.call_args.kwargs["port"] == 9000
        assert "fallback" in result.output

    def test_unknown_provider_exits_before_serving(self, mocker):
        _patch_common(mocker, config=_make_config(provider="gemini"))
        run = mocker.patch("uvicorn.run")

        result = CliRunner().invoke(main, ["serve"])

        assert result.exit_code == 1
        assert "Unknown narration provider" in result.output
        run.assert_not_called()


# ---------------------------------------------------------------------------
# auth.py
# ---------------------------------------------------------------------------


class TestResolveGithubToken:
    def test_returns_env_var_when_set(self, monkeypatch):
        from gitscope_cli.auth import resolve_github_token

        monkeypatch.setenv("GITHUB_TOKEN", "env-token")
        assert resolve_github_token() == "env-token"

    def test_falls_back_to_gh_cli(self, monkeypatch):
        from gitscope_cli.auth import resolve_github_token

        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stdout="gh-token\n")
            result = resolve_github_token()
        assert result == "gh-token"

    def test_returns_none_without_gh_session(self, monkeypatch):
        from gitscope_cli.auth import resolve_github_token

        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=1, stdout="", stderr="not logged in")
            result = resolve_github_token()
        assert result is None

    def test_returns_none_when_gh_not_installed(self, monkeypatch):
        from gitscope_cli.auth import resolve_github_token

        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        with patch("subprocess.run", side_effect=FileNotFoundError):
            result = resolve_github_token()
        assert result is None

    def test_returns_none_when_gh_times_out(self, monkeypatch):
        from gitscope_cli.auth import resolve_github_token

        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        with patch("subprocess.run", side_effect=subprocess.TimeoutExpired(cmd="gh", timeout=5)):
            result = resolve_github_token()
        assert result is None


# ---------------------------------------------------------------------------
# _build_storage
# ---------------------------------------------------------------------------


class TestBuildStorage:
    def test_returns_file_by_default(self):
        storage = _build_storage({})
        assert isinstance(storage, FileStorage)
        assert str(storage.path) == ".gitscope-notes.json"

    def test_file_uses_store_path(self, tmp_path):
        storage = _build_storage({"store": "file", "store_path": str(tmp_path / "n.json")})
        assert storage.path == tmp_path / "n.json"

    def test_returns_memory_storage(self):
        assert isinstance(_build_storage({"store": "memory"}), MemoryStorage)

    def test_returns_gist_storage_when_configured(self):
        with patch("github.Github"):  # Github is a local import inside GistStorage.__init__
            storage = _build_storage({"store": "gist", "gist_id": "abc123", "github_token": "tok"})
        assert isinstance(storage, GistStorage)

    def test_gist_falls_back_to_file_when_token_missing(self):
        storage = _build_storage({"store": "gist", "gist_id": "abc123"})
        assert isinstance(storage, FileStorage)


# ---------------------------------------------------------------------------
# init command
# ---------------------------------------------------------------------------


class TestInitCommand:
    def test_writes_config_with_provider_and_file_store(self, mocker, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        _patch_common(mocker)

        result = CliRunner().invoke(main, ["init"], input="anthropic\nfile\nnotes.json\n")

        assert result.exit_code == 0
        config = yaml.safe_load((tmp_path / ".gitscope.yml").read_text())
        assert config["provider"] == "anthropic"
        assert config["store"] == "file"
        assert config["store_path"] == "notes.json"

    def test_gist_store_records_created_gist(self, mocker, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        _patch_common(mocker)
        mocker.patch("gitscope_cli.commands.init._create_notes_gist", return_value="f00d")

        CliRunner().invoke(main, ["init"], input="openai\ngist\n")

        config = yaml.safe_load((tmp_path / ".gitscope.yml").read_text())
        assert config["store"] == "gist"
        assert config["gist_id"] == "f00d"

    def test_preserves_existing_keys(self, mocker, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".gitscope.yml").write_text("commit_window_days: 14\n")
        _patch_common(mocker)

        CliRunner().invoke(main, ["init"], input="openai\nmemory\n")

        config = yaml.safe_load((tmp_path / ".gitscope.yml").read_text())
        assert config["commit_window_days"] == 14
        assert config["store"] == "memory"
