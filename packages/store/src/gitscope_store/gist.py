"""GistStorage: notes that follow you between machines via a private GitHub Gist.

Data format: a single JSON file named `gitscope_notes.json` inside the Gist,
holding the same `{noteId: Note}` object FileStorage writes to disk.
`gitscope init` can create the Gist and writes its ID to .gitscope.yml.
"""

from __future__ import annotations

import logging

from gitscope_store.base import BaseStorage

logger = logging.getLogger(__name__)

GIST_FILENAME = "gitscope_notes.json"


class GistStorage(BaseStorage):
    """Reads and replaces the notes file of one Gist.

    Failures never propagate. A read failure looks like an empty store and a
    write failure is logged and reported, so editing a note offline degrades
    to a warning instead of a crash.

    After a failed read the remote notes are unknown, so writes are skipped
    rather than replacing the Gist with whatever this session added.
    """

    def __init__(self, gist_id: str, token: str):
        try:
            from github import Auth, Github
        except ImportError:
            raise ImportError("PyGithub is required for GistStorage. Install it with: pip install PyGithub")
        self._gist_id = gist_id
        self._gh = Github(auth=Auth.Token(token))
        self._read_failed = False

    def _get_gist(self):
        return self._gh.get_gist(self._gist_id)

    def read(self) -> str | None:
        try:
            gist = self._get_gist()
        except Exception as e:
            logger.warning("GistStorage.read() failed (%s): %s", type(e).__name__, e)
            print(
                f"Warning: could not load notes from Gist {self._gist_id} ({type(e).__name__}: {e}). "
                "Note changes will not be saved this session."
            )
            self._read_failed = True
            return None
        self._read_failed = False
        file_obj = gist.files.get(GIST_FILENAME)
        if file_obj is None:
            return None
        return file_obj.content

    def write(self, blob: str) -> None:
        if self._read_failed:
            logger.warning("Skipping write to Gist %s: notes were never loaded.", self._gist_id)
            print(f"Warning: notes not saved; Gist {self._gist_id} could not be read earlier.")
            return

        # PyGithub's InputFileContent is the documented way to replace one file of a gist.
        from github import InputFileContent

        try:
            gist = self._get_gist()
            gist.edit(files={GIST_FILENAME: InputFileContent(blob)})
        except Exception as e:
            logger.warning("GistStorage.write() failed (%s): %s", type(e).__name__, e)
            print(f"Warning: could not save notes to Gist {self._gist_id} ({type(e).__name__}: {e})")
