"""Commit snapshots read from a git repository via GitPython.

The snapshot's file traversal walks the commit tree depth-first in tree
order, the same order ``git ls-tree -r`` lists, and yields blobs only.
Submodule entries have no content in this repository and are skipped.
"""

from __future__ import annotations

import configparser
import io
import logging
from collections.abc import Iterator
from pathlib import Path

import git

from paperforge.errors import PaperforgeError
from paperforge.models.snapshot import CommitAuthor, CommitSnapshot, SnapshotFile

logger = logging.getLogger(__name__)


class SnapshotError(PaperforgeError):
    """Raised when the repository, its HEAD commit or the user identity is unavailable."""


def open_repository(path: Path | str = ".") -> git.Repo:
    try:
        return git.Repo(path)
    except (git.InvalidGitRepositoryError, git.NoSuchPathError) as exc:
        raise SnapshotError(f"not a git repository: {path}") from exc


def _tree_files(commit: git.Commit) -> Iterator[SnapshotFile]:
    for item in commit.tree.traverse(branch_first=False):
        if item.type != "blob":
            continue
        yield item.path, io.BytesIO(item.data_stream.read())


def head_snapshot(repo: git.Repo) -> CommitSnapshot:
    """Snapshot of the commit HEAD points to."""
    try:
        commit = repo.head.commit
    except ValueError as exc:
        raise SnapshotError(f"cannot resolve HEAD: {exc}") from exc

    logger.debug("snapshot of %s", commit.hexsha)
    return CommitSnapshot(
        hexsha=commit.hexsha,
        author=CommitAuthor(
            name=commit.author.name or "",
            email=commit.author.email or "",
            when=commit.authored_datetime,
        ),
        message=str(commit.message),
        traverse=lambda: _tree_files(commit),
    )


# ~/.gitconfig first, then $XDG_CONFIG_HOME/git/config.
_IDENTITY_LEVELS = ("global", "user")


def user_identity(repo: git.Repo) -> str:
    """``Name <email>`` from the per-user git configuration.

    Each of ``user.name`` and ``user.email`` is taken from the first
    configuration file that sets it.
    """
    identity: dict[str, str] = {}
    for level in _IDENTITY_LEVELS:
        reader = repo.config_reader(level)
        for option in ("name", "email"):
            if option in identity:
                continue
            try:
                identity[option] = str(reader.get_value("user", option))
            except configparser.Error:
                continue
    missing = [f"user.{option}" for option in ("name", "email") if not identity.get(option)]
    if missing:
        raise SnapshotError(f"git user identity is not configured: {', '.join(missing)} unset")
    return f"{identity['name']} <{identity['email']}>"
