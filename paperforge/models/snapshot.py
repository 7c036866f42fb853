"""Commit snapshot, staged file and archive entry models."""

from __future__ import annotations

import tarfile
from collections.abc import Callable, Iterator
from datetime import datetime
from pathlib import Path
from typing import BinaryIO

from pydantic import BaseModel, ConfigDict, Field

# (logical path, readable content stream) in the snapshot's traversal order.
SnapshotFile = tuple[str, BinaryIO]


class CommitAuthor(BaseModel):
    """Author identity and timestamp of a commit."""

    model_config = ConfigDict(frozen=True)

    name: str
    email: str
    when: datetime  # timezone-aware, in the author's own offset

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


class CommitSnapshot(BaseModel):
    """Read-only view of one commit: identity plus a lazy file traversal.

    ``traverse`` is called once per run and must yield files in a stable
    order; the archive preserves that order exactly.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    hexsha: str
    author: CommitAuthor
    message: str
    traverse: Callable[[], Iterator[SnapshotFile]] = Field(exclude=True, repr=False)

    def files(self) -> Iterator[SnapshotFile]:
        return self.traverse()

    @property
    def short_id(self) -> str:
        return self.hexsha[:10]

    @property
    def date_tag(self) -> str:
        """Commit author date as ``MM-DD``, used in output file names."""
        return self.author.when.strftime("%m-%d")

    @property
    def mtime(self) -> int:
        """Author time as whole Unix seconds, the mtime of every archive entry."""
        return int(self.author.when.timestamp())


class StagedFile(BaseModel):
    """A snapshot file copied into the transient workspace."""

    model_config = ConfigDict(frozen=True)

    path: str  # logical path inside the commit tree
    local_path: Path
    size: int  # exact number of bytes written


class ArchiveEntry(BaseModel):
    """Metadata of one archive member. Content is copied separately."""

    model_config = ConfigDict(frozen=True)

    path: str
    size: int
    mtime: int
    uid: int
    gid: int
    mode: int = 0o644

    def to_tarinfo(self) -> tarfile.TarInfo:
        info = tarfile.TarInfo(name=self.path)
        info.size = self.size
        info.mtime = self.mtime
        info.mode = self.mode
        info.uid = self.uid
        info.gid = self.gid
        info.uname = str(self.uid)
        info.gname = str(self.gid)
        return info
