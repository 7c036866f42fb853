"""Deterministic tar archive of staged files.

Entries are written in the order they are added, which is the snapshot's
traversal order; nothing is re-sorted. Every entry carries the same fixed
metadata (mode 0644, the process uid/gid, the commit author time as mtime),
so two builds of the same commit with the same filter produce byte-identical
archives.
"""

from __future__ import annotations

import io
import logging
import os
import tarfile
from pathlib import Path

from paperforge.errors import PaperforgeError
from paperforge.models.snapshot import ArchiveEntry, StagedFile

logger = logging.getLogger(__name__)


class ArchiveIntegrityError(PaperforgeError):
    """Raised when an entry's recorded size does not match its content."""


class ArchiveBuilder:
    """Builds an uncompressed tar archive in memory.

    Parameters
    ----------
    mtime:
        Modification time stamped on every entry (commit author time).
    uid, gid:
        Owner identifiers; default to the current process owner.
    """

    def __init__(self, mtime: int, *, uid: int | None = None, gid: int | None = None) -> None:
        self._mtime = mtime
        self._uid = os.getuid() if uid is None else uid
        self._gid = os.getgid() if gid is None else gid
        self._buffer = io.BytesIO()
        self._tar = tarfile.open(fileobj=self._buffer, mode="w", format=tarfile.PAX_FORMAT)
        self._entries: list[ArchiveEntry] = []
        self._data: bytes | None = None

    @property
    def entries(self) -> list[ArchiveEntry]:
        return list(self._entries)

    @property
    def closed(self) -> bool:
        return self._data is not None

    # ------------------------------------------------------------------
    # Adding entries
    # ------------------------------------------------------------------

    def add_staged(self, staged: StagedFile) -> ArchiveEntry:
        """Append a file staged by the materializer, using its measured size."""
        return self.add(staged.path, staged.local_path, staged.size)

    def add(self, path: str, local_path: Path, size: int) -> ArchiveEntry:
        """Append *local_path* under the logical name *path*.

        The file is reopened for a fresh read handle. Its on-disk size must
        equal *size*; otherwise the entry is refused.
        """
        if self.closed:
            raise ArchiveIntegrityError(f"archive already closed; cannot add {path}")

        entry = ArchiveEntry(
            path=path,
            size=size,
            mtime=self._mtime,
            uid=self._uid,
            gid=self._gid,
        )
        try:
            with open(local_path, "rb") as fh:
                actual = os.fstat(fh.fileno()).st_size
                if actual != size:
                    raise ArchiveIntegrityError(
                        f"{path}: header size {size} does not match {actual} bytes on disk"
                    )
                self._tar.addfile(entry.to_tarinfo(), fh)
        except OSError as exc:
            raise ArchiveIntegrityError(f"cannot archive {path}: {exc}") from exc

        self._entries.append(entry)
        logger.info("including: %s", path)
        return entry

    # ------------------------------------------------------------------
    # Finalize
    # ------------------------------------------------------------------

    def close(self) -> bytes:
        """Write the end-of-archive marker and return the archive bytes."""
        if self._data is None:
            self._tar.close()
            self._data = self._buffer.getvalue()
        return self._data
