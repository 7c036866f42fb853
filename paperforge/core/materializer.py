"""Copies admitted snapshot files into the transient workspace.

Every file is copied byte-for-byte except the primary document source,
which receives a provenance stamp right after its document-class line:

- outside release builds, two lines that print the short commit hash and
  the build time in the upper-left corner of the first page;
- always, a comment line carrying the full commit hash.

Everything after the injection point is copied unmodified.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import BinaryIO

from paperforge.core.workspace import TransientWorkspace
from paperforge.errors import PaperforgeError
from paperforge.models.config import BuildConfig
from paperforge.models.snapshot import StagedFile

logger = logging.getLogger(__name__)

DOCUMENT_CLASS_TOKEN = b"documentclass"
_COPY_CHUNK = 64 * 1024


class MaterializationError(PaperforgeError):
    """Raised when a snapshot file cannot be staged."""


def build_stamp(hexsha: str, *, release: bool, now: datetime) -> bytes:
    """Return the lines injected after the document-class declaration."""
    lines: list[str] = []
    if not release:
        lines.append("\\usepackage{atbegshi}\n")
        lines.append(
            "\\AtBeginShipoutNext{\\AtBeginShipoutUpperLeft{\\put(1.25in,-1in)"
            "{\\makebox[0pt][l]{{\\tt %s %s}}}}}\n"
            % (hexsha[:8], now.strftime("%H:%M:%S\\ %Y-%m-%d"))
        )
    lines.append(f"%{hexsha}\n")
    return "".join(lines).encode("utf-8")


class SnapshotMaterializer:
    """Stages snapshot files under a workspace.

    Parameters
    ----------
    config:
        Build configuration (primary source name, release flag).
    workspace:
        The transient workspace receiving the copies.
    hexsha:
        Full hash of the commit being built, embedded in the stamp.
    clock:
        Source of the wall-clock time shown in the visible stamp.
    """

    def __init__(
        self,
        config: BuildConfig,
        workspace: TransientWorkspace,
        hexsha: str,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._config = config
        self._workspace = workspace
        self._hexsha = hexsha
        self._clock = clock

    def materialize(self, path: str, stream: BinaryIO) -> StagedFile:
        """Copy one file into the workspace and return its exact size."""
        try:
            target = self._workspace.resolve(path)
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "wb") as out:
                if path == self._config.primary_source:
                    written = self._copy_stamped(stream, out, path)
                else:
                    written = _copy(stream, out)
        except OSError as exc:
            raise MaterializationError(f"cannot stage {path}: {exc}") from exc
        finally:
            stream.close()

        logger.debug("staged %s (%d bytes)", path, written)
        return StagedFile(path=path, local_path=target, size=written)

    def _copy_stamped(self, stream: BinaryIO, out: BinaryIO, path: str) -> int:
        written = 0
        while True:
            line = stream.readline()
            if not line.endswith(b"\n"):
                raise MaterializationError(
                    f"{path}: no line containing "
                    f"{DOCUMENT_CLASS_TOKEN.decode()!r} before end of file"
                )
            written += out.write(line)
            if DOCUMENT_CLASS_TOKEN in line:
                break

        stamp = build_stamp(self._hexsha, release=self._config.release, now=self._clock())
        written += out.write(stamp)
        return written + _copy(stream, out)


def _copy(src: BinaryIO, dst: BinaryIO) -> int:
    written = 0
    for chunk in iter(lambda: src.read(_COPY_CHUNK), b""):
        written += dst.write(chunk)
    return written
