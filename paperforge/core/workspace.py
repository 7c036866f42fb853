"""Transient workspace for staged files and compiler outputs.

The directory is created on entry. It is removed after a successful run
unless ``keep`` is set; after a failed run it is always retained and its
location logged so the compiler log and staged sources can be inspected.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path, PurePosixPath
from types import TracebackType

from paperforge.errors import PaperforgeError

logger = logging.getLogger(__name__)


class WorkspacePathError(PaperforgeError):
    """Raised when a logical path would resolve outside the workspace."""


class TransientWorkspace:
    """Process-scoped scratch directory, used as a context manager.

    Parameters
    ----------
    prefix:
        Prefix of the temporary directory name.
    keep:
        Retain the directory even after a successful run.
    """

    def __init__(self, prefix: str = "texdir", *, keep: bool = False) -> None:
        self._prefix = prefix
        self._keep = keep
        self._root: Path | None = None

    @property
    def root(self) -> Path:
        if self._root is None:
            raise PaperforgeError("workspace has not been created")
        return self._root

    def __enter__(self) -> TransientWorkspace:
        self._root = Path(tempfile.mkdtemp(prefix=self._prefix))
        logger.debug("workspace: %s", self._root)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        root = self.root
        if exc_type is not None:
            logger.error("build failed; workspace retained at %s", root)
        elif self._keep:
            logger.info("workspace retained at %s", root)
        else:
            shutil.rmtree(root)

    def resolve(self, logical_path: str) -> Path:
        """Map a commit-tree path to its location inside the workspace."""
        parts = PurePosixPath(logical_path).parts
        if not parts or PurePosixPath(logical_path).is_absolute() or ".." in parts:
            raise WorkspacePathError(f"refusing to stage path outside workspace: {logical_path!r}")
        return self.root.joinpath(*parts)
