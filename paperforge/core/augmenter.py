"""Release-mode archive augmentation from the compiler log.

Which staged files the compiler actually read is only known after
compilation: a file counts as used when its name appears anywhere in the
compiler log. Used files, plus the compiled bibliography when present, are
appended to the still-open archive.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from paperforge.core.archive_builder import ArchiveBuilder
from paperforge.core.workspace import TransientWorkspace
from paperforge.errors import PaperforgeError
from paperforge.models.config import BuildConfig
from paperforge.models.snapshot import ArchiveEntry

logger = logging.getLogger(__name__)


class AugmentationError(PaperforgeError):
    """Raised when the compiler log or a used file cannot be read."""


def referenced_names(log_text: bytes, candidates: Sequence[str]) -> list[str]:
    """Return the *candidates* mentioned in *log_text*, keeping their order."""
    return [name for name in candidates if name.encode("utf-8") in log_text]


class ReleaseAugmenter:
    """Appends the files the compiler used to a release archive."""

    def __init__(self, config: BuildConfig, workspace: TransientWorkspace) -> None:
        self._config = config
        self._workspace = workspace

    def augment(self, archive: ArchiveBuilder, staged_paths: Sequence[str]) -> list[ArchiveEntry]:
        log_path = self._workspace.root / self._config.output_file(".log")
        try:
            log_text = log_path.read_bytes()
        except OSError as exc:
            raise AugmentationError(f"cannot read compiler log {log_path}: {exc}") from exc

        bibliography = self._config.output_file(".bbl")
        # A committed main.bbl is both staged and the compiled output; list it once.
        candidates = list(dict.fromkeys([*staged_paths, bibliography]))

        added: list[ArchiveEntry] = []
        for name in referenced_names(log_text, candidates):
            local_path = self._workspace.resolve(name)
            if name == bibliography and not local_path.exists():
                logger.debug("log mentions %s but no bibliography was produced", name)
                continue
            try:
                size = local_path.stat().st_size
            except OSError as exc:
                raise AugmentationError(f"cannot stat used file {name}: {exc}") from exc
            added.append(archive.add(name, local_path, size))
        return added
