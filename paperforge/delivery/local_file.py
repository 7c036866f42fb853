"""Local file sink — writes the document and the archive as separate files."""

from __future__ import annotations

import logging
from pathlib import Path

from paperforge.models.artifacts import BuildResult
from paperforge.models.snapshot import CommitSnapshot

logger = logging.getLogger(__name__)


class LocalFileSink:
    """Writes ``<kind>-<cid>-<MM-DD>.pdf`` and ``.tar.gz`` into a directory.

    Parameters
    ----------
    base_path:
        Output directory. Defaults to the current directory.
    """

    def __init__(self, base_path: Path | str | None = None) -> None:
        self._base = Path(base_path) if base_path else Path(".")

    @property
    def sink_name(self) -> str:
        return "local_file"

    def deliver(self, result: BuildResult, snapshot: CommitSnapshot) -> list[Path]:
        self._base.mkdir(parents=True, exist_ok=True)
        written: list[Path] = []
        for name, data in (
            (result.names.document, result.artifacts.document),
            (result.names.archive, result.artifacts.archive),
        ):
            target = self._base / name
            target.write_bytes(data)
            logger.info("writing: %s", target)
            written.append(target)
        return written
