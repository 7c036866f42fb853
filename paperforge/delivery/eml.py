"""Message sinks — compose the build message into a file or onto a stream."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO

from paperforge.mail.composer import MessageComposer
from paperforge.models.artifacts import BuildResult
from paperforge.models.snapshot import CommitSnapshot

logger = logging.getLogger(__name__)


class EmlFileSink:
    """Writes ``build-<cid>-<MM-DD>.eml`` into a directory.

    Parameters
    ----------
    composer:
        Composer configured with sender, recipients and subject.
    base_path:
        Output directory. Defaults to the current directory.
    """

    def __init__(self, composer: MessageComposer, base_path: Path | str | None = None) -> None:
        self._composer = composer
        self._base = Path(base_path) if base_path else Path(".")

    @property
    def sink_name(self) -> str:
        return "eml_file"

    def deliver(self, result: BuildResult, snapshot: CommitSnapshot) -> list[Path]:
        self._base.mkdir(parents=True, exist_ok=True)
        target = self._base / result.names.message
        with open(target, "wb") as out:
            self._composer.compose(snapshot, result, out)
        logger.info("writing: %s", target)
        return [target]


class StreamSink:
    """Writes the composed message onto a binary stream such as stdout."""

    def __init__(self, composer: MessageComposer, stream: BinaryIO) -> None:
        self._composer = composer
        self._stream = stream

    @property
    def sink_name(self) -> str:
        return "stream"

    def deliver(self, result: BuildResult, snapshot: CommitSnapshot) -> list[Path]:
        self._composer.compose(snapshot, result, self._stream)
        self._stream.flush()
        return []
