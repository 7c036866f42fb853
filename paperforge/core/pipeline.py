"""Build pipeline — turns one commit snapshot into a document and an archive.

Order of work:

1. filter each snapshot path,
2. stage admitted files in the transient workspace,
3. (normal builds) append each staged file to the archive,
4. compile the document,
5. (release builds) append the files the compiler used,
6. close and compress the archive.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from paperforge.core.archive_builder import ArchiveBuilder
from paperforge.core.augmenter import ReleaseAugmenter
from paperforge.core.compiler import CompilerOrchestrator, ProcessRunner
from paperforge.core.compressor import compress
from paperforge.core.hasher import fingerprint
from paperforge.core.materializer import SnapshotMaterializer
from paperforge.core.tree_filter import TreeFilter
from paperforge.core.workspace import TransientWorkspace
from paperforge.models.artifacts import BuildArtifacts, BuildResult, OutputNames
from paperforge.models.config import BuildConfig
from paperforge.models.snapshot import CommitSnapshot

logger = logging.getLogger(__name__)


class BuildPipeline:
    """Runs the artifact-generation pipeline for one commit.

    Parameters
    ----------
    config:
        Immutable build configuration shared by every component.
    runner:
        External process runner for the compiler; ``None`` uses subprocesses.
    clock:
        Wall-clock source for the visible provenance stamp.
    """

    def __init__(
        self,
        config: BuildConfig,
        *,
        runner: ProcessRunner | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.config = config
        self._runner = runner
        self._clock = clock
        self._filter = TreeFilter.from_config(config)

    def run(self, snapshot: CommitSnapshot) -> BuildResult:
        config = self.config
        with TransientWorkspace(config.workspace_prefix, keep=config.keep_workspace) as workspace:
            materializer = SnapshotMaterializer(
                config, workspace, snapshot.hexsha, clock=self._clock
            )
            archive = ArchiveBuilder(snapshot.mtime)
            staged_paths: list[str] = []

            for path, stream in snapshot.files():
                if not self._filter.admits(path):
                    stream.close()
                    continue
                staged = materializer.materialize(path, stream)
                staged_paths.append(staged.path)
                if not config.release:
                    archive.add_staged(staged)

            document_path = CompilerOrchestrator(config, workspace.root, self._runner).run()
            document = document_path.read_bytes()

            if config.release:
                ReleaseAugmenter(config, workspace).augment(archive, staged_paths)

            included = tuple(entry.path for entry in archive.entries)
            artifacts = BuildArtifacts(document=document, archive=compress(archive.close()))

        logger.info("document %s (%d bytes)", fingerprint(artifacts.document), len(artifacts.document))
        logger.info("archive %s (%d bytes)", fingerprint(artifacts.archive), len(artifacts.archive))
        return BuildResult(
            artifacts=artifacts,
            names=OutputNames.for_commit(snapshot, release=config.release),
            included=included,
        )
