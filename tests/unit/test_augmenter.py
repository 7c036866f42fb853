"""Unit tests for release-mode archive augmentation."""

from __future__ import annotations

import io
import tarfile

import pytest

from paperforge.core.archive_builder import ArchiveBuilder
from paperforge.core.augmenter import AugmentationError, ReleaseAugmenter, referenced_names
from paperforge.core.workspace import TransientWorkspace
from paperforge.models.config import BuildConfig

STAGED = ["main.tex", "main.bib", "figures/plot.png", "notes.txt"]


@pytest.fixture
def workspace(scratch_tempdir):
    with TransientWorkspace() as ws:
        for name in STAGED:
            target = ws.resolve(name)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(name.encode() * 3)
        yield ws


def _write_log(ws, *names):
    lines = ["This is pdfTeX"] + [f"({ws.root}/{n}" for n in names]
    (ws.root / "main.log").write_text("\n".join(lines) + "\n")


def _names(archive: ArchiveBuilder) -> list[str]:
    with tarfile.open(fileobj=io.BytesIO(archive.close()), mode="r:") as tar:
        return tar.getnames()


class TestReferencedNames:
    def test_substring_match_in_candidate_order(self):
        log = b"(./figures/plot.png) (./main.tex"
        assert referenced_names(log, ["main.tex", "notes.txt", "figures/plot.png"]) == [
            "main.tex",
            "figures/plot.png",
        ]

    def test_no_mentions(self):
        assert referenced_names(b"", ["main.tex"]) == []


class TestAugment:
    def test_appends_only_used_files(self, workspace):
        _write_log(workspace, "main.tex", "figures/plot.png")
        archive = ArchiveBuilder(0)
        added = ReleaseAugmenter(BuildConfig(release=True), workspace).augment(archive, STAGED)
        assert [e.path for e in added] == ["main.tex", "figures/plot.png"]
        assert _names(archive) == ["main.tex", "figures/plot.png"]

    def test_bibliography_output_included_when_present(self, workspace):
        (workspace.root / "main.bbl").write_text("\\begin{thebibliography}{1}\n")
        _write_log(workspace, "main.tex", "main.bbl")
        archive = ArchiveBuilder(0)
        ReleaseAugmenter(BuildConfig(release=True), workspace).augment(archive, STAGED)
        assert _names(archive) == ["main.tex", "main.bbl"]

    def test_bibliography_output_skipped_when_absent(self, workspace):
        _write_log(workspace, "main.tex", "main.bbl")
        archive = ArchiveBuilder(0)
        ReleaseAugmenter(BuildConfig(release=True), workspace).augment(archive, STAGED)
        assert _names(archive) == ["main.tex"]

    def test_sizes_taken_from_disk(self, workspace):
        _write_log(workspace, "notes.txt")
        archive = ArchiveBuilder(0)
        (entry,) = ReleaseAugmenter(BuildConfig(release=True), workspace).augment(archive, STAGED)
        assert entry.size == len(b"notes.txt" * 3)

    def test_missing_log_raises(self, workspace):
        with pytest.raises(AugmentationError, match="main.log"):
            ReleaseAugmenter(BuildConfig(release=True), workspace).augment(ArchiveBuilder(0), STAGED)

    def test_missing_used_file_raises(self, workspace):
        _write_log(workspace, "ghost.sty")
        with pytest.raises(AugmentationError, match="ghost.sty"):
            ReleaseAugmenter(BuildConfig(release=True), workspace).augment(
                ArchiveBuilder(0), [*STAGED, "ghost.sty"]
            )

    def test_committed_bibliography_output_archived_once(self, workspace):
        (workspace.root / "main.bbl").write_text("\\begin{thebibliography}{1}\n")
        _write_log(workspace, "main.tex", "main.bbl")
        archive = ArchiveBuilder(0)
        added = ReleaseAugmenter(BuildConfig(release=True), workspace).augment(
            archive, [*STAGED, "main.bbl"]
        )
        assert [e.path for e in added] == ["main.tex", "main.bbl"]
        assert _names(archive) == ["main.tex", "main.bbl"]
