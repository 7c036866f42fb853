"""Shared test fixtures for paperforge."""

from __future__ import annotations

import io
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta, timezone
from pathlib import Path

import git
import pytest

from paperforge.models.config import BuildConfig
from paperforge.models.snapshot import CommitAuthor, CommitSnapshot

HEXSHA = "0123456789abcdef0123456789abcdef01234567"
AUTHOR_TIME = datetime(2024, 3, 5, 14, 30, 0, tzinfo=timezone(timedelta(hours=2)))
BUILD_TIME = datetime(2024, 3, 6, 9, 15, 42)

MAIN_TEX = (
    b"% preamble comment\n"
    b"\\documentclass{article}\n"
    b"\\begin{document}\n"
    b"Hello \\cite{knuth84}.\n"
    b"\\bibliography{main}\n"
    b"\\end{document}\n"
)


class FakeRunner:
    """Stands in for pdflatex and bibtex.

    Records every invocation and writes the files the real tools would:
    the compiler writes ``main.aux``, ``main.log`` and ``main.pdf``;
    bibtex writes ``main.bbl``.

    Parameters
    ----------
    citations:
        Whether the generated ``main.aux`` contains a ``\\citation`` line.
    log_mentions:
        File names written into ``main.log``.
    fail_on_call:
        1-based index of the invocation that exits with status 1.
    produce_pdf:
        Whether compiler passes write ``main.pdf``.
    """

    def __init__(
        self,
        *,
        citations: bool = False,
        log_mentions: Sequence[str] = (),
        fail_on_call: int | None = None,
        produce_pdf: bool = True,
        pdf_bytes: bytes = b"%PDF-1.5\n% fake document\n%%EOF\n",
    ) -> None:
        self.citations = citations
        self.log_mentions = list(log_mentions)
        self.fail_on_call = fail_on_call
        self.produce_pdf = produce_pdf
        self.pdf_bytes = pdf_bytes
        self.calls: list[list[str]] = []

    @property
    def tools(self) -> list[str]:
        return [call[0] for call in self.calls]

    def count(self, tool: str) -> int:
        return self.tools.count(tool)

    def run(self, args: Sequence[str], cwd: Path) -> int:
        self.calls.append(list(args))
        if self.fail_on_call == len(self.calls):
            return 1

        if args[0] == "bibtex":
            (cwd / "main.bbl").write_text("\\begin{thebibliography}{1}\n\\end{thebibliography}\n")
            return 0

        aux = "\\relax\n"
        if self.citations:
            aux += "\\citation{knuth84}\n\\bibdata{main}\n"
        (cwd / "main.aux").write_text(aux)

        log = "This is pdfTeX, Version 3.141592653\n"
        log += "".join(f"({cwd}/{name}\n" for name in self.log_mentions)
        (cwd / "main.log").write_text(log)

        if self.produce_pdf:
            (cwd / "main.pdf").write_bytes(self.pdf_bytes)
        return 0


def make_snapshot_from(
    files: dict[str, bytes],
    *,
    hexsha: str = HEXSHA,
    when: datetime = AUTHOR_TIME,
    message: str = "Add introduction\n\nFirst draft of the intro section.\n",
) -> CommitSnapshot:
    """Build an in-memory snapshot whose traversal follows *files* order."""
    items = list(files.items())
    return CommitSnapshot(
        hexsha=hexsha,
        author=CommitAuthor(name="Ada Lovelace", email="ada@example.org", when=when),
        message=message,
        traverse=lambda: iter([(path, io.BytesIO(data)) for path, data in items]),
    )


@pytest.fixture
def make_snapshot() -> Callable[..., CommitSnapshot]:
    """Factory fixture: build a CommitSnapshot from a path -> bytes mapping."""
    return make_snapshot_from


@pytest.fixture
def paper_files() -> dict[str, bytes]:
    """A small paper: source, bibliography, a figure and an unused note."""
    return {
        "main.tex": MAIN_TEX,
        "main.bib": b"@book{knuth84, title={The TeXbook}}\n",
        "figures/plot.png": b"\x89PNG\r\n\x1a\n" + bytes(range(256)),
        "notes.txt": b"not part of the paper\n",
    }


@pytest.fixture
def snapshot(make_snapshot, paper_files) -> CommitSnapshot:
    return make_snapshot(paper_files)


@pytest.fixture
def build_config() -> BuildConfig:
    return BuildConfig()


@pytest.fixture
def release_config() -> BuildConfig:
    return BuildConfig(release=True)


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def make_runner() -> type[FakeRunner]:
    """Factory fixture: ``make_runner(citations=True, ...)``."""
    return FakeRunner


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    return lambda: BUILD_TIME


@pytest.fixture
def scratch_tempdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Redirect transient workspaces into a directory the test can inspect."""
    import tempfile

    root = tmp_path / "scratch"
    root.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(root))
    return root


@pytest.fixture
def git_repo(tmp_path: Path, paper_files: dict[str, bytes]) -> git.Repo:
    """A repository with one commit containing ``paper_files``."""
    repo_dir = tmp_path / "paper"
    repo = git.Repo.init(repo_dir)
    for path, data in paper_files.items():
        target = repo_dir / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
    repo.index.add(list(paper_files))

    actor = git.Actor("Ada Lovelace", "ada@example.org")
    stamp = f"{int(AUTHOR_TIME.timestamp())} +0200"
    repo.index.commit(
        "Add introduction\n",
        author=actor,
        committer=actor,
        author_date=stamp,
        commit_date=stamp,
    )
    return repo
