"""Unit tests for snapshots read from a real git repository."""

from __future__ import annotations

import git
import pytest

from paperforge.sources.git_snapshot import (
    SnapshotError,
    head_snapshot,
    open_repository,
    user_identity,
)


class TestOpenRepository:
    def test_opens_existing(self, git_repo):
        repo = open_repository(git_repo.working_tree_dir)
        assert isinstance(repo, git.Repo)

    def test_not_a_repository(self, tmp_path):
        with pytest.raises(SnapshotError, match="not a git repository"):
            open_repository(tmp_path)

    def test_missing_path(self, tmp_path):
        with pytest.raises(SnapshotError):
            open_repository(tmp_path / "nowhere")


class TestHeadSnapshot:
    def test_commit_metadata(self, git_repo):
        snap = head_snapshot(git_repo)
        assert snap.hexsha == git_repo.head.commit.hexsha
        assert snap.author.name == "Ada Lovelace"
        assert snap.author.email == "ada@example.org"
        assert snap.message == "Add introduction\n"
        assert snap.mtime == 1709641800
        assert snap.date_tag == "03-05"

    def test_depth_first_tree_order(self, git_repo):
        snap = head_snapshot(git_repo)
        assert [path for path, _ in snap.files()] == [
            "figures/plot.png",
            "main.bib",
            "main.tex",
            "notes.txt",
        ]

    def test_contents(self, git_repo, paper_files):
        snap = head_snapshot(git_repo)
        for path, stream in snap.files():
            assert stream.read() == paper_files[path]

    def test_traversal_repeatable(self, git_repo):
        snap = head_snapshot(git_repo)
        first = [p for p, _ in snap.files()]
        assert [p for p, _ in snap.files()] == first

    def test_empty_repository(self, tmp_path):
        repo = git.Repo.init(tmp_path / "empty")
        with pytest.raises(SnapshotError, match="HEAD"):
            head_snapshot(repo)


class TestUserIdentity:
    @pytest.fixture
    def home(self, tmp_path, monkeypatch):
        home = tmp_path / "home"
        home.mkdir()
        monkeypatch.setenv("HOME", str(home))
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        return home

    def test_reads_global_config(self, git_repo, home):
        (home / ".gitconfig").write_text("[user]\n\tname = Grace Hopper\n\temail = grace@example.org\n")
        assert user_identity(git_repo) == "Grace Hopper <grace@example.org>"

    def test_falls_back_to_xdg_config(self, git_repo, home, tmp_path, monkeypatch):
        xdg = tmp_path / "xdg"
        (xdg / "git").mkdir(parents=True)
        (xdg / "git" / "config").write_text("[user]\n\tname = Grace Hopper\n\temail = grace@example.org\n")
        monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg))
        assert user_identity(git_repo) == "Grace Hopper <grace@example.org>"

    def test_default_xdg_location(self, git_repo, home):
        (home / ".config" / "git").mkdir(parents=True)
        (home / ".config" / "git" / "config").write_text("[user]\n\tname = Grace\n\temail = g@example.org\n")
        assert user_identity(git_repo) == "Grace <g@example.org>"

    def test_global_config_wins_per_option(self, git_repo, home):
        (home / ".gitconfig").write_text("[user]\n\tname = Grace Hopper\n")
        (home / ".config" / "git").mkdir(parents=True)
        (home / ".config" / "git" / "config").write_text("[user]\n\tname = Other\n\temail = grace@example.org\n")
        assert user_identity(git_repo) == "Grace Hopper <grace@example.org>"

    def test_missing_identity(self, git_repo, home):
        with pytest.raises(SnapshotError, match="user.email"):
            user_identity(git_repo)
