"""Snapshot sources: where commit trees and their metadata come from."""

from paperforge.sources.git_snapshot import (
    SnapshotError,
    head_snapshot,
    open_repository,
    user_identity,
)

__all__ = ["SnapshotError", "head_snapshot", "open_repository", "user_identity"]
