"""paperforge data models — all Pydantic v2, all frozen (immutable)."""

from paperforge.models.artifacts import BuildArtifacts, BuildResult, OutputNames
from paperforge.models.compilation import (
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    CompilationState,
    CompilationTransition,
)
from paperforge.models.config import BuildConfig, FilterPolicy, MessageConfig
from paperforge.models.message import HEADER_ORDER, EmailMessage, MessagePart
from paperforge.models.snapshot import (
    ArchiveEntry,
    CommitAuthor,
    CommitSnapshot,
    SnapshotFile,
    StagedFile,
)

__all__ = [
    # snapshot
    "CommitAuthor",
    "CommitSnapshot",
    "SnapshotFile",
    "StagedFile",
    "ArchiveEntry",
    # compilation
    "CompilationState",
    "CompilationTransition",
    "VALID_TRANSITIONS",
    "TERMINAL_STATES",
    # artifacts
    "BuildArtifacts",
    "BuildResult",
    "OutputNames",
    # message
    "HEADER_ORDER",
    "EmailMessage",
    "MessagePart",
    # config
    "BuildConfig",
    "FilterPolicy",
    "MessageConfig",
]
