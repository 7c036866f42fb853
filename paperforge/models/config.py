"""Per-run build and message configuration models."""

from __future__ import annotations

from enum import Enum
from pathlib import PurePosixPath

from pydantic import BaseModel, ConfigDict

from paperforge.config import Settings

RELEASE_SUBJECT_SUFFIX = " [arXiv release]"


class FilterPolicy(str, Enum):
    """How the tree filter decides whether a path belongs in the output set."""

    EXCLUDE_PREFIX = "exclude_prefix"
    ALLOW_LIST = "allow_list"


class BuildConfig(BaseModel):
    """Immutable configuration for one build, shared by every component.

    Constructed once per invocation and handed to the materializer, the
    archive builder, the compiler orchestrator and the delivery sinks.
    """

    model_config = ConfigDict(frozen=True)

    release: bool = False
    filter_policy: FilterPolicy = FilterPolicy.EXCLUDE_PREFIX
    exclusions: tuple[str, ...] = ()
    primary_source: str = "main.tex"
    bibliography_database: str = "main.bib"
    latex_command: str = "pdflatex"
    bibtex_command: str = "bibtex"
    workspace_prefix: str = "texdir"
    keep_workspace: bool = False

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: object) -> BuildConfig:
        """Build a config from env-driven settings plus per-run overrides."""
        values: dict[str, object] = {
            "primary_source": settings.primary_source,
            "bibliography_database": settings.bibliography_database,
            "latex_command": settings.latex_command,
            "bibtex_command": settings.bibtex_command,
            "workspace_prefix": settings.workspace_prefix,
            "keep_workspace": settings.keep_workspace,
        }
        values.update(overrides)
        return cls(**values)

    @property
    def jobname(self) -> str:
        """Compiler job name: the primary source without its extension."""
        return PurePosixPath(self.primary_source).stem

    @property
    def allowed_names(self) -> frozenset[str]:
        return frozenset({self.primary_source, self.bibliography_database})

    @property
    def compiler_args(self) -> list[str]:
        return [
            self.latex_command,
            "-halt-on-error",
            "-file-line-error",
            "-interaction=nonstopmode",
            self.jobname,
        ]

    @property
    def bibliography_args(self) -> list[str]:
        return [self.bibtex_command, self.jobname]

    def output_file(self, suffix: str) -> str:
        """Name of a compiler output file in the workspace, e.g. ``main.aux``."""
        return f"{self.jobname}{suffix}"


class MessageConfig(BaseModel):
    """Addressing and identity settings for the composed message."""

    model_config = ConfigDict(frozen=True)

    sender: str
    recipients: tuple[str, ...] = ()
    subject: str = ""
    message_id_domain: str = "localhost"


def default_subject(base: str, *, release: bool) -> str:
    """Return the subject line, tagged when building a release."""
    return base + RELEASE_SUBJECT_SUFFIX if release else base
