"""Build output models (immutable once produced)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from paperforge.models.snapshot import CommitSnapshot


class BuildArtifacts(BaseModel):
    """The two binary payloads of a build."""

    model_config = ConfigDict(frozen=True)

    document: bytes  # compiled PDF
    archive: bytes  # gzip-compressed tar


class OutputNames(BaseModel):
    """File names of the build outputs, also used as attachment names."""

    model_config = ConfigDict(frozen=True)

    document: str
    archive: str
    message: str

    @classmethod
    def for_commit(cls, snapshot: CommitSnapshot, *, release: bool) -> OutputNames:
        tag = f"{snapshot.short_id}-{snapshot.date_tag}"
        if release:
            document, archive = f"release-{tag}.pdf", f"release-{tag}.tar.gz"
        else:
            document, archive = f"build-{tag}.pdf", f"source-{tag}.tar.gz"
        return cls(document=document, archive=archive, message=f"build-{tag}.eml")


class BuildResult(BaseModel):
    """Everything a delivery sink needs after a successful build."""

    model_config = ConfigDict(frozen=True)

    artifacts: BuildArtifacts
    names: OutputNames
    included: tuple[str, ...] = ()  # archive members in archive order
