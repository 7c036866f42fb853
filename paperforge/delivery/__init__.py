"""Sink protocol for delivering build results.

All sinks implement the ``BaseSink`` protocol: a ``sink_name`` property
and a ``deliver(result, snapshot)`` method. Exactly one sink is chosen per
run: separate files, a message file, or a message on a stream.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from paperforge.models.artifacts import BuildResult
from paperforge.models.snapshot import CommitSnapshot


@runtime_checkable
class BaseSink(Protocol):
    """Protocol that every delivery sink must implement.

    Attributes
    ----------
    sink_name : str
        A short identifier for this sink (e.g. ``"local_file"``).
    """

    @property
    def sink_name(self) -> str:
        """Return the name of this sink."""
        ...

    def deliver(self, result: BuildResult, snapshot: CommitSnapshot) -> list[Path]:
        """Deliver the build result; return the paths written, if any.

        Errors propagate: a failed delivery fails the run.
        """
        ...
