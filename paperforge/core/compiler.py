"""Multi-pass document compilation as an explicit state machine.

    INIT -> FIRST_PASS -> CITATION_CHECK -+-> BIBLIOGRAPHY -> SECOND_PASS -+-> FINAL_PASS -> DONE
                                          |                              |
                                          +------------------------------+

Any step may move to FAILED instead, which is terminal and raises
``CompilationError``. The bibliography processor only runs when the
cross-reference file contains a citation; the final compiler pass always
runs. Transitions are validated against ``VALID_TRANSITIONS`` and recorded
in order.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from paperforge.errors import PaperforgeError
from paperforge.models.compilation import (
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    CompilationState,
    CompilationTransition,
)
from paperforge.models.config import BuildConfig

logger = logging.getLogger(__name__)

CITATION_MARKER = b"\\citation"

_State = CompilationState


class InvalidTransitionError(PaperforgeError):
    """Raised when a requested state transition is not valid."""


class CompilationError(PaperforgeError):
    """Raised when compilation ends in FAILED.

    Attributes
    ----------
    state:
        The state whose step failed.
    history:
        Every transition taken, ending with the move to FAILED.
    """

    def __init__(
        self,
        message: str,
        *,
        state: CompilationState,
        history: Sequence[CompilationTransition] = (),
    ) -> None:
        super().__init__(message)
        self.state = state
        self.history = list(history)


# ---------------------------------------------------------------------------
# External process invocation
# ---------------------------------------------------------------------------


@runtime_checkable
class ProcessRunner(Protocol):
    """Runs an external tool and reports its exit status."""

    def run(self, args: Sequence[str], cwd: Path) -> int:
        """Run *args* with *cwd* as working directory; return the exit code."""
        ...


class SubprocessRunner:
    """Default runner backed by ``subprocess.run``.

    Tool output is captured; when a tool fails, the tail of its output is
    logged at DEBUG level. No timeout is applied. A missing executable
    surfaces as ``OSError``.
    """

    def __init__(self, tail_lines: int = 20) -> None:
        self._tail_lines = tail_lines

    def run(self, args: Sequence[str], cwd: Path) -> int:
        result = subprocess.run(
            list(args),
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            capture_output=True,
        )
        if result.returncode != 0:
            output = result.stdout.decode("utf-8", errors="replace").splitlines()
            for line in output[-self._tail_lines:]:
                logger.debug("%s: %s", args[0], line)
        return result.returncode


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------


class CompilerOrchestrator:
    """Drives one compilation of the workspace through the state machine.

    Parameters
    ----------
    config:
        Supplies the job name and the compiler/bibliography command lines.
    workspace_root:
        Directory holding the staged sources; every tool runs here.
    runner:
        Executes external tools. Defaults to ``SubprocessRunner``.
    """

    def __init__(
        self,
        config: BuildConfig,
        workspace_root: Path,
        runner: ProcessRunner | None = None,
    ) -> None:
        self._config = config
        self._root = Path(workspace_root)
        self._runner = runner or SubprocessRunner()
        self._state = _State.INIT
        self._history: list[CompilationTransition] = []
        self._failure: str | None = None
        self._steps: dict[CompilationState, Callable[[], CompilationState]] = {
            _State.INIT: self._check_source,
            _State.FIRST_PASS: self._first_pass,
            _State.CITATION_CHECK: self._check_citations,
            _State.BIBLIOGRAPHY: self._bibliography,
            _State.SECOND_PASS: self._second_pass,
            _State.FINAL_PASS: self._final_pass,
        }

    @property
    def state(self) -> CompilationState:
        return self._state

    @property
    def history(self) -> list[CompilationTransition]:
        return list(self._history)

    @property
    def document_path(self) -> Path:
        return self._root / self._config.output_file(".pdf")

    # ------------------------------------------------------------------
    # Driving
    # ------------------------------------------------------------------

    def run(self) -> Path:
        """Run every step until DONE and return the compiled document path."""
        if self._state != _State.INIT:
            raise InvalidTransitionError(f"compilation already ran (state {self._state.value})")

        while self._state not in TERMINAL_STATES:
            failing_state = self._state
            self.transition(self._steps[failing_state]())

        if self._state == _State.FAILED:
            raise CompilationError(
                self._failure or "compilation failed",
                state=failing_state,
                history=self._history,
            )
        return self.document_path

    def transition(self, target: CompilationState) -> CompilationTransition:
        """Move to *target*, validating against ``VALID_TRANSITIONS``."""
        allowed = VALID_TRANSITIONS.get(self._state, set())
        if target not in allowed:
            raise InvalidTransitionError(
                f"Cannot transition from {self._state.value} to {target.value}. "
                f"Allowed: {sorted(s.value for s in allowed)}"
            )
        record = CompilationTransition(
            from_state=self._state,
            to_state=target,
            reason=self._failure if target == _State.FAILED else None,
        )
        self._history.append(record)
        self._state = target
        return record

    # ------------------------------------------------------------------
    # Steps (each returns the next state)
    # ------------------------------------------------------------------

    def _check_source(self) -> CompilationState:
        if not (self._root / self._config.primary_source).is_file():
            return self._fail(f"file {self._config.primary_source} cannot be found")
        return _State.FIRST_PASS

    def _first_pass(self) -> CompilationState:
        return self._compile(_State.CITATION_CHECK)

    def _check_citations(self) -> CompilationState:
        aux_path = self._root / self._config.output_file(".aux")
        try:
            with open(aux_path, "rb") as aux:
                for line in aux:
                    if line.startswith(CITATION_MARKER):
                        return _State.BIBLIOGRAPHY
        except OSError as exc:
            return self._fail(f"cannot read cross-reference file {aux_path.name}: {exc}")
        logger.debug("no citations in %s; skipping bibliography", aux_path.name)
        return _State.FINAL_PASS

    def _bibliography(self) -> CompilationState:
        logger.info("bibtex")
        return self._invoke(self._config.bibliography_args, _State.SECOND_PASS)

    def _second_pass(self) -> CompilationState:
        return self._compile(_State.FINAL_PASS)

    def _final_pass(self) -> CompilationState:
        next_state = self._compile(_State.DONE)
        if next_state == _State.DONE and not self.document_path.is_file():
            return self._fail(f"compiler produced no {self.document_path.name}")
        return next_state

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _compile(self, on_success: CompilationState) -> CompilationState:
        logger.info("compiling")
        return self._invoke(self._config.compiler_args, on_success)

    def _invoke(self, args: list[str], on_success: CompilationState) -> CompilationState:
        try:
            status = self._runner.run(args, self._root)
        except OSError as exc:
            return self._fail(f"cannot execute {args[0]}: {exc}")
        if status != 0:
            return self._fail(
                f"{args[0]} exited with status {status} during {self._state.value}"
            )
        return on_success

    def _fail(self, reason: str) -> CompilationState:
        self._failure = reason
        return _State.FAILED
