"""Compilation state machine models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class CompilationState(str, Enum):
    """Each state names the step the orchestrator performs next."""

    INIT = "init"
    FIRST_PASS = "first_pass"
    CITATION_CHECK = "citation_check"
    BIBLIOGRAPHY = "bibliography"
    SECOND_PASS = "second_pass"
    FINAL_PASS = "final_pass"
    DONE = "done"
    FAILED = "failed"


TERMINAL_STATES: frozenset[CompilationState] = frozenset(
    {CompilationState.DONE, CompilationState.FAILED}
)

# Enforced by CompilerOrchestrator. Every non-terminal state may fail.
VALID_TRANSITIONS: dict[CompilationState, set[CompilationState]] = {
    CompilationState.INIT: {CompilationState.FIRST_PASS, CompilationState.FAILED},
    CompilationState.FIRST_PASS: {CompilationState.CITATION_CHECK, CompilationState.FAILED},
    CompilationState.CITATION_CHECK: {
        CompilationState.BIBLIOGRAPHY,
        CompilationState.FINAL_PASS,
        CompilationState.FAILED,
    },
    CompilationState.BIBLIOGRAPHY: {CompilationState.SECOND_PASS, CompilationState.FAILED},
    CompilationState.SECOND_PASS: {CompilationState.FINAL_PASS, CompilationState.FAILED},
    CompilationState.FINAL_PASS: {CompilationState.DONE, CompilationState.FAILED},
    CompilationState.DONE: set(),  # terminal
    CompilationState.FAILED: set(),  # terminal
}


class CompilationTransition(BaseModel):
    """Records a single state transition of one compilation run."""

    model_config = ConfigDict(frozen=True)

    from_state: CompilationState
    to_state: CompilationState
    reason: str | None = None  # populated when entering FAILED
