"""
Status-update dialog as an explicit state machine.

    confirm ──accept──► reason ──submit──► recruiter ──send──► (closed)
       │   (Failed only)                       ▲
       └──────────accept (not Failed)──────────┘

Each transition is a pure function taking the current WorkflowState and
returning the next one. Bad user input raises ValidationError; calling a
transition from the wrong step raises InvalidTransition (a programming
error, never shown to the user).

`outcome` is a single enum, so "loading" and "succeeded" can never be
true at the same time.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from smartrecruit.errors import ValidationError
from smartrecruit.models.pipeline import Status

REASON_REQUIRED = "Please provide a reason for the failure"
RECRUITER_REQUIRED = "Please provide your name"


class Step(str, Enum):
    CONFIRM   = "confirm"
    REASON    = "reason"
    RECRUITER = "recruiter"
    CLOSED    = "closed"


class Outcome(str, Enum):
    IDLE      = "idle"
    LOADING   = "loading"
    SUCCEEDED = "succeeded"
    FAILED    = "failed"


class InvalidTransition(RuntimeError):
    """Raised when a transition is attempted from the wrong step."""


@dataclass(frozen=True)
class WorkflowState:
    step: Step = Step.CONFIRM
    outcome: Outcome = Outcome.IDLE
    reason: str = ""
    recruiter_name: str = ""
    recruiter_email: str = ""
    error: Optional[str] = None
    preview_ref: Optional[str] = None

    @property
    def busy(self) -> bool:
        """True while inputs must be disabled."""
        return self.outcome in (Outcome.LOADING, Outcome.SUCCEEDED)


def _require(state: WorkflowState, *steps: Step) -> None:
    if state.step not in steps:
        expected = "/".join(s.value for s in steps)
        raise InvalidTransition(f"Expected step {expected}, workflow is at {state.step.value}")


def initial() -> WorkflowState:
    return WorkflowState()


def closed() -> WorkflowState:
    """Closing drops every transient field."""
    return WorkflowState(step=Step.CLOSED)


def accept(state: WorkflowState, status: Status) -> WorkflowState:
    _require(state, Step.CONFIRM)
    next_step = Step.REASON if status is Status.FAILED else Step.RECRUITER
    return replace(state, step=next_step, error=None)


def submit_reason(state: WorkflowState, status: Status, reason: str) -> WorkflowState:
    _require(state, Step.REASON)
    if not reason.strip() and status is Status.FAILED:
        raise ValidationError(REASON_REQUIRED, field="reason")
    return replace(state, step=Step.RECRUITER, reason=reason, error=None)


def begin_send(state: WorkflowState, recruiter_name: str, recruiter_email: str = "") -> WorkflowState:
    _require(state, Step.RECRUITER)
    if not recruiter_name.strip():
        raise ValidationError(RECRUITER_REQUIRED, field="recruiter_name")
    return replace(
        state,
        recruiter_name=recruiter_name,
        recruiter_email=recruiter_email,
        outcome=Outcome.LOADING,
        error=None,
    )


def begin_delete(state: WorkflowState) -> WorkflowState:
    _require(state, Step.CONFIRM)
    return replace(state, outcome=Outcome.LOADING, error=None)


def succeed(state: WorkflowState, preview_ref: Optional[str] = None) -> WorkflowState:
    return replace(state, outcome=Outcome.SUCCEEDED, preview_ref=preview_ref, error=None)


def fail(state: WorkflowState, message: str) -> WorkflowState:
    return replace(state, outcome=Outcome.FAILED, error=message)


def reject(state: WorkflowState, message: str) -> WorkflowState:
    """Surface a validation message without moving or touching the outcome."""
    return replace(state, error=message)
