"""
Controller for one activation of the status-update (or delete) dialog.

The controller holds a read-only reference to the candidate, drives the
pure transitions in `states`, performs the gateway call and, after a
successful send/delete, closes itself after `auto_close_delay` seconds and
then asks the owning view to resynchronize.

One instance per activation: once closed it stays closed, and the owning
view creates a new one for the next activation.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Union

from smartrecruit.config import get_settings
from smartrecruit.errors import RemoteFailure, SessionExpired, ValidationError
from smartrecruit.models.candidate import CandidateRecord
from smartrecruit.models.email import NotifyRequest
from smartrecruit.models.pipeline import Status
from smartrecruit.services.gateway import CandidateGateway
from smartrecruit.workflow import states
from smartrecruit.workflow.states import Outcome, Step, WorkflowState

logger = logging.getLogger(__name__)

Callback = Callable[[], Union[Awaitable[Any], Any]]

SEND_FAILED = "Failed to send email"
DELETE_FAILED = "Failed to delete candidate"


class WorkflowMode(str, Enum):
    NOTIFY = "notify"
    DELETE = "delete"


async def run_callback(callback: Optional[Callback]) -> None:
    if callback is None:
        return
    result = callback()
    if inspect.isawaitable(result):
        await result


class StatusTransitionWorkflow:
    def __init__(
        self,
        candidate: CandidateRecord,
        gateway: CandidateGateway,
        *,
        mode: WorkflowMode = WorkflowMode.NOTIFY,
        on_resync: Optional[Callback] = None,
        on_navigate_away: Optional[Callback] = None,
        auto_close_delay: Optional[float] = None,
    ):
        self.candidate = candidate
        self.mode = mode
        self._gateway = gateway
        self._on_resync = on_resync
        self._on_navigate_away = on_navigate_away
        self.auto_close_delay = (
            auto_close_delay if auto_close_delay is not None else get_settings().auto_close_seconds
        )
        self.state: WorkflowState = states.initial()
        self._completion: Optional[asyncio.Task] = None

    # ── Read-only view of the state ──────────────────────────────────────────

    @property
    def step(self) -> Step:
        return self.state.step

    @property
    def outcome(self) -> Outcome:
        return self.state.outcome

    @property
    def error(self) -> Optional[str]:
        return self.state.error

    @property
    def is_open(self) -> bool:
        return self.state.step is not Step.CLOSED

    @property
    def inputs_disabled(self) -> bool:
        return self.state.busy

    @property
    def status(self) -> Status:
        return self.candidate.status

    # ── User actions ─────────────────────────────────────────────────────────

    async def accept(self) -> WorkflowState:
        """'Yes, continue' on the confirm step."""
        if self._ignored("accept"):
            return self.state
        if self.mode is WorkflowMode.DELETE:
            return await self._delete()
        self.state = states.accept(self.state, self.status)
        logger.debug("Workflow %s → %s", self.candidate.id, self.state.step.value)
        return self.state

    def decline(self) -> WorkflowState:
        """'No, don't send' / 'Cancel' on any step."""
        return self.close()

    def submit_reason(self, reason: str) -> WorkflowState:
        if self._ignored("submit_reason"):
            return self.state
        try:
            self.state = states.submit_reason(self.state, self.status, reason)
        except ValidationError as e:
            self.state = states.reject(self.state, e.message)
        return self.state

    async def send(self, recruiter_name: str, recruiter_email: str = "") -> WorkflowState:
        """Submit the recruiter step and dispatch the notification email."""
        if self._ignored("send"):
            return self.state
        try:
            self.state = states.begin_send(self.state, recruiter_name, recruiter_email)
        except ValidationError as e:
            self.state = states.reject(self.state, e.message)
            return self.state

        request = NotifyRequest(
            recruiter_name=recruiter_name,
            recruiter_email=recruiter_email,
            reason=self.state.reason if self.status is Status.FAILED else None,
        )
        try:
            result = await self._gateway.notify(self.candidate.id, request)
            if not result.ok:
                raise RemoteFailure(SEND_FAILED)
        except SessionExpired:
            raise
        except RemoteFailure as e:
            logger.warning("Status email for %s failed: %s", self.candidate.id, e.message)
            self.state = states.fail(self.state, e.message or SEND_FAILED)
        else:
            logger.info("Status email sent for %s by %s", self.candidate.id, recruiter_name)
            self.state = states.succeed(self.state, result.preview_ref)
            self._schedule_completion()
        finally:
            if self.state.outcome is Outcome.LOADING:
                self.state = states.fail(self.state, SEND_FAILED)
        return self.state

    def close(self) -> WorkflowState:
        """
        Close the dialog and reset every transient field.

        Refused while a call is in flight. A completion already scheduled
        by a success still runs, so the owning view is resynced exactly once.
        """
        if self.state.outcome is Outcome.LOADING:
            logger.debug("Workflow %s: close ignored while loading", self.candidate.id)
            return self.state
        self.state = states.closed()
        return self.state

    async def wait_closed(self) -> None:
        """Wait for a scheduled auto-close (and its callbacks) to finish."""
        if self._completion is not None:
            await self._completion

    # ── Internals ────────────────────────────────────────────────────────────

    def _ignored(self, action: str) -> bool:
        if self.state.busy:
            logger.debug("Workflow %s: %s ignored while %s", self.candidate.id, action, self.state.outcome.value)
            return True
        return False

    async def _delete(self) -> WorkflowState:
        self.state = states.begin_delete(self.state)
        try:
            await self._gateway.remove(self.candidate.id)
        except SessionExpired:
            raise
        except RemoteFailure as e:
            logger.warning("Delete of %s failed: %s", self.candidate.id, e.message)
            self.state = states.fail(self.state, e.message or DELETE_FAILED)
        else:
            logger.info("Candidate %s deleted", self.candidate.id)
            self.state = states.succeed(self.state)
            self._schedule_completion()
        finally:
            if self.state.outcome is Outcome.LOADING:
                self.state = states.fail(self.state, DELETE_FAILED)
        return self.state

    def _schedule_completion(self) -> None:
        self._completion = asyncio.create_task(self._complete())

    async def _complete(self) -> None:
        await asyncio.sleep(self.auto_close_delay)
        self.state = states.closed()
        try:
            if self.mode is WorkflowMode.DELETE:
                await run_callback(self._on_navigate_away)
            await run_callback(self._on_resync)
        except RemoteFailure as e:
            logger.warning("Resync after workflow on %s failed: %s", self.candidate.id, e.message)
