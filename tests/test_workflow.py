"""Tests for the status-update / delete dialog state machine."""
from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from conftest import make_record
from smartrecruit.config import get_settings
from smartrecruit.errors import RemoteFailure, SessionExpired, ValidationError
from smartrecruit.models.email import NotifyRequest, NotifyResult
from smartrecruit.models.pipeline import Status
from smartrecruit.workflow import states
from smartrecruit.workflow.states import InvalidTransition, Outcome, Step, WorkflowState
from smartrecruit.workflow.status_workflow import StatusTransitionWorkflow, WorkflowMode


def _workflow(gateway, status="Failed", **kwargs) -> StatusTransitionWorkflow:
    kwargs.setdefault("auto_close_delay", 0)
    return StatusTransitionWorkflow(make_record(1, status=status), gateway, **kwargs)


# ---------------------------------------------------------------------------
# Pure transitions
# ---------------------------------------------------------------------------

class TestTransitions:
    def test_accept_routes_failed_to_reason(self):
        assert states.accept(states.initial(), Status.FAILED).step is Step.REASON

    @pytest.mark.parametrize("status", [Status.PASSED, Status.PENDING])
    def test_accept_routes_others_to_recruiter(self, status):
        assert states.accept(states.initial(), status).step is Step.RECRUITER

    def test_empty_reason_rejected_for_failed(self):
        s = states.accept(states.initial(), Status.FAILED)
        with pytest.raises(ValidationError) as exc:
            states.submit_reason(s, Status.FAILED, "   ")
        assert exc.value.message == states.REASON_REQUIRED

    def test_blank_recruiter_rejected(self):
        s = states.accept(states.initial(), Status.PASSED)
        with pytest.raises(ValidationError):
            states.begin_send(s, " ")

    def test_wrong_step_raises_invalid_transition(self):
        with pytest.raises(InvalidTransition):
            states.submit_reason(states.initial(), Status.FAILED, "x")
        with pytest.raises(InvalidTransition):
            states.begin_send(states.initial(), "Jane")

    def test_closed_state_has_no_leftovers(self):
        assert states.closed() == WorkflowState(step=Step.CLOSED)

    def test_single_outcome_means_busy_is_exclusive(self):
        s = states.begin_send(states.accept(states.initial(), Status.PASSED), "Jane")
        assert s.outcome is Outcome.LOADING and s.busy
        s = states.succeed(s, "ref")
        assert s.outcome is Outcome.SUCCEEDED and s.busy
        assert states.fail(s, "boom").busy is False


# ---------------------------------------------------------------------------
# Notify mode
# ---------------------------------------------------------------------------

class TestNotifyWorkflow:
    def test_decline_at_confirm_makes_no_calls(self, gateway):
        wf = _workflow(gateway, status="Failed")

        wf.decline()

        assert wf.step is Step.CLOSED
        assert not wf.is_open
        gateway.notify.assert_not_called()
        gateway.remove.assert_not_called()
        gateway.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_failed_goes_through_reason(self, gateway):
        wf = _workflow(gateway, status="Failed")

        await wf.accept()
        assert wf.step is Step.REASON

        wf.submit_reason("")
        assert wf.step is Step.REASON
        assert wf.error == "Please provide a reason for the failure"

        wf.submit_reason("Did not finish the test")
        assert wf.step is Step.RECRUITER
        assert wf.error is None
        assert wf.state.reason == "Did not finish the test"

    @pytest.mark.asyncio
    async def test_passed_skips_reason(self, gateway):
        wf = _workflow(gateway, status="Passed")
        await wf.accept()
        assert wf.step is Step.RECRUITER

    @pytest.mark.asyncio
    async def test_empty_recruiter_name_stays_without_calls(self, gateway):
        wf = _workflow(gateway, status="Passed")
        await wf.accept()

        await wf.send("", "r@example.com")

        assert wf.step is Step.RECRUITER
        assert wf.error == "Please provide your name"
        assert wf.outcome is Outcome.IDLE
        gateway.notify.assert_not_called()

    @pytest.mark.asyncio
    async def test_success_auto_closes_and_resyncs_once(self, gateway):
        resync = AsyncMock()
        wf = _workflow(gateway, status="Failed", on_resync=resync)
        await wf.accept()
        wf.submit_reason("Weak on SQL")

        await wf.send("Jane Recruiter", "jane@corp.test")

        assert wf.outcome is Outcome.SUCCEEDED
        assert wf.inputs_disabled is True
        assert wf.state.preview_ref == "https://preview.test/msg/1"
        gateway.notify.assert_awaited_once_with(
            "cand-1",
            NotifyRequest(recruiter_name="Jane Recruiter", recruiter_email="jane@corp.test", reason="Weak on SQL"),
        )

        await wf.wait_closed()

        assert wf.state == states.closed()
        resync.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_dialog_stays_open_until_delay_elapses(self, gateway):
        resync = AsyncMock()
        wf = _workflow(gateway, status="Passed", on_resync=resync, auto_close_delay=0.05)
        await wf.accept()

        await wf.send("Jane")

        assert wf.is_open
        assert wf.step is Step.RECRUITER
        assert wf.outcome is Outcome.SUCCEEDED
        resync.assert_not_awaited()

        await wf.wait_closed()

        assert not wf.is_open
        assert wf.state == states.closed()
        resync.assert_awaited_once()

    def test_auto_close_delay_defaults_to_three_seconds(self, gateway, monkeypatch):
        monkeypatch.delenv("AUTO_CLOSE_SECONDS", raising=False)
        get_settings.cache_clear()

        wf = StatusTransitionWorkflow(make_record(1, status="Passed"), gateway)

        assert wf.auto_close_delay == 3.0

    @pytest.mark.asyncio
    async def test_reason_not_sent_unless_failed(self, gateway):
        wf = _workflow(gateway, status="Passed")
        await wf.accept()
        await wf.send("Jane")

        request = gateway.notify.await_args.args[1]
        assert request.reason is None
        assert "reason" not in request.to_payload()
        await wf.wait_closed()

    @pytest.mark.asyncio
    async def test_sync_resync_callback_is_supported(self, gateway):
        resync = MagicMock(return_value=None)
        wf = _workflow(gateway, status="Passed", on_resync=resync)
        await wf.accept()
        await wf.send("Jane")
        await wf.wait_closed()
        resync.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_remote_failure_stays_for_retry(self, gateway):
        gateway.notify.side_effect = RemoteFailure("SMTP unavailable", status_code=502)
        resync = AsyncMock()
        wf = _workflow(gateway, status="Passed", on_resync=resync)
        await wf.accept()

        await wf.send("Jane")

        assert wf.step is Step.RECRUITER
        assert wf.outcome is Outcome.FAILED
        assert wf.error == "SMTP unavailable"
        assert wf.inputs_disabled is False

        gateway.notify.side_effect = None
        await wf.send("Jane")
        assert wf.outcome is Outcome.SUCCEEDED
        await wf.wait_closed()
        resync.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_not_ok_result_uses_generic_message(self, gateway):
        gateway.notify.return_value = NotifyResult(ok=False)
        wf = _workflow(gateway, status="Passed")
        await wf.accept()
        await wf.send("Jane")
        assert wf.outcome is Outcome.FAILED
        assert wf.error == "Failed to send email"

    @pytest.mark.asyncio
    async def test_session_expiry_propagates_and_clears_loading(self, gateway):
        gateway.notify.side_effect = SessionExpired("Session expired", status_code=401)
        wf = _workflow(gateway, status="Passed")
        await wf.accept()

        with pytest.raises(SessionExpired):
            await wf.send("Jane")
        assert wf.outcome is Outcome.FAILED

    @pytest.mark.asyncio
    async def test_cancel_resets_transient_fields(self, gateway):
        wf = _workflow(gateway, status="Failed")
        await wf.accept()
        wf.submit_reason("Late")
        await wf.send("")

        wf.close()

        assert wf.state == WorkflowState(step=Step.CLOSED)

    @pytest.mark.asyncio
    async def test_inputs_ignored_after_success(self, gateway):
        wf = _workflow(gateway, status="Passed")
        await wf.accept()
        await wf.send("Jane")

        await wf.send("Jane again")
        await wf.accept()

        assert gateway.notify.await_count == 1
        assert wf.outcome is Outcome.SUCCEEDED
        await wf.wait_closed()


# ---------------------------------------------------------------------------
# Delete mode
# ---------------------------------------------------------------------------

class TestDeleteWorkflow:
    @pytest.mark.asyncio
    async def test_accept_deletes_directly(self, gateway):
        navigate = MagicMock(return_value=None)
        resync = MagicMock(return_value=None)
        wf = _workflow(gateway, mode=WorkflowMode.DELETE, on_navigate_away=navigate, on_resync=resync)

        await wf.accept()

        assert wf.outcome is Outcome.SUCCEEDED
        assert wf.step is Step.CONFIRM
        gateway.remove.assert_awaited_once_with("cand-1")
        gateway.notify.assert_not_called()

        await wf.wait_closed()
        assert not wf.is_open
        navigate.assert_called_once_with()
        resync.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_failure_keeps_dialog_open(self, gateway):
        gateway.remove.side_effect = RemoteFailure("Candidate is locked")
        resync = MagicMock(return_value=None)
        wf = _workflow(gateway, mode=WorkflowMode.DELETE, on_resync=resync)

        await wf.accept()

        assert wf.is_open
        assert wf.step is Step.CONFIRM
        assert wf.outcome is Outcome.FAILED
        assert wf.error == "Candidate is locked"
        await wf.wait_closed()
        resync.assert_not_called()

    def test_decline_makes_no_calls(self, gateway):
        wf = _workflow(gateway, mode=WorkflowMode.DELETE)
        wf.decline()
        assert not wf.is_open
        gateway.remove.assert_not_called()
