"""Single-candidate view: details, email history, send-status and delete actions."""
from __future__ import annotations

import logging
from typing import Optional

from smartrecruit.errors import RemoteFailure, SessionExpired
from smartrecruit.models.candidate import CandidateRecord
from smartrecruit.services.gateway import CandidateGateway
from smartrecruit.workflow.status_workflow import (
    Callback,
    StatusTransitionWorkflow,
    WorkflowMode,
    run_callback,
)

logger = logging.getLogger(__name__)


class CandidateDetailView:
    def __init__(
        self,
        gateway: CandidateGateway,
        candidate_id: str,
        *,
        on_navigate_away: Optional[Callback] = None,
        auto_close_delay: Optional[float] = None,
    ):
        self.gateway = gateway
        self.candidate_id = candidate_id
        self.candidate: Optional[CandidateRecord] = None
        self.loading = False
        self.error: Optional[str] = None
        # Set once the user has been sent back to the list (after a delete)
        self.navigated_away = False
        self.auto_close_delay = auto_close_delay
        self._on_navigate_away = on_navigate_away

    async def load(self) -> bool:
        self.loading = True
        try:
            self.candidate = await self.gateway.get(self.candidate_id)
            self.error = None
            return True
        except SessionExpired:
            raise
        except RemoteFailure as e:
            logger.warning("Loading candidate %s failed: %s", self.candidate_id, e.message)
            self.error = "Failed to load candidate details"
            return False
        finally:
            self.loading = False

    def open_status_workflow(self) -> Optional[StatusTransitionWorkflow]:
        """'Send Status Email'. The view reloads itself once the email is sent."""
        if self.candidate is None:
            return None
        return StatusTransitionWorkflow(
            self.candidate,
            self.gateway,
            on_resync=self.load,
            auto_close_delay=self.auto_close_delay,
        )

    def open_delete_workflow(self, on_deleted: Optional[Callback] = None) -> Optional[StatusTransitionWorkflow]:
        """
        Delete the candidate. On success the view navigates away, then
        `on_deleted` lets the list that owns the record drop it.
        """
        if self.candidate is None:
            return None
        return StatusTransitionWorkflow(
            self.candidate,
            self.gateway,
            mode=WorkflowMode.DELETE,
            on_navigate_away=self._navigate_away,
            on_resync=on_deleted,
            auto_close_delay=self.auto_close_delay,
        )

    async def _navigate_away(self) -> None:
        logger.debug("Leaving detail view of deleted candidate %s", self.candidate_id)
        self.navigated_away = True
        self.candidate = None
        await run_callback(self._on_navigate_away)
