"""
List views: the full candidates table and the dashboard's recent list.

A list view owns a CandidateStore and a Paginator over it. Every action
follows the same rule: call the gateway first, and only on success feed
the confirmed result to the store. A failed call leaves the store
untouched and sets `error`.

Actions on one record are serialized: while an update for a candidate id
is in flight, further actions on that id are ignored.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager, contextmanager
from typing import Any, AsyncIterator, Iterator, Optional

from smartrecruit.config import get_settings
from smartrecruit.errors import RemoteFailure, SessionExpired
from smartrecruit.models.candidate import CandidateRecord
from smartrecruit.models.pipeline import Stage, Status
from smartrecruit.services.gateway import CandidateGateway
from smartrecruit.views.pagination import Paginator
from smartrecruit.views.store import CandidateStore
from smartrecruit.workflow.status_workflow import StatusTransitionWorkflow, WorkflowMode

logger = logging.getLogger(__name__)


class RecordBusy(Exception):
    """Internal signal: another action on the same record is in flight."""


class CandidatesTableView:
    def __init__(
        self,
        gateway: CandidateGateway,
        *,
        page_size: Optional[int] = None,
        auto_close_delay: Optional[float] = None,
    ):
        self.gateway = gateway
        self.store = CandidateStore()
        self.paginator: Paginator[CandidateRecord] = Paginator(
            page_size or get_settings().candidates_page_size
        )
        self.query = ""
        self.error: Optional[str] = None
        self.auto_close_delay = auto_close_delay
        self._pending: set[str] = set()
        self._active_calls = 0

    # ── Loading / serialization guards ───────────────────────────────────────

    @property
    def loading(self) -> bool:
        """True while any gateway call of this view is in flight."""
        return self._active_calls > 0

    @asynccontextmanager
    async def _loading(self) -> AsyncIterator[None]:
        self._active_calls += 1
        try:
            yield
        finally:
            self._active_calls -= 1

    @contextmanager
    def _in_flight(self, candidate_id: str) -> Iterator[None]:
        if candidate_id in self._pending:
            raise RecordBusy(candidate_id)
        self._pending.add(candidate_id)
        try:
            yield
        finally:
            self._pending.discard(candidate_id)

    def is_pending(self, candidate_id: str) -> bool:
        return candidate_id in self._pending

    def _sync_pages(self) -> None:
        self.paginator.items = self.store.records

    def dismiss_error(self) -> None:
        self.error = None

    # ── Fetching ─────────────────────────────────────────────────────────────

    def _keep(self, records: list[CandidateRecord]) -> list[CandidateRecord]:
        return records

    async def refresh(self) -> bool:
        """Refetch the collection (search when a query is set)."""
        async with self._loading():
            try:
                if self.query:
                    records = await self.gateway.search(self.query)
                else:
                    records = await self.gateway.list()
            except SessionExpired:
                raise
            except RemoteFailure as e:
                logger.warning("Loading candidates failed: %s", e.message)
                self.error = "Failed to load candidates"
                return False

        self.error = None
        self.store.replace_all(self._keep(records))
        self._sync_pages()
        logger.debug("Loaded %d candidate(s) (query=%r)", len(self.store), self.query)
        return True

    async def set_query(self, query: str) -> bool:
        """Change the search text: back to page 1 and fetch again."""
        self.query = query.strip()
        self.paginator.reset()
        return await self.refresh()

    # ── Paging ───────────────────────────────────────────────────────────────

    def visible(self) -> list[CandidateRecord]:
        return self.paginator.visible_page()

    def go_to_page(self, page: int) -> int:
        return self.paginator.go_to(page)

    # ── Mutations ────────────────────────────────────────────────────────────

    async def _update(self, candidate_id: str, partial: dict[str, Any], failure: str) -> bool:
        try:
            with self._in_flight(candidate_id):
                try:
                    async with self._loading():
                        record = await self.gateway.update(candidate_id, partial)
                except SessionExpired:
                    raise
                except RemoteFailure as e:
                    logger.warning("Update of %s failed: %s", candidate_id, e.message)
                    self.error = failure
                    return False
        except RecordBusy:
            logger.warning("Update of %s ignored: previous update still in flight", candidate_id)
            return False

        # Patch with what the backend confirmed, falling back to what was sent
        confirmed = {k: getattr(record, k) for k in partial} if record else partial
        self.store.patch_one(candidate_id, confirmed)
        self._sync_pages()
        return True

    async def update_status(self, candidate_id: str, status: Status) -> Optional[StatusTransitionWorkflow]:
        """
        Set a candidate's status.

        For Passed/Failed, returns the notification workflow bound to the
        updated record; the caller drives it. Returns None otherwise or on
        failure.
        """
        status = Status(status)
        if not await self._update(candidate_id, {"status": status}, "Failed to update status"):
            return None

        updated = self.store.get(candidate_id)
        if updated is None or not status.is_terminal:
            return None
        return self.open_status_workflow(candidate_id)

    async def toggle_stage(self, candidate_id: str) -> bool:
        """Flip Stage 1 ↔ Stage 2. Applied locally only after the update succeeds."""
        record = self.store.get(candidate_id)
        if record is None:
            return False
        new_stage: Stage = record.stage.toggled()
        return await self._update(candidate_id, {"stage": new_stage}, "Failed to update stage")

    def open_status_workflow(self, candidate_id: str) -> Optional[StatusTransitionWorkflow]:
        record = self.store.get(candidate_id)
        if record is None:
            return None
        return StatusTransitionWorkflow(
            record,
            self.gateway,
            on_resync=self.refresh,
            auto_close_delay=self.auto_close_delay,
        )

    def open_delete_workflow(self, candidate_id: str) -> Optional[StatusTransitionWorkflow]:
        record = self.store.get(candidate_id)
        if record is None:
            return None

        def _drop() -> None:
            self.store.remove_one(candidate_id)
            self._sync_pages()

        return StatusTransitionWorkflow(
            record,
            self.gateway,
            mode=WorkflowMode.DELETE,
            on_resync=_drop,
            auto_close_delay=self.auto_close_delay,
        )


class RecentCandidatesView(CandidatesTableView):
    """Dashboard list: only the first few records of the fetch are kept."""

    def __init__(self, gateway: CandidateGateway, *, auto_close_delay: Optional[float] = None):
        super().__init__(
            gateway,
            page_size=get_settings().recent_page_size,
            auto_close_delay=auto_close_delay,
        )

    def _keep(self, records: list[CandidateRecord]) -> list[CandidateRecord]:
        return records[: self.paginator.page_size]

    async def candidate_created(self) -> bool:
        """Called by the new-candidate form after a successful create."""
        return await self.refresh()
