"""
Remote candidate gateway: the boundary between the client core and the
backend.

Every operation either returns its result or raises RemoteFailure with a
human-readable message. Callers never retry; a failure is surfaced once to
whatever action triggered it.
"""
from __future__ import annotations

from typing import Any, Optional, Protocol

from smartrecruit.models.candidate import CandidateCreate, CandidateRecord
from smartrecruit.models.email import NotifyRequest, NotifyResult


class CandidateGateway(Protocol):
    async def list(self) -> list[CandidateRecord]: ...

    async def search(self, query: str) -> list[CandidateRecord]: ...

    async def get(self, candidate_id: str) -> CandidateRecord: ...

    async def create(self, payload: CandidateCreate) -> Optional[CandidateRecord]: ...

    async def update(self, candidate_id: str, partial: dict[str, Any]) -> Optional[CandidateRecord]: ...

    async def remove(self, candidate_id: str) -> None: ...

    async def notify(self, candidate_id: str, request: NotifyRequest) -> NotifyResult: ...
