"""
In-memory collection of the candidate records shown by one view.

All mutation goes through `dispatch(action)`, which feeds the pure
`reduce()` function. Views only dispatch after a gateway call resolved
successfully, so the store always reflects confirmed backend state.

A patch/remove targeting an id that is not in the collection is a silent
no-op (dispatch returns False).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Union

from smartrecruit.models.candidate import CandidateRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReplaceAll:
    records: list[CandidateRecord]


@dataclass(frozen=True)
class PatchOne:
    candidate_id: str
    partial: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RemoveOne:
    candidate_id: str


StoreAction = Union[ReplaceAll, PatchOne, RemoveOne]


def reduce(records: list[CandidateRecord], action: StoreAction) -> tuple[list[CandidateRecord], bool]:
    """
    Apply `action` to `records` and return (new_records, applied).

    `applied` is False when a PatchOne/RemoveOne target is missing; the
    input list is returned unchanged in that case.
    """
    if isinstance(action, ReplaceAll):
        seen: set[str] = set()
        unique: list[CandidateRecord] = []
        for record in action.records:
            if record.id in seen:
                continue
            seen.add(record.id)
            unique.append(record)
        return unique, True

    if isinstance(action, PatchOne):
        for i, record in enumerate(records):
            if record.id == action.candidate_id:
                patched = list(records)
                patched[i] = record.merged(action.partial)
                return patched, True
        return records, False

    if isinstance(action, RemoveOne):
        remaining = [r for r in records if r.id != action.candidate_id]
        return remaining, len(remaining) != len(records)

    raise TypeError(f"Unknown store action: {action!r}")


class CandidateStore:
    def __init__(self, records: Optional[list[CandidateRecord]] = None):
        self._records: list[CandidateRecord] = []
        if records:
            self.replace_all(records)

    def dispatch(self, action: StoreAction) -> bool:
        self._records, applied = reduce(self._records, action)
        if not applied:
            logger.debug("Store action ignored, record not present: %r", action)
        return applied

    def replace_all(self, records: list[CandidateRecord]) -> None:
        self.dispatch(ReplaceAll(list(records)))

    def patch_one(self, candidate_id: str, partial: dict[str, Any]) -> bool:
        return self.dispatch(PatchOne(candidate_id, dict(partial)))

    def remove_one(self, candidate_id: str) -> bool:
        return self.dispatch(RemoveOne(candidate_id))

    def get(self, candidate_id: str) -> Optional[CandidateRecord]:
        for record in self._records:
            if record.id == candidate_id:
                return record
        return None

    @property
    def records(self) -> list[CandidateRecord]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[CandidateRecord]:
        return iter(list(self._records))

    def __contains__(self, candidate_id: object) -> bool:
        return any(r.id == candidate_id for r in self._records)
