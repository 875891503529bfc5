"""Pipeline position (Stage) and outcome classification (Status) of a candidate."""
from __future__ import annotations

from enum import Enum


class Stage(str, Enum):
    STAGE_1 = "Stage 1"
    STAGE_2 = "Stage 2"

    def toggled(self) -> "Stage":
        """Next stage in pipeline order, wrapping back to the first."""
        members = list(Stage)
        return members[(members.index(self) + 1) % len(members)]


class Status(str, Enum):
    PENDING = "Pending"
    PASSED  = "Passed"
    FAILED  = "Failed"

    @property
    def is_terminal(self) -> bool:
        return self is not Status.PENDING
