"""
Status-update email data: the history entries stored on a candidate and
the request/response of the send-email call.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from smartrecruit.models.pipeline import Stage, Status


class EmailEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    date: datetime
    type: str
    recruiter_name: str = Field(alias="recruiterName")
    status: Status
    stage: Stage
    reason: Optional[str] = None

    @model_validator(mode="after")
    def _reason_only_on_failure(self) -> "EmailEvent":
        # A reason only ever accompanies a Failed email
        if self.status is not Status.FAILED:
            self.reason = None
        return self


class NotifyRequest(BaseModel):
    """Body of POST /candidates/:id/send-email."""
    model_config = ConfigDict(populate_by_name=True)

    recruiter_name: str = Field(alias="recruiterName")
    recruiter_email: str = Field(default="", alias="recruiterEmail")
    reason: Optional[str] = None

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class NotifyResult(BaseModel):
    ok: bool
    preview_ref: Optional[str] = None
