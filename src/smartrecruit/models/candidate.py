"""
Candidate data models.

CandidateRecord mirrors what the backend returns (Mongo-style `_id`,
snake/camel mixed keys). CandidateCreate is the validated payload of the
new-candidate form.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    HttpUrl,
    field_validator,
)

from smartrecruit.models.email import EmailEvent
from smartrecruit.models.pipeline import Stage, Status

# Fields that identify a record; a patch never overwrites them
IMMUTABLE_FIELDS = frozenset({"id", "created_at"})


def _unique(values: list[str]) -> list[str]:
    """Drop blanks and duplicates, keeping first-seen order."""
    seen: list[str] = []
    for v in values:
        v = v.strip()
        if v and v not in seen:
            seen.append(v)
    return seen


class CandidateRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(alias="_id")
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    test_link: str = ""
    stage: Stage = Stage.STAGE_1
    status: Status = Status.PENDING
    notes: Optional[str] = None
    skills: list[str] = []
    created_at: Optional[datetime] = Field(default=None, alias="timestamp")
    email_history: list[EmailEvent] = Field(default=[], alias="emailHistory")

    @field_validator("skills")
    @classmethod
    def _dedupe_skills(cls, v: list[str]) -> list[str]:
        return _unique(v)

    def merged(self, partial: dict[str, Any]) -> "CandidateRecord":
        """
        Return a copy with `partial` merged in and re-validated.

        Keys may use either field names or wire aliases. `id` and
        `created_at` are never replaced.
        """
        data = self.model_dump()
        for key, value in partial.items():
            name = _FIELD_BY_ALIAS.get(key, key)
            if name in IMMUTABLE_FIELDS or name not in data:
                continue
            data[name] = value
        return CandidateRecord.model_validate(data)


_FIELD_BY_ALIAS = {
    f.alias: name
    for name, f in CandidateRecord.model_fields.items()
    if f.alias
}


class CandidateCreate(BaseModel):
    """Payload of POST /candidates."""

    name: str
    email: EmailStr
    test_link: HttpUrl
    skills: list[str] = []
    notes: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Full name is required")
        return v

    @field_validator("skills")
    @classmethod
    def _dedupe_skills(cls, v: list[str]) -> list[str]:
        return _unique(v)

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)
