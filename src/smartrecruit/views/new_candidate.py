"""
New-candidate form: field validation, the skills picker, and the create call.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

import pydantic

from smartrecruit.config import get_settings
from smartrecruit.errors import RemoteFailure, SessionExpired, ValidationError
from smartrecruit.models.candidate import CandidateCreate, CandidateRecord
from smartrecruit.services.gateway import CandidateGateway
from smartrecruit.workflow.status_workflow import Callback, run_callback

logger = logging.getLogger(__name__)

COMMON_SKILLS = [
    "JavaScript", "TypeScript", "React", "Angular", "Vue", "Node.js",
    "Express", "MongoDB", "SQL", "PostgreSQL", "MySQL", "Redis", "GraphQL",
    "REST API", "HTML", "CSS", "Sass", "Tailwind CSS", "Bootstrap",
    "Material UI", "Git", "Docker", "Kubernetes", "AWS", "Azure", "Django",
    "Python", "Google Cloud", "CI/CD", "Jest", "Mocha", "Cypress",
    "Testing Library", "Webpack", "Babel", "Next.js", "Gatsby", "Redux",
    "MobX", "MERN", "React Query",
]

_FIELD_MESSAGES = {
    "name": "Full name is required",
    "email": "Valid email is required",
    "test_link": "Valid URL is required",
}


def validate_candidate(
    name: str,
    email: str,
    test_link: str,
    skills: Optional[list[str]] = None,
    notes: Optional[str] = None,
) -> CandidateCreate:
    """
    Build a CandidateCreate or raise ValidationError.

    The error message lists every failing field; `field_errors` on the
    exception maps field name → message.
    """
    try:
        return CandidateCreate(
            name=name,
            email=email,
            test_link=test_link,
            skills=skills or [],
            notes=notes or None,
        )
    except pydantic.ValidationError as e:
        field_errors: dict[str, str] = {}
        for err in e.errors():
            field = str(err["loc"][0]) if err["loc"] else ""
            field_errors.setdefault(field, _FIELD_MESSAGES.get(field, err["msg"]))
        first = next(iter(field_errors), None)
        raise ValidationError("; ".join(field_errors.values()), field=first, field_errors=field_errors) from e


class NewCandidateForm:
    def __init__(
        self,
        gateway: CandidateGateway,
        *,
        on_created: Optional[Callback] = None,
        success_clear_delay: Optional[float] = None,
    ):
        self.gateway = gateway
        self.skills: list[str] = []
        self.skill_input = ""
        self.loading = False
        self.success = False
        self.error: Optional[str] = None
        self.field_errors: dict[str, str] = {}
        self.created: Optional[CandidateRecord] = None
        self._on_created = on_created
        self._success_clear_delay = (
            success_clear_delay if success_clear_delay is not None else get_settings().auto_close_seconds
        )
        self._clear_task: Optional[asyncio.Task] = None

    # ── Skills picker ────────────────────────────────────────────────────────

    def suggest(self, text: str) -> list[str]:
        text = text.strip().lower()
        if not text:
            return []
        return [s for s in COMMON_SKILLS if text in s.lower() and s not in self.skills]

    def add_skill(self, skill: str) -> bool:
        skill = skill.strip()
        if not skill or skill in self.skills:
            return False
        self.skills.append(skill)
        self.skill_input = ""
        return True

    def remove_skill(self, skill: str) -> None:
        self.skills = [s for s in self.skills if s != skill]

    # ── Submit ───────────────────────────────────────────────────────────────

    async def submit(
        self,
        name: str,
        email: str,
        test_link: str,
        notes: Optional[str] = None,
    ) -> bool:
        """
        Validate and create the candidate. Returns True on success.

        `created` holds the new record when the backend sends one back.
        """
        self.error = None
        self.created = None
        self.success = False
        self.field_errors = {}

        try:
            payload = validate_candidate(name, email, test_link, self.skills, notes)
        except ValidationError as e:
            self.field_errors = e.field_errors
            self.error = e.message
            return False

        self.loading = True
        try:
            self.created = await self.gateway.create(payload)
        except SessionExpired:
            raise
        except RemoteFailure as e:
            logger.warning("Creating candidate %s failed: %s", payload.email, e.message)
            self.error = e.message or "Failed to add candidate. Please try again."
            return False
        finally:
            self.loading = False

        logger.info("Candidate %s created", self.created.id if self.created else payload.email)
        self.success = True
        self.skills = []
        self.skill_input = ""
        await run_callback(self._on_created)
        self._clear_task = asyncio.create_task(self._clear_success())
        return True

    async def _clear_success(self) -> None:
        await asyncio.sleep(self._success_clear_delay)
        self.success = False

    async def wait_success_cleared(self) -> None:
        if self._clear_task is not None:
            await self._clear_task
