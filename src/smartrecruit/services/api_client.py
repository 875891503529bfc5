"""
HTTP implementation of the candidate gateway.

Every backend response is an envelope:

    {"success": bool, "data": ..., "message": "..."}

`success: false` is a failure whatever the HTTP status. Transport errors,
non-2xx statuses and unparseable bodies are all translated into
RemoteFailure at this boundary; HTTP 401 becomes SessionExpired.

A fresh httpx.AsyncClient is opened per call. `transport` lets tests plug
in an httpx.MockTransport.
"""
from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx
import pydantic

from smartrecruit.config import get_settings
from smartrecruit.errors import RemoteFailure, SessionExpired
from smartrecruit.models.candidate import CandidateCreate, CandidateRecord
from smartrecruit.models.email import NotifyRequest, NotifyResult
from smartrecruit.models.session import Session

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Envelope handling
# ---------------------------------------------------------------------------


async def _call(
    method: str,
    path: str,
    *,
    fallback: str,
    base_url: str,
    timeout: float,
    headers: Optional[dict[str, str]] = None,
    json: Any = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> dict:
    """Send one request and return the unwrapped success envelope."""
    logger.debug("%s %s", method, path)

    async with httpx.AsyncClient(
        base_url=base_url,
        timeout=timeout,
        headers={"Content-Type": "application/json", **(headers or {})},
        transport=transport,
    ) as client:
        try:
            resp = await client.request(method, path, json=json)
        except httpx.TimeoutException as e:
            logger.warning("%s %s timed out: %s", method, path, e)
            raise RemoteFailure(f"Request timed out: {e}") from e
        except httpx.RequestError as e:
            logger.warning("%s %s network error: %s", method, path, e)
            raise RemoteFailure(f"Network error: {e}") from e

    try:
        body = resp.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        body = {}

    message = body.get("message") or fallback

    if resp.status_code == 401:
        logger.warning("%s %s rejected: session expired", method, path)
        raise SessionExpired(body.get("message") or "Session expired", status_code=401)
    if resp.is_error or not body.get("success"):
        logger.warning("%s %s failed (HTTP %s): %s", method, path, resp.status_code, message)
        raise RemoteFailure(message, status_code=resp.status_code)

    return body


def _record(data: Any, failure: str) -> CandidateRecord:
    try:
        return CandidateRecord.model_validate(data)
    except pydantic.ValidationError as e:
        logger.warning("Malformed candidate in response: %s", e)
        raise RemoteFailure(failure) from e


def _records(body: dict, failure: str = "Failed to load candidates") -> list[CandidateRecord]:
    data = body.get("data") or []
    if not isinstance(data, list):
        raise RemoteFailure(failure)
    return [_record(item, failure) for item in data]


# ---------------------------------------------------------------------------
# Gateway
# ---------------------------------------------------------------------------


class HttpCandidateGateway:
    """CandidateGateway backed by the REST API."""

    def __init__(
        self,
        session: Optional[Session] = None,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.session = session
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self._transport = transport

    async def _request(self, method: str, path: str, *, fallback: str, json: Any = None) -> dict:
        headers = {}
        if self.session and self.session.authorization:
            headers["Authorization"] = self.session.authorization
        return await _call(
            method,
            path,
            fallback=fallback,
            base_url=self.base_url,
            timeout=self.timeout,
            headers=headers,
            json=json,
            transport=self._transport,
        )

    async def list(self) -> list[CandidateRecord]:
        body = await self._request("GET", "/candidates", fallback="Failed to load candidates")
        return _records(body)

    async def search(self, query: str) -> list[CandidateRecord]:
        path = f"/candidates/search/{quote(query, safe='')}"
        body = await self._request("GET", path, fallback="Failed to load candidates")
        return _records(body)

    async def get(self, candidate_id: str) -> CandidateRecord:
        body = await self._request(
            "GET", f"/candidates/{candidate_id}", fallback="Failed to load candidate details"
        )
        if not body.get("data"):
            raise RemoteFailure("Failed to load candidate details")
        return _record(body["data"], "Failed to load candidate details")

    async def create(self, payload: CandidateCreate) -> Optional[CandidateRecord]:
        body = await self._request(
            "POST", "/candidates", fallback="Failed to add candidate", json=payload.to_payload()
        )
        # The record is optional in the reply; success alone means it was created
        data = body.get("data")
        if isinstance(data, dict) and data.get("_id"):
            return _record(data, "Failed to add candidate")
        return None

    async def update(self, candidate_id: str, partial: dict[str, Any]) -> Optional[CandidateRecord]:
        body = await self._request(
            "PUT",
            f"/candidates/{candidate_id}",
            fallback="Failed to update candidate",
            json={k: getattr(v, "value", v) for k, v in partial.items()},
        )
        # Some backend versions answer with just {success: true}
        data = body.get("data")
        if isinstance(data, dict) and data.get("_id"):
            return _record(data, "Failed to update candidate")
        return None

    async def remove(self, candidate_id: str) -> None:
        await self._request(
            "DELETE", f"/candidates/{candidate_id}", fallback="Failed to delete candidate"
        )

    async def notify(self, candidate_id: str, request: NotifyRequest) -> NotifyResult:
        body = await self._request(
            "POST",
            f"/candidates/{candidate_id}/send-email",
            fallback="Failed to send email",
            json=request.to_payload(),
        )
        data = body.get("data") if isinstance(body.get("data"), dict) else {}
        preview = body.get("emailPreview") or data.get("emailPreview")
        return NotifyResult(ok=True, preview_ref=preview or None)


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------


async def login(
    username: str,
    password: str,
    *,
    base_url: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Session:
    """
    Authenticate against /auth/login and return the new Session.

    Raises:
        RemoteFailure: on bad credentials or any transport problem.
    """
    settings = get_settings()
    try:
        body = await _call(
            "POST",
            "/auth/login",
            fallback="Invalid username or password",
            base_url=(base_url or settings.api_url).rstrip("/"),
            timeout=settings.request_timeout,
            json={"username": username, "password": password},
            transport=transport,
        )
    except SessionExpired as e:
        # 401 here means bad credentials, not an expired token
        raise RemoteFailure("Invalid username or password", status_code=401) from e
    session = Session.from_login_response(body)
    logger.info("Logged in as %s", session.username)
    return session
