"""
Exception hierarchy shared by the gateway, the views and the workflow.

ValidationError  : bad client-side input; no remote call is made.
RemoteFailure    : the backend answered success:false, a non-2xx status,
                   garbage, or could not be reached at all.
SessionExpired   : HTTP 401; the stored session is no longer valid.

A record missing from a local store is not an error: the store reports
it by returning False.
"""
from __future__ import annotations

from typing import Optional


class SmartRecruitError(Exception):
    """Base class for all client errors."""


class ValidationError(SmartRecruitError):
    """Raised when user input is rejected before any remote call."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        field_errors: Optional[dict[str, str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.field = field
        self.field_errors = field_errors or ({field: message} if field else {})


class RemoteFailure(SmartRecruitError):
    """Raised when a backend call fails for any reason."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class SessionExpired(RemoteFailure):
    """Raised on HTTP 401."""
