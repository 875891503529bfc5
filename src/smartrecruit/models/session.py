"""
Logged-in session. Built from the /auth/login response and handed to the
HTTP gateway at construction; nothing reads it from ambient storage.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class Session(BaseModel):
    user_id: str
    username: str
    is_admin: bool = False
    token: str
    logged_in: bool = True

    @classmethod
    def from_login_response(cls, body: dict) -> "Session":
        user = body.get("user") or {}
        return cls(
            user_id=str(user.get("_id", "")),
            username=user.get("username", ""),
            is_admin=bool(user.get("isAdmin", False)),
            token=body.get("token", ""),
        )

    @property
    def authorization(self) -> Optional[str]:
        return f"Bearer {self.token}" if self.token else None
