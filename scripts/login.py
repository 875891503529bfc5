"""
Log in to the SmartRecruit backend and store the session locally.

Usage:
    python scripts/login.py <username>
    python scripts/login.py <username> --password <password>
    python scripts/login.py --logout

The session is written to SESSION_PATH (default ~/.smartrecruit/session.json)
and picked up by scripts/candidates.py.
"""
from __future__ import annotations

import argparse
import asyncio
import getpass
import sys
from pathlib import Path

# Allow running from repo root without installing the package
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from smartrecruit.errors import RemoteFailure
from smartrecruit.services.api_client import login
from smartrecruit.services.storage import clear_session, save_session
from smartrecruit.utils.logger import setup_logger


def _ok(label: str, value: str) -> None:
    print(f"  ✓ {label:<20} {value}")


def _fail(label: str, value: str) -> None:
    print(f"  ✗ {label:<20} {value}")


async def main(username: str, password: str) -> None:
    print(f"\n{'═' * 64}")
    print(f"  SmartRecruit — Login")
    print(f"{'═' * 64}")

    try:
        session = await login(username, password)
    except RemoteFailure as e:
        _fail("Login", e.message)
        sys.exit(1)

    path = save_session(session)
    _ok("Logged in as", session.username + (" (admin)" if session.is_admin else ""))
    _ok("Session saved", str(path))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Log in to the SmartRecruit backend.")
    parser.add_argument("username", nargs="?", help="Account username")
    parser.add_argument("--password", default=None, help="Password (prompted if omitted)")
    parser.add_argument("--logout", action="store_true", help="Forget the stored session")
    args = parser.parse_args()

    setup_logger()

    if args.logout:
        clear_session()
        _ok("Logged out", "session removed")
        sys.exit(0)

    if not args.username:
        parser.error("username is required unless --logout is given")

    password = args.password
    if password is None:
        try:
            password = getpass.getpass("  Password: ")
        except (EOFError, KeyboardInterrupt):
            print("\n  Aborted.")
            sys.exit(0)
    if not args.username.strip() or not password:
        _fail("Input", "Username and password are required")
        sys.exit(1)

    asyncio.run(main(username=args.username, password=password))
