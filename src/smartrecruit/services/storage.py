"""
Simple JSON file storage for the logged-in Session.

The session is saved to settings.session_path (default
~/.smartrecruit/session.json). The file is human-readable and can be
inspected or deleted directly; deleting it logs the user out.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from smartrecruit.config import get_settings
from smartrecruit.models.session import Session

logger = logging.getLogger(__name__)


def session_file() -> Path:
    return Path(get_settings().session_path).expanduser()


def save_session(session: Session, path: Optional[Path] = None) -> Path:
    """Persist a Session to a JSON file and return the file path."""
    path = path or session_file()
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(session.model_dump(mode="json"), f, indent=2, ensure_ascii=False)

    return path


def load_session(path: Optional[Path] = None) -> Optional[Session]:
    """
    Load the stored Session, or None if there is none.

    A corrupt or logged-out session file is removed, the same as an
    expired one.
    """
    path = path or session_file()
    if not path.exists():
        return None

    try:
        with open(path, encoding="utf-8") as f:
            session = Session(**json.load(f))
    except (ValueError, TypeError) as e:
        logger.warning("Discarding invalid session file %s: %s", path, e)
        clear_session(path)
        return None

    if not session.logged_in or not session.token:
        clear_session(path)
        return None
    return session


def clear_session(path: Optional[Path] = None) -> None:
    """Remove the stored session, if any."""
    path = path or session_file()
    path.unlink(missing_ok=True)
