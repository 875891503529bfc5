"""Tests for session persistence."""
from __future__ import annotations

import json

from smartrecruit.models.session import Session
from smartrecruit.services.storage import clear_session, load_session, save_session, session_file


def _session(**overrides) -> Session:
    data = {"user_id": "u-1", "username": "alice", "token": "tok-123"}
    data.update(overrides)
    return Session(**data)


def test_session_file_follows_settings(tmp_path):
    assert session_file() == tmp_path / "session.json"


def test_save_then_load(tmp_path):
    path = save_session(_session(is_admin=True))

    assert path == tmp_path / "session.json"
    assert json.loads(path.read_text(encoding="utf-8"))["username"] == "alice"

    loaded = load_session()
    assert loaded == _session(is_admin=True)


def test_save_creates_parent_directories(tmp_path):
    path = tmp_path / "nested" / "dir" / "session.json"
    save_session(_session(), path)
    assert load_session(path).token == "tok-123"


def test_missing_file_loads_none():
    assert load_session() is None


def test_corrupt_file_is_discarded(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{not json", encoding="utf-8")

    assert load_session() is None
    assert not path.exists()


def test_incomplete_file_is_discarded(tmp_path):
    path = tmp_path / "session.json"
    path.write_text(json.dumps({"username": "alice"}), encoding="utf-8")

    assert load_session() is None
    assert not path.exists()


def test_logged_out_session_is_discarded():
    path = save_session(_session(logged_in=False))
    assert load_session() is None
    assert not path.exists()


def test_clear_is_idempotent():
    path = save_session(_session())
    clear_session()
    clear_session()
    assert not path.exists()
