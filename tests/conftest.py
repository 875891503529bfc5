"""Shared fixtures: candidate record factory and a mocked gateway."""
from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from smartrecruit.config import get_settings
from smartrecruit.models.candidate import CandidateRecord
from smartrecruit.models.email import NotifyResult
from smartrecruit.services.api_client import HttpCandidateGateway


def make_record(i: int = 1, **overrides) -> CandidateRecord:
    data = {
        "_id": f"cand-{i}",
        "name": f"Candidate {i}",
        "email": f"candidate{i}@example.com",
        "test_link": f"https://tests.example.com/{i}",
        "stage": "Stage 1",
        "status": "Pending",
        "timestamp": "2025-03-01T10:00:00Z",
        "skills": ["Python"],
    }
    data.update(overrides)
    return CandidateRecord.model_validate(data)


def make_records(n: int) -> list[CandidateRecord]:
    return [make_record(i) for i in range(1, n + 1)]


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch, tmp_path):
    """Keep tests away from the developer's .env and home directory."""
    monkeypatch.setenv("SESSION_PATH", str(tmp_path / "session.json"))
    monkeypatch.setenv("LOG_FILE", str(tmp_path / "logs" / "test.log"))
    monkeypatch.setenv("API_URL", "http://backend.test/api/v1")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def gateway() -> AsyncMock:
    gw = AsyncMock(spec=HttpCandidateGateway)
    gw.list.return_value = []
    gw.search.return_value = []
    gw.update.return_value = None
    gw.remove.return_value = None
    gw.notify.return_value = NotifyResult(ok=True, preview_ref="https://preview.test/msg/1")
    return gw
