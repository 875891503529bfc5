"""Tests for the candidate collection store and its reducer."""
from __future__ import annotations

import pytest

from conftest import make_record, make_records
from smartrecruit.models.pipeline import Stage, Status
from smartrecruit.views.store import CandidateStore, PatchOne, RemoveOne, ReplaceAll, reduce


# ---------------------------------------------------------------------------
# reduce()
# ---------------------------------------------------------------------------

def test_reduce_replace_all_keeps_first_of_duplicate_ids():
    first = make_record(1, name="First")
    dup = make_record(1, name="Duplicate")
    records, applied = reduce([], ReplaceAll([first, make_record(2), dup]))

    assert applied is True
    assert [r.id for r in records] == ["cand-1", "cand-2"]
    assert records[0].name == "First"


def test_reduce_patch_missing_id_is_noop():
    before = make_records(3)
    after, applied = reduce(before, PatchOne("nope", {"status": "Passed"}))

    assert applied is False
    assert after is before


def test_reduce_remove_missing_id_is_noop():
    before = make_records(2)
    after, applied = reduce(before, RemoveOne("nope"))

    assert applied is False
    assert [r.id for r in after] == ["cand-1", "cand-2"]


def test_reduce_does_not_mutate_input_list():
    before = make_records(3)
    reduce(before, PatchOne("cand-2", {"status": "Failed"}))
    reduce(before, RemoveOne("cand-2"))

    assert [r.status for r in before] == [Status.PENDING] * 3
    assert len(before) == 3


def test_reduce_rejects_unknown_action():
    with pytest.raises(TypeError):
        reduce([], object())


# ---------------------------------------------------------------------------
# CandidateStore
# ---------------------------------------------------------------------------

def test_patch_one_changes_exactly_one_field_of_one_record():
    records = make_records(5)
    store = CandidateStore(records)

    assert store.patch_one("cand-3", {"status": "Passed"}) is True

    after = store.records
    assert [r.id for r in after] == [r.id for r in records]
    for old, new in zip(records, after):
        if new.id == "cand-3":
            assert new.status is Status.PASSED
            assert new.model_dump(exclude={"status"}) == old.model_dump(exclude={"status"})
        else:
            assert new == old


def test_patch_one_accepts_wire_aliases_and_enums():
    store = CandidateStore([make_record(1)])
    store.patch_one("cand-1", {"stage": Stage.STAGE_2, "test_link": "https://x.test/a"})

    record = store.get("cand-1")
    assert record.stage is Stage.STAGE_2
    assert record.test_link == "https://x.test/a"


def test_patch_one_never_overwrites_identity():
    store = CandidateStore([make_record(1)])
    created = store.get("cand-1").created_at

    store.patch_one("cand-1", {"_id": "other", "id": "other", "timestamp": "2030-01-01T00:00:00Z"})

    record = store.get("cand-1")
    assert record is not None
    assert record.created_at == created
    assert "other" not in store


def test_patch_one_missing_id_returns_false():
    store = CandidateStore(make_records(2))
    assert store.patch_one("cand-9", {"status": "Passed"}) is False
    assert all(r.status is Status.PENDING for r in store)


def test_remove_one_preserves_order():
    store = CandidateStore(make_records(4))

    assert store.remove_one("cand-2") is True
    assert [r.id for r in store] == ["cand-1", "cand-3", "cand-4"]
    assert store.remove_one("cand-2") is False


def test_replace_all_resets_collection():
    store = CandidateStore(make_records(3))
    store.replace_all([make_record(7)])

    assert len(store) == 1
    assert "cand-7" in store
    assert "cand-1" not in store


def test_records_is_a_copy():
    store = CandidateStore(make_records(2))
    snapshot = store.records
    snapshot.clear()
    assert len(store) == 2
