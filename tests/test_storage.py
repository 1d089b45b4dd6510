"""Tests for persistence of pipeline results."""

import pytest

from repairer_leads.models.database import init_db
from repairer_leads.storage import (
    RecordStore,
    SQLRepairerStore,
    candidate_to_record,
    persist_candidates,
)

from conftest import make_candidate


@pytest.fixture
def store(tmp_path) -> SQLRepairerStore:
    return SQLRepairerStore(init_db(f"sqlite:///{tmp_path / 'repairers.db'}"))


class FailingStore(RecordStore):
    """Store that rejects selected names."""

    def __init__(self, failing: set[str]):
        self.failing = failing
        self.records = []

    def upsert(self, record):
        if record["name"] in self.failing:
            raise RuntimeError("constraint violation")
        self.records.append(record)


class TestSQLRepairerStore:
    """Tests for the SQLAlchemy upsert store."""

    def test_insert_and_read_back(self, store):
        candidate = make_candidate(
            lat=45.76, lng=4.83, services=["écran"], specialties=["Apple"], validated=True
        )
        store.upsert(candidate_to_record(candidate))

        row = store.get("Phone Doctor", "69002")
        assert row is not None
        assert row.city == "Lyon"
        assert row.lat == 45.76
        assert row.confidence_score == 0.8
        assert row.get_services() == ["écran"]
        assert row.get_specialties() == ["Apple"]
        assert row.is_verified is True
        assert row.source == "multi_ai_pipeline"

    def test_upsert_same_key_last_write_wins(self, store):
        store.upsert(candidate_to_record(make_candidate(phone="0478000000", confidence_score=0.6)))
        store.upsert(candidate_to_record(make_candidate(phone="0478111111", confidence_score=0.9)))

        assert store.count() == 1
        row = store.get("Phone Doctor", "69002")
        assert row.phone == "0478111111"
        assert row.confidence_score == 0.9

    def test_different_keys_create_rows(self, store):
        store.upsert(candidate_to_record(make_candidate(postal_code="69002")))
        store.upsert(candidate_to_record(make_candidate(postal_code="69003")))
        store.upsert(candidate_to_record(make_candidate(name="Atelier Mobile")))
        assert store.count() == 3

    def test_missing_key_rejected(self, store):
        record = candidate_to_record(make_candidate())
        record["name"] = ""
        with pytest.raises(ValueError):
            store.upsert(record)
        assert store.count() == 0


class TestPersistCandidates:
    """Tests for batch persistence."""

    def test_persists_all(self, store):
        candidates = [make_candidate(name=f"Shop {i}") for i in range(3)]
        report = persist_candidates(store, candidates)
        assert report.saved == 3
        assert report.failed == 0
        assert store.count() == 3

    def test_failure_does_not_block_siblings(self):
        store = FailingStore({"Shop 1"})
        candidates = [make_candidate(name=f"Shop {i}") for i in range(3)]

        report = persist_candidates(store, candidates)

        assert report.saved == 2
        assert report.failed == 1
        assert [r["name"] for r in store.records] == ["Shop 0", "Shop 2"]

    def test_rerun_is_idempotent(self, store):
        candidates = [make_candidate(name="Shop A"), make_candidate(name="Shop B")]
        persist_candidates(store, candidates)
        persist_candidates(store, candidates)
        assert store.count() == 2
