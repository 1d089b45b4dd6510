"""Idempotent persistence of pipeline results."""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import sessionmaker

from repairer_leads.models import Candidate
from repairer_leads.models.database import DBRepairer

logger = logging.getLogger(__name__)

CONFLICT_KEY = ("name", "postal_code")
PERSISTED_SOURCE = "multi_ai_pipeline"

_INSERTS = {
    "sqlite": sqlite_insert,
    "postgresql": pg_insert,
}


class RecordStore(ABC):
    """Record store with upsert on the (name, postal_code) key."""

    @abstractmethod
    def upsert(self, record: dict[str, Any]) -> None:
        pass


class SQLRepairerStore(RecordStore):
    """Repairer store backed by SQLAlchemy; the last write for a key wins."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def upsert(self, record: dict[str, Any]) -> None:
        missing = [key for key in CONFLICT_KEY if not record.get(key)]
        if missing:
            raise ValueError(f"Record is missing conflict key fields: {missing}")

        session = self.session_factory()
        try:
            dialect = session.get_bind().dialect.name
            insert = _INSERTS.get(dialect)
            if insert is None:
                raise NotImplementedError(f"Upsert not supported for dialect '{dialect}'")

            stmt = insert(DBRepairer).values(**record)
            stmt = stmt.on_conflict_do_update(
                index_elements=list(CONFLICT_KEY),
                set_={
                    column: stmt.excluded[column]
                    for column in record
                    if column not in CONFLICT_KEY
                },
            )
            session.execute(stmt)
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get(self, name: str, postal_code: str) -> Optional[DBRepairer]:
        session = self.session_factory()
        try:
            return (
                session.query(DBRepairer)
                .filter_by(name=name, postal_code=postal_code)
                .first()
            )
        finally:
            session.close()

    def count(self) -> int:
        session = self.session_factory()
        try:
            return session.query(DBRepairer).count()
        finally:
            session.close()


@dataclass
class PersistReport:
    """Outcome of a persistence batch."""

    saved: int = 0
    failed: int = 0


def candidate_to_record(candidate: Candidate, scraped_at: Optional[datetime] = None) -> dict[str, Any]:
    """Map a candidate onto a repairers row."""
    return {
        "name": candidate.name,
        "postal_code": candidate.postal_code,
        "address": candidate.address,
        "city": candidate.city,
        "phone": candidate.phone,
        "email": candidate.email,
        "website": candidate.website,
        "description": candidate.description,
        "lat": candidate.lat,
        "lng": candidate.lng,
        "confidence_score": candidate.confidence_score,
        "ai_enriched": candidate.ai_enriched,
        "services": json.dumps(candidate.services),
        "specialties": json.dumps(candidate.specialties),
        "price_range": candidate.price_range,
        "quality_score": candidate.quality_score,
        "is_verified": bool(candidate.validated),
        "source": PERSISTED_SOURCE,
        "scraped_at": scraped_at or datetime.utcnow(),
    }


def persist_candidates(store: RecordStore, candidates: list[Candidate]) -> PersistReport:
    """Upsert each candidate; a failing record never blocks its siblings."""
    report = PersistReport()
    logger.info(f"Saving {len(candidates)} candidates")

    for candidate in candidates:
        try:
            store.upsert(candidate_to_record(candidate))
            report.saved += 1
        except Exception as e:
            logger.error(f"Failed to save {candidate.name}: {e}")
            report.failed += 1

    logger.info(f"Saved {report.saved} candidates, {report.failed} failures")
    return report
