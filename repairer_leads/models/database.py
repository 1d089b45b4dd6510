"""SQLAlchemy database models and setup."""

import json
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Column,
    Integer,
    String,
    Float,
    Boolean,
    DateTime,
    Text,
    Index,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker

from repairer_leads.config import settings

Base = declarative_base()


class DBRepairer(Base):
    """Stored repairer record, unique per (name, postal_code)."""

    __tablename__ = "repairers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(500), nullable=False)
    postal_code = Column(String(20), nullable=False)
    address = Column(String(1000))
    city = Column(String(255))

    # Contact
    phone = Column(String(50))
    email = Column(String(255))
    website = Column(String(1000))
    description = Column(Text)

    # Location
    lat = Column(Float)
    lng = Column(Float)

    # Enrichment
    confidence_score = Column(Float)
    ai_enriched = Column(Boolean, default=False)
    services = Column(Text)  # JSON array
    specialties = Column(Text)  # JSON array
    price_range = Column(String(20))
    quality_score = Column(Float)
    is_verified = Column(Boolean, default=False)

    # Provenance
    source = Column(String(100))
    scraped_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("name", "postal_code", name="uq_repairer_name_postal_code"),
        Index("idx_repairer_city", "city"),
    )

    def get_services(self) -> list[str]:
        return json.loads(self.services) if self.services else []

    def get_specialties(self) -> list[str]:
        return json.loads(self.specialties) if self.specialties else []


# Database initialization
def init_db(db_url: Optional[str] = None) -> sessionmaker:
    """Initialize database and return session maker."""
    url = db_url or settings.sqlalchemy_url
    engine = create_engine(url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
