"""Candidate repairer models."""

from typing import Optional
from pydantic import BaseModel, Field

UNKNOWN_ADDRESS = "Adresse à préciser"
UNKNOWN_CITY = "Ville à préciser"
UNKNOWN_POSTAL_CODE = "00000"


class RawSearchResult(BaseModel):
    """An organic result returned by the search provider."""

    title: str = ""
    snippet: str = ""
    link: str = ""

    @property
    def text(self) -> str:
        return f"{self.title} {self.snippet}"


class Candidate(BaseModel):
    """A prospective repair business progressively enriched by the pipeline."""

    name: str = Field(description="Business name")
    address: str = Field(default=UNKNOWN_ADDRESS, description="Street address")
    city: str = Field(default=UNKNOWN_CITY)
    postal_code: str = Field(default=UNKNOWN_POSTAL_CODE)
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None

    # Set by geocoding only
    lat: Optional[float] = None
    lng: Optional[float] = None

    confidence_score: Optional[float] = Field(
        default=None,
        ge=0.0,
        le=1.0,
        description="Heuristic trust value combining classification, enrichment and validation",
    )
    ai_enriched: bool = False
    source: str = Field(description="Stage or path that produced this record")

    # Enrichment details
    services: list[str] = Field(default_factory=list)
    specialties: list[str] = Field(default_factory=list)
    price_range: Optional[str] = None
    quality_score: Optional[float] = Field(default=None, ge=0.0, le=10.0)
    validated: Optional[bool] = None

    @property
    def is_geocoded(self) -> bool:
        return self.lat is not None and self.lng is not None

    @property
    def full_address(self) -> str:
        return f"{self.address}, {self.postal_code} {self.city}"
