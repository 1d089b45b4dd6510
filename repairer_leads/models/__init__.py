"""Data models for the repairer lead pipeline."""

from .candidate import (
    Candidate,
    RawSearchResult,
    UNKNOWN_ADDRESS,
    UNKNOWN_CITY,
    UNKNOWN_POSTAL_CODE,
)

__all__ = [
    "Candidate",
    "RawSearchResult",
    "UNKNOWN_ADDRESS",
    "UNKNOWN_CITY",
    "UNKNOWN_POSTAL_CODE",
]
