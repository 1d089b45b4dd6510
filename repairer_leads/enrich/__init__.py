"""Enrichment stages applied to candidate repairers."""

from .classifier import CandidateClassifier
from .enhancer import CandidateEnricher
from .validator import CandidateValidator
from .geocoder import Geocoder
from .llm_client import ChatCompletionClient, ProviderError, extract_json

__all__ = [
    "CandidateClassifier",
    "CandidateEnricher",
    "CandidateValidator",
    "Geocoder",
    "ChatCompletionClient",
    "ProviderError",
    "extract_json",
]
