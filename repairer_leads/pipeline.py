"""Multi-provider lead sourcing pipeline."""

import logging
from typing import Optional

import httpx

from repairer_leads.config import ProviderKeys
from repairer_leads.connectors import SearchConnector, SerperConnector
from repairer_leads.enrich import (
    CandidateClassifier,
    CandidateEnricher,
    CandidateValidator,
    Geocoder,
)
from repairer_leads.models import Candidate
from repairer_leads.throttle import Throttle

logger = logging.getLogger(__name__)

PIPELINE_STEPS = ["serper", "deepseek", "mistral", "perplexity", "geocoding"]


class Pipeline:
    """Search, classify, enrich, validate and geocode repairer candidates.

    Each stage is a list-to-list transformation run item by item; a missing
    credential degrades its stage instead of failing the run, except for the
    search key which is mandatory.
    """

    def __init__(
        self,
        keys: ProviderKeys,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        throttle: Optional[Throttle] = None,
        validation_limit: Optional[int] = None,
        connector: Optional[SearchConnector] = None,
    ):
        self.keys = keys
        self.connector = connector or SerperConnector(keys.search_key, client=http_client)
        self.classifier = CandidateClassifier(keys.classifier_key, client=http_client)
        self.enricher = CandidateEnricher(keys.enricher_key, client=http_client)
        self.validator = CandidateValidator(
            keys.validator_key,
            client=http_client,
            limit=validation_limit,
        )
        self.geocoder = Geocoder(client=http_client, throttle=throttle)

    def ai_apis_used(self) -> dict[str, bool]:
        return {
            "serper": bool(self.keys.search_key),
            "deepseek": bool(self.keys.classifier_key),
            "mistral": bool(self.keys.enricher_key),
            "perplexity": bool(self.keys.validator_key),
        }

    async def run(self, search_term: str, location: str) -> list[Candidate]:
        """Execute every stage in order and return the final candidates."""
        logger.info(f"Starting pipeline: '{search_term}' in '{location}'")

        # Phase 1: Search
        raw_results = await self.connector.search(search_term, location)
        logger.info(f"Search returned {len(raw_results)} raw results")

        # Phase 2: Classification
        candidates = await self.classifier.classify(raw_results, location)
        logger.info(f"{len(candidates)} candidates after classification")

        # Phase 3: Enrichment
        candidates = await self.enricher.enrich(candidates)
        logger.info(f"{len(candidates)} candidates after enrichment")

        # Phase 4: Validation
        candidates = await self.validator.validate(candidates)
        logger.info(f"{len(candidates)} candidates after validation")

        # Phase 5: Geocoding
        candidates = await self.geocoder.geocode(candidates)

        logger.info(f"Pipeline finished: {len(candidates)} final results")
        return candidates
