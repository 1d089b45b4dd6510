"""Description and quality enrichment with Mistral."""

import logging
from typing import Any, Optional

import httpx

from repairer_leads.config import settings
from repairer_leads.models import Candidate
from .llm_client import ChatCompletionClient, ProviderError

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.5
DEFAULT_QUALITY = 5.0
PRICE_RANGES = ("low", "medium", "high")


class CandidateEnricher:
    """Improve candidate descriptions and refine their confidence score.

    Never removes a candidate: any failure passes it through unchanged.
    """

    ENRICHMENT_PROMPT = """
Enrichis ces informations de réparateur avec des détails supplémentaires:

Nom: {name}
Adresse: {address}
Ville: {city}
Description: {description}

Améliore et complète au format JSON:
{{
  "enhanced_description": "description enrichie",
  "services": ["service1", "service2"],
  "specialties": ["marque1", "marque2"],
  "price_range": "low|medium|high",
  "quality_score": number (0-10)
}}
"""

    def __init__(
        self,
        api_key: str = "",
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.llm = ChatCompletionClient(
            name="Mistral",
            api_key=api_key,
            url=settings.mistral_url,
            model=settings.mistral_model,
            temperature=0.3,
            max_tokens=400,
            client=client,
        )

    async def enrich(self, candidates: list[Candidate]) -> list[Candidate]:
        """Enrich each candidate in order."""
        if not self.llm.available:
            logger.warning("MISTRAL_API_KEY not set, skipping enrichment")
            return list(candidates)

        enriched = []
        for candidate in candidates:
            try:
                reply = await self.llm.complete_json(
                    self.ENRICHMENT_PROMPT.format(
                        name=candidate.name,
                        address=candidate.address,
                        city=candidate.city,
                        description=candidate.description or "",
                    )
                )
            except ProviderError as e:
                logger.warning(f"Enrichment failed for {candidate.name}: {e}")
                enriched.append(candidate)
                continue

            if reply is None:
                logger.debug(f"Unparseable enrichment for {candidate.name}")
                enriched.append(candidate)
                continue

            enriched.append(self.apply_enrichment(candidate, reply))

        logger.info(f"Mistral: {len(enriched)} candidates enriched")
        return enriched

    @staticmethod
    def apply_enrichment(candidate: Candidate, reply: dict) -> Candidate:
        """Blend an enrichment reply into a copy of the candidate."""
        quality = _quality_score(reply.get("quality_score"))
        base = DEFAULT_CONFIDENCE if candidate.confidence_score is None else candidate.confidence_score

        updates: dict[str, Any] = {
            # quality 0-10 maps to a 0-0.5 additive bonus
            "confidence_score": min(base + quality / 20, 1.0),
            "quality_score": quality,
            "ai_enriched": True,
        }

        description = reply.get("enhanced_description")
        if isinstance(description, str) and description.strip():
            updates["description"] = description.strip()

        services = _string_list(reply.get("services"))
        if services:
            updates["services"] = services
        specialties = _string_list(reply.get("specialties"))
        if specialties:
            updates["specialties"] = specialties

        price_range = reply.get("price_range")
        if isinstance(price_range, str) and price_range.lower() in PRICE_RANGES:
            updates["price_range"] = price_range.lower()

        return candidate.model_copy(update=updates)


def _quality_score(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_QUALITY
    return max(0.0, min(float(value), 10.0))


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if item is not None and str(item).strip()]
