"""Relevance classification of raw search results."""

import logging
import math
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from repairer_leads.config import settings
from repairer_leads.models import (
    Candidate,
    RawSearchResult,
    UNKNOWN_ADDRESS,
    UNKNOWN_CITY,
    UNKNOWN_POSTAL_CODE,
)
from .cleaning import clean_email, clean_phone, clean_text, clean_website
from .llm_client import ChatCompletionClient, ProviderError

logger = logging.getLogger(__name__)

AI_SOURCE = "deepseek_classification"
BASIC_SOURCE = "basic_classification"
BASIC_CONFIDENCE = 0.7


class CandidateClassifier:
    """Turn raw search results into repairer candidates.

    Uses DeepSeek when a key is configured and falls back to keyword matching
    otherwise. Results keep the input order; rejected items are dropped.
    """

    REPAIR_KEYWORDS = [
        "réparation", "réparer", "téléphone", "smartphone",
        "mobile", "iphone", "samsung",
    ]

    # Pure retail and carrier signals
    EXCLUDE_KEYWORDS = ["vente", "boutique", "magasin", "opérateur"]

    CLASSIFICATION_PROMPT = """
Analyse ce résultat de recherche et extrait les informations de réparateur de smartphones:

Titre: {title}
Description: {snippet}
URL: {link}

Réponds EXCLUSIVEMENT au format JSON:
{{
  "isRepairer": boolean,
  "name": "nom extrait",
  "address": "adresse extraite",
  "city": "ville extraite",
  "postal_code": "code postal extrait",
  "phone": "téléphone extrait",
  "email": "email extrait",
  "website": "site web",
  "confidence": number (0-1)
}}

Critères pour isRepairer=true:
- Mots-clés: réparation, téléphone, smartphone, mobile, iPhone, Samsung, écran, batterie
- Exclure: vente uniquement, accessoires, opérateurs
"""

    def __init__(
        self,
        api_key: str = "",
        client: Optional[httpx.AsyncClient] = None,
        threshold: Optional[float] = None,
    ):
        self.llm = ChatCompletionClient(
            name="DeepSeek",
            api_key=api_key,
            url=settings.deepseek_url,
            model=settings.deepseek_model,
            temperature=0.1,
            max_tokens=500,
            client=client,
        )
        self.threshold = settings.classification_threshold if threshold is None else threshold

    async def classify(
        self,
        raw_results: list[RawSearchResult],
        location: str,
    ) -> list[Candidate]:
        """Classify every raw result, keeping only plausible repairers."""
        if not self.llm.available:
            logger.warning("DEEPSEEK_API_KEY not set, using keyword classification")
            return self.basic_classification(raw_results)

        candidates = []
        for result in raw_results:
            try:
                parsed = await self.llm.complete_json(
                    self.CLASSIFICATION_PROMPT.format(
                        title=result.title,
                        snippet=result.snippet,
                        link=result.link,
                    )
                )
            except ProviderError as e:
                logger.warning(f"Classification failed for '{result.title}': {e}")
                continue

            if parsed is None:
                logger.debug(f"Unparseable classification for '{result.title}'")
                continue

            candidate = self._candidate_from_reply(parsed, result, location)
            if candidate:
                candidates.append(candidate)

        logger.info(f"DeepSeek: {len(candidates)} repairers classified")
        return candidates

    def _candidate_from_reply(
        self,
        parsed: dict,
        result: RawSearchResult,
        location: str,
    ) -> Optional[Candidate]:
        """Apply the relevance gate and map the reply onto a Candidate."""
        confidence = parsed.get("confidence")
        if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
            return None
        if isinstance(confidence, float) and not math.isfinite(confidence):
            return None
        if parsed.get("isRepairer") is not True or confidence <= self.threshold:
            return None

        try:
            return Candidate(
                name=clean_text(_as_str(parsed.get("name"))) or result.title,
                address=clean_text(_as_str(parsed.get("address"))) or UNKNOWN_ADDRESS,
                city=clean_text(_as_str(parsed.get("city"))) or location,
                postal_code=clean_text(_as_str(parsed.get("postal_code"))) or UNKNOWN_POSTAL_CODE,
                phone=clean_phone(_as_str(parsed.get("phone"))),
                email=clean_email(_as_str(parsed.get("email"))),
                website=clean_website(_as_str(parsed.get("website"))) or result.link or None,
                description=result.snippet or None,
                confidence_score=float(min(confidence, 1.0)),
                ai_enriched=True,
                source=AI_SOURCE,
            )
        except ValidationError as e:
            logger.warning(f"Rejected classification for '{result.title}': {e}")
            return None

    def is_repairer_text(self, text: str) -> bool:
        """Keyword heuristic: a repair term and no retail term."""
        text_lower = text.lower()
        has_repair = any(keyword in text_lower for keyword in self.REPAIR_KEYWORDS)
        has_exclude = any(keyword in text_lower for keyword in self.EXCLUDE_KEYWORDS)
        return has_repair and not has_exclude

    def basic_classification(self, raw_results: list[RawSearchResult]) -> list[Candidate]:
        """Classify without a model using keyword matching."""
        candidates = [
            Candidate(
                name=result.title,
                address=UNKNOWN_ADDRESS,
                city=UNKNOWN_CITY,
                postal_code=UNKNOWN_POSTAL_CODE,
                website=result.link or None,
                description=result.snippet or None,
                confidence_score=BASIC_CONFIDENCE,
                ai_enriched=False,
                source=BASIC_SOURCE,
            )
            for result in raw_results
            if self.is_repairer_text(result.text)
        ]
        logger.info(f"Keyword classification: {len(candidates)} repairers kept")
        return candidates


def _as_str(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value)
