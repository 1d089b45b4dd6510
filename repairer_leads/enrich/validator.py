"""Real-world existence checks with Perplexity."""

import logging
from enum import Enum
from typing import Optional

import httpx

from repairer_leads.config import settings
from repairer_leads.models import Candidate
from .llm_client import ChatCompletionClient, ProviderError

logger = logging.getLogger(__name__)

VALIDATION_BONUS = 0.2


class Verdict(str, Enum):
    VALID = "valid"
    INVALID = "invalid"
    AMBIGUOUS = "ambiguous"


def parse_verdict(reply: str) -> Verdict:
    """Classify a free-text reply by substring match.

    "INVALIDE" contains "VALIDE", so it is checked first.
    """
    if "INVALIDE" in reply:
        return Verdict.INVALID
    if "VALIDE" in reply:
        return Verdict.VALID
    return Verdict.AMBIGUOUS


class CandidateValidator:
    """Confirm that the first candidates are real, active repairers.

    Only the first ``limit`` candidates are checked, to bound cost; the tail is
    returned untouched and should be treated as lower-trust.
    """

    VALIDATION_PROMPT = (
        'Vérifie si "{name}" à "{city}" est vraiment un réparateur de smartphones actif. '
        'Réponds par "VALIDE" ou "INVALIDE" avec un score de confiance.'
    )

    def __init__(
        self,
        api_key: str = "",
        client: Optional[httpx.AsyncClient] = None,
        limit: Optional[int] = None,
    ):
        self.llm = ChatCompletionClient(
            name="Perplexity",
            api_key=api_key,
            url=settings.perplexity_url,
            model=settings.perplexity_model,
            temperature=0.2,
            max_tokens=200,
            client=client,
        )
        self.limit = settings.validation_limit if limit is None else limit
        if self.limit < 0:
            raise ValueError("limit must be >= 0")

    async def validate(self, candidates: list[Candidate]) -> list[Candidate]:
        if not self.llm.available:
            logger.warning("PERPLEXITY_API_KEY not set, skipping validation")
            return list(candidates)

        validated = []
        for candidate in candidates[:self.limit]:
            try:
                reply = await self.llm.complete(
                    self.VALIDATION_PROMPT.format(name=candidate.name, city=candidate.city)
                )
            except ProviderError as e:
                logger.warning(f"Validation failed for {candidate.name}: {e}")
                validated.append(candidate)
                continue

            verdict = parse_verdict(reply)
            if verdict is Verdict.INVALID:
                logger.info(f"Discarding {candidate.name}: reported invalid")
                continue
            if verdict is Verdict.VALID:
                candidate = self.apply_valid(candidate)
            validated.append(candidate)

        validated.extend(candidates[self.limit:])

        logger.info(f"Perplexity: {len(validated)} candidates kept")
        return validated

    @staticmethod
    def apply_valid(candidate: Candidate) -> Candidate:
        score = candidate.confidence_score
        if score is None:
            score = 0.5
        return candidate.model_copy(update={
            "confidence_score": min(score + VALIDATION_BONUS, 1.0),
            "validated": True,
        })
