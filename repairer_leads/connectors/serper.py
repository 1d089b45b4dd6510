"""Serper web search connector."""

import logging
from typing import Optional

import httpx

from repairer_leads.config import settings
from repairer_leads.http_client import http_session
from repairer_leads.models import RawSearchResult
from .base import SearchConnector, SearchProviderError

logger = logging.getLogger(__name__)


class SerperConnector(SearchConnector):
    """Search for businesses using the Serper Google search API."""

    name = "serper"

    def __init__(
        self,
        api_key: str,
        client: Optional[httpx.AsyncClient] = None,
        num_results: Optional[int] = None,
    ):
        self.api_key = api_key
        self.client = client
        self.num_results = num_results or settings.search_num_results

    def build_params(self, search_term: str, location: str) -> dict:
        return {
            "q": self.build_query(search_term, location),
            "gl": settings.search_locale,
            "hl": settings.search_locale,
            "num": self.num_results,
            "location": location.strip(),
        }

    async def search(
        self,
        search_term: str,
        location: str,
    ) -> list[RawSearchResult]:
        """Run one Serper query and return its organic results."""
        if not self.api_key:
            raise SearchProviderError("SERPER_API_KEY not configured")

        params = self.build_params(search_term, location)
        logger.info(f"Serper search: '{params['q']}'")

        try:
            async with http_session(self.client) as client:
                response = await client.post(
                    settings.serper_url,
                    headers={
                        "X-API-KEY": self.api_key,
                        "Content-Type": "application/json",
                    },
                    json=params,
                )
        except httpx.HTTPError as e:
            raise SearchProviderError(f"Serper request failed: {e}") from e

        if not response.is_success:
            raise SearchProviderError(f"Serper API error: {response.status_code}")

        organic = response.json().get("organic") or []
        results = [self._parse_result(item) for item in organic if isinstance(item, dict)]
        logger.info(f"Serper: {len(results)} results found")
        return results

    @staticmethod
    def _parse_result(item: dict) -> RawSearchResult:
        return RawSearchResult(
            title=item.get("title") or "",
            snippet=item.get("snippet") or "",
            link=item.get("link") or "",
        )
