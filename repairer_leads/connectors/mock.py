"""Mock connector for testing."""

from typing import Optional

from repairer_leads.models import RawSearchResult
from .base import SearchConnector


class MockConnector(SearchConnector):
    """Mock connector that returns predefined search results."""

    name = "mock"

    def __init__(self, results: Optional[list[RawSearchResult]] = None):
        self._results = results if results is not None else self._default_results()
        self.queries: list[str] = []

    async def search(
        self,
        search_term: str,
        location: str,
    ) -> list[RawSearchResult]:
        """Return mock results."""
        self.queries.append(self.build_query(search_term, location))
        return list(self._results)

    def _default_results(self) -> list[RawSearchResult]:
        """Generate default test results."""
        return [
            RawSearchResult(
                title="Phone Doctor Lyon - Réparation iPhone et Samsung",
                snippet="Réparation d'écran et de batterie de smartphone en 30 minutes.",
                link="https://phonedoctor-lyon.fr",
            ),
            RawSearchResult(
                title="Atelier Mobile Croix-Rousse",
                snippet="Réparer votre téléphone mobile sans rendez-vous.",
                link="https://ateliermobile.fr",
            ),
            RawSearchResult(
                title="Orange Boutique Bellecour",
                snippet="Boutique opérateur, vente de forfaits et de smartphones.",
                link="https://boutique.orange.fr",
            ),
            RawSearchResult(
                title="Coque Shop",
                snippet="Magasin d'accessoires: coques, chargeurs, câbles.",
                link="https://coqueshop.fr",
            ),
        ]
