"""Abstract base class for search connectors."""

from abc import ABC, abstractmethod

from repairer_leads.models import RawSearchResult


class SearchProviderError(RuntimeError):
    """The search provider is unusable; the pipeline cannot continue."""


class SearchConnector(ABC):
    """Abstract interface for raw result discovery."""

    name: str = "base"

    @abstractmethod
    async def search(
        self,
        search_term: str,
        location: str,
    ) -> list[RawSearchResult]:
        """
        Search for businesses matching a term around a location.

        Args:
            search_term: Free-text search term, e.g. "réparation téléphone"
            location: City or area the search is restricted to

        Returns:
            Organic results in provider order
        """
        pass

    @staticmethod
    def build_query(search_term: str, location: str) -> str:
        """Combine the search term and location into one query."""
        if not search_term or not search_term.strip():
            raise ValueError("search_term must not be empty")
        if not location or not location.strip():
            raise ValueError("location must not be empty")
        return f"{search_term.strip()} {location.strip()}"
