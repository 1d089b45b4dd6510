"""Search connectors producing raw results for classification."""

from .base import SearchConnector, SearchProviderError
from .serper import SerperConnector
from .mock import MockConnector

__all__ = [
    "SearchConnector",
    "SearchProviderError",
    "SerperConnector",
    "MockConnector",
]
