"""Shared fixtures: fake providers behind an httpx mock transport."""

import json
from typing import Optional, Union

import httpx
import pytest

from repairer_leads.models import Candidate, RawSearchResult
from repairer_leads.throttle import NoDelayThrottle

# A reply is either the model's text or an HTTP status code to fail with.
Reply = Union[str, int]


def chat_response(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def classification_reply(is_repairer: bool = True, confidence: float = 0.9, **fields) -> str:
    payload = {"isRepairer": is_repairer, "confidence": confidence}
    payload.update(fields)
    return f"Voici l'analyse:\n```json\n{json.dumps(payload, ensure_ascii=False)}\n```"


def enrichment_reply(quality_score=8, **fields) -> str:
    payload = {"quality_score": quality_score}
    payload.update(fields)
    return json.dumps(payload, ensure_ascii=False)


class FakeProviders:
    """Routes provider requests by host and records them."""

    def __init__(self):
        self.organic: list[dict] = []
        self.serper_status = 200
        self.classifications: dict[str, Reply] = {}
        self.enrichments: dict[str, Reply] = {}
        self.validations: dict[str, Reply] = {}
        self.geocodes: dict[str, Union[list, int]] = {}
        self.requests: list[httpx.Request] = []

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def hosts(self) -> list[str]:
        return [r.url.host for r in self.requests]

    def count(self, host: str) -> int:
        return self.hosts().count(host)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host

        if host == "google.serper.dev":
            if self.serper_status != 200:
                return httpx.Response(self.serper_status, json={"message": "error"})
            return httpx.Response(200, json={"organic": self.organic})

        if host == "nominatim.openstreetmap.org":
            reply = self._match(self.geocodes, request.url.params.get("q", ""))
            if isinstance(reply, int):
                return httpx.Response(reply)
            return httpx.Response(200, json=reply or [])

        routes = {
            "api.deepseek.com": self.classifications,
            "api.mistral.ai": self.enrichments,
            "api.perplexity.ai": self.validations,
        }
        if host in routes:
            prompt = json.loads(request.content)["messages"][0]["content"]
            reply = self._match(routes[host], prompt)
            if reply is None:
                return httpx.Response(500, json={"error": "no fake reply"})
            if isinstance(reply, int):
                return httpx.Response(reply, json={"error": "fake failure"})
            return httpx.Response(200, json=chat_response(reply))

        return httpx.Response(404)

    @staticmethod
    def _match(table: dict, text: str) -> Optional[Union[Reply, list]]:
        for key, value in table.items():
            if key in text:
                return value
        return None


@pytest.fixture
def providers() -> FakeProviders:
    return FakeProviders()


@pytest.fixture
def throttle() -> NoDelayThrottle:
    return NoDelayThrottle()


def make_raw(title: str, snippet: str = "", link: str = "") -> RawSearchResult:
    return RawSearchResult(
        title=title,
        snippet=snippet,
        link=link or f"https://{title.lower().replace(' ', '-')}.fr",
    )


def make_candidate(**kwargs) -> Candidate:
    """Create a test candidate with defaults."""
    defaults = {
        "name": "Phone Doctor",
        "address": "12 rue de la République",
        "city": "Lyon",
        "postal_code": "69002",
        "confidence_score": 0.8,
        "ai_enriched": True,
        "source": "deepseek_classification",
    }
    defaults.update(kwargs)
    return Candidate(**defaults)
