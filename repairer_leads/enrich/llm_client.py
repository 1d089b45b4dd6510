"""Chat-completion client shared by the generative pipeline stages."""

import json
import logging
from typing import Optional

import httpx

from repairer_leads.http_client import http_session

logger = logging.getLogger(__name__)


class ProviderError(RuntimeError):
    """A single provider call failed; callers decide how to degrade."""


def extract_json(text: Optional[str]) -> Optional[dict]:
    """Parse the first balanced-brace object found in a model reply.

    Replies often wrap the JSON in prose or markdown fences. Returns None
    when no object can be parsed; never raises.
    """
    if not text:
        return None

    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                try:
                    parsed = json.loads(text[start:index + 1])
                except json.JSONDecodeError as e:
                    logger.debug(f"Failed to parse model reply as JSON: {e}")
                    return None
                return parsed if isinstance(parsed, dict) else None

    return None


class ChatCompletionClient:
    """Minimal client for OpenAI-compatible /chat/completions endpoints."""

    def __init__(
        self,
        name: str,
        api_key: str,
        url: str,
        model: str,
        temperature: float = 0.1,
        max_tokens: int = 500,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.name = name
        self.api_key = api_key
        self.url = url
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.client = client

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    async def complete(self, prompt: str) -> str:
        """Send a single-turn prompt and return the reply text."""
        if not self.api_key:
            raise ProviderError(f"{self.name} API key not configured")

        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

        try:
            async with http_session(self.client) as client:
                response = await client.post(
                    self.url,
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json",
                    },
                    json=payload,
                )
        except httpx.HTTPError as e:
            raise ProviderError(f"{self.name} request failed: {e}") from e

        if not response.is_success:
            raise ProviderError(f"{self.name} API error: {response.status_code}")

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ProviderError(f"{self.name} returned an unexpected payload: {e}") from e

        if not content:
            raise ProviderError(f"{self.name} returned an empty reply")
        return content

    async def complete_json(self, prompt: str) -> Optional[dict]:
        """Send a prompt and parse the JSON object in the reply, if any."""
        return extract_json(await self.complete(prompt))
