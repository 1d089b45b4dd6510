"""Shared HTTP client construction."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

from repairer_leads.config import settings


def default_timeout() -> httpx.Timeout:
    return httpx.Timeout(
        connect=settings.connect_timeout,
        read=settings.read_timeout,
        write=settings.read_timeout,
        pool=settings.connect_timeout,
    )


@asynccontextmanager
async def http_session(
    client: Optional[httpx.AsyncClient] = None,
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the given client, or a short-lived one closed on exit."""
    if client is not None:
        yield client
        return

    async with httpx.AsyncClient(timeout=default_timeout()) as owned:
        yield owned
