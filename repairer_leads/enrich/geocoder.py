"""Address geocoding with Nominatim."""

import logging
import math
from typing import Optional

import httpx

from repairer_leads.config import settings
from repairer_leads.http_client import http_session
from repairer_leads.models import Candidate
from repairer_leads.throttle import FixedDelayThrottle, Throttle

logger = logging.getLogger(__name__)

COORDINATE_PRECISION = 6


class Geocoder:
    """Resolve candidate addresses to coordinates, one request at a time.

    Nominatim's fair-use policy allows about one request per second, so the
    throttle is awaited after every call whatever its outcome.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        throttle: Optional[Throttle] = None,
    ):
        self.client = client
        self.throttle = throttle or FixedDelayThrottle(settings.geocode_delay)

    @staticmethod
    def build_address(candidate: Candidate) -> str:
        return f"{candidate.full_address}, {settings.country_name}"

    async def geocode(self, candidates: list[Candidate]) -> list[Candidate]:
        geocoded = []
        async with http_session(self.client) as client:
            for candidate in candidates:
                try:
                    coordinates = await self.lookup(client, self.build_address(candidate))
                except httpx.HTTPError as e:
                    logger.warning(f"Geocoding failed for {candidate.name}: {e}")
                    coordinates = None
                finally:
                    await self.throttle.wait()

                if coordinates:
                    lat, lng = coordinates
                    candidate = candidate.model_copy(update={"lat": lat, "lng": lng})
                geocoded.append(candidate)

        found = sum(1 for c in geocoded if c.is_geocoded)
        logger.info(f"Geocoding: {found}/{len(geocoded)} candidates located")
        return geocoded

    async def lookup(
        self,
        client: httpx.AsyncClient,
        address: str,
    ) -> Optional[tuple[float, float]]:
        """Return the first match for an address, rounded to 6 decimals."""
        response = await client.get(
            settings.nominatim_url,
            params={
                "q": address,
                "format": "json",
                "limit": "1",
                "countrycodes": settings.country_code,
                "addressdetails": "1",
            },
            headers={"User-Agent": settings.geocoder_user_agent},
        )

        if not response.is_success:
            logger.debug(f"Nominatim returned {response.status_code} for '{address}'")
            return None

        try:
            matches = response.json()
        except ValueError:
            return None
        if not isinstance(matches, list) or not matches:
            logger.debug(f"No geocoding match for '{address}'")
            return None

        first = matches[0]
        try:
            lat = float(first.get("lat"))
            lng = float(first.get("lon"))
        except (TypeError, ValueError, AttributeError):
            return None

        if not (math.isfinite(lat) and math.isfinite(lng)):
            return None
        return round(lat, COORDINATE_PRECISION), round(lng, COORDINATE_PRECISION)
