# providers/geo.py
# nominatim geocoding (read-only, no key). one best match or GeocodeError

import logging
import httpx
from errors import GeocodeError
from models import GeoPoint

log = logging.getLogger(__name__)

HEADERS = {
    "Accept-Language": "en",
    "Accept": "application/json",
}


async def geocode(q: str, url: str, user_agent: str, timeout: float = 20.0,
                  transport: httpx.AsyncBaseTransport | None = None) -> GeoPoint:
    params = {"q": q, "format": "json", "limit": 1}
    headers = {**HEADERS, "User-Agent": user_agent}
    try:
        async with httpx.AsyncClient(timeout=timeout, headers=headers, transport=transport) as client:
            r = await client.get(url, params=params)
    except httpx.HTTPError as e:
        log.warning("geocode request failed for %r: %s", q, e)
        raise GeocodeError("Geocoding failed — service unreachable") from e

    if r.status_code != 200:
        log.warning("geocode status %s for %r", r.status_code, q)
        raise GeocodeError("Geocoding failed — cannot find destination")
    try:
        data = r.json()
        first = data[0] if data else None
        if not first:
            raise GeocodeError("Geocoding failed — cannot find destination")
        return GeoPoint(
            lat=float(first["lat"]),
            lon=float(first["lon"]),
            display_name=first.get("display_name") or q,
        )
    except (ValueError, KeyError, TypeError) as e:
        raise GeocodeError("Geocoding failed — malformed response") from e
