# providers/overpass.py
# OpenStreetMap Overpass POI search: query construction + fetch (read-only, no key)

import logging
from typing import Any, Dict, List
import httpx
from errors import PoiFetchError

log = logging.getLogger(__name__)

GEOMETRIES = ("node", "way", "relation")


def _tag_filter(tag: str) -> str:
    if "=" not in tag:
        return f"[{tag}]"
    k, v = tag.split("=", 1)
    return f"[{k}={v}]"


def build_query(tags: List[str], lat: float, lon: float, radius: int = 25000,
                limit: int = 100, timeout: int = 25) -> str:
    """
    One clause per tag and geometry kind inside a single union (logical OR).
    Radius, center, result cap and server-side timeout are embedded literally.
    """
    blocks = "".join(
        f"{kind}(around:{radius},{lat},{lon}){_tag_filter(tag)};"
        for tag in tags
        for kind in GEOMETRIES
    )
    return f"[out:json][timeout:{timeout}];\n(\n  {blocks}\n);\nout center {limit};"


async def fetch_elements(query: str, url: str, user_agent: str, timeout: float = 30.0,
                         transport: httpx.AsyncBaseTransport | None = None) -> List[Dict[str, Any]]:
    headers = {"Content-Type": "text/plain", "User-Agent": user_agent}
    try:
        async with httpx.AsyncClient(timeout=timeout, headers=headers, transport=transport) as client:
            r = await client.post(url, content=query)
    except httpx.TimeoutException as e:
        log.warning("overpass timed out after %ss", timeout)
        raise PoiFetchError(f"POI search timed out after {timeout:g}s") from e
    except httpx.HTTPError as e:
        log.warning("overpass request failed: %s", e)
        raise PoiFetchError("POI search failed — service unreachable") from e

    if r.status_code != 200:
        log.warning("overpass status %s body: %s", r.status_code, r.text[:400])
        raise PoiFetchError(f"POI search failed with status {r.status_code}")
    try:
        body = r.json()
    except ValueError as e:
        raise PoiFetchError("POI search returned a malformed response") from e
    if not isinstance(body, dict):
        raise PoiFetchError("POI search returned a malformed response")
    elements = body.get("elements") or []
    return [el for el in elements if isinstance(el, dict)]
