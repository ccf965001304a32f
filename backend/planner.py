# planner.py
# itinerary generation: geocode -> tags -> overpass -> rank -> days -> store

import logging
from types import MappingProxyType
from typing import Any, Dict, List, Optional
import httpx
from starlette.concurrency import run_in_threadpool
from config import Settings
from errors import ValidationError
from providers.geo import geocode
from providers.overpass import build_query, fetch_elements
from store import ItineraryStore
from utils import normalize_element, rank_places, resolve_days, schedule_places

log = logging.getLogger(__name__)

INTEREST_TAG_MAP = MappingProxyType({
    "Nature & Peaceful": ("tourism=nature_reserve", "leisure=park", "natural=peak", "natural=water"),
    "Adventure / Hiking": ("highway=path", "route=hiking", "sport=hiking"),
    "Famous Attractions": ("tourism=attraction", "historic=yes", "historic=monument"),
    "Culture & Heritage": ("tourism=museum", "amenity=theatre", "historic=castle"),
    "Beaches": ("natural=beach", "leisure=beach_resort"),
    "Food & Markets": ("amenity=restaurant", "amenity=cafe", "amenity=marketplace"),
    "Wildlife": ("tourism=wildlife_hide", "natural=wood"),
    "Religious": ("tourism=place_of_worship", "amenity=place_of_worship", "historic=church"),
    "Shopping": ("shop=yes", "shop=clothes", "shop=marketplace"),
})

DEFAULT_TAGS = ("tourism=attraction", "amenity=restaurant", "leisure=park")


def tags_for_interests(interests: Optional[List[str]]) -> List[str]:
    """Unknown interests are ignored; nothing recognized -> DEFAULT_TAGS."""
    tags: List[str] = []
    for interest in interests or []:
        tags.extend(INTEREST_TAG_MAP.get(interest, ()))
    return tags or list(DEFAULT_TAGS)


def result_cap(days: int) -> int:
    return max(8, days * 3)


def default_title(destination: str, days: int) -> str:
    return f"{destination} — {days} day{'s' if days > 1 else ''}"


async def generate(
    settings: Settings,
    store: ItineraryStore,
    owner: str,
    destination: Optional[str],
    days: Any = None,
    interests: Optional[List[str]] = None,
    budget: Optional[float] = None,
    notes: Optional[str] = None,
    title: Optional[str] = None,
    adults: int = 1,
    children: int = 0,
    travel_type: Optional[str] = None,
    accommodation: Optional[str] = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Dict[str, Any]:
    """
    Build and store one itinerary. Every failure is terminal: nothing is
    written unless all stages succeed. Zero POIs still yields `days` buckets.
    """
    if not isinstance(destination, str) or not destination.strip():
        raise ValidationError("destination required")
    destination = destination.strip()
    n_days = resolve_days(days, settings.max_days)
    interests = list(interests or [])

    center = await geocode(
        destination, settings.nominatim_url, settings.user_agent,
        timeout=settings.geocode_timeout_s, transport=transport,
    )
    tags = tags_for_interests(interests)
    query = build_query(
        tags, center.lat, center.lon,
        radius=settings.search_radius_m,
        limit=settings.overpass_result_limit,
        timeout=settings.overpass_query_timeout_s,
    )
    elements = await fetch_elements(
        query, settings.overpass_url, settings.user_agent,
        timeout=settings.overpass_timeout_s, transport=transport,
    )

    places = rank_places([normalize_element(el) for el in elements], limit=result_cap(n_days))
    plan = schedule_places(places, n_days, settings.max_days)
    log.info("generate %r: %d tags, %d elements, %d places over %d days",
             destination, len(tags), len(elements), len(places), n_days)

    doc = {
        "user": owner,
        "title": title or default_title(destination, n_days),
        "destination": destination,
        "days": n_days,
        "adults": adults,
        "children": children,
        "budget": budget,
        "notes": notes,
        "travelType": travel_type,
        "accommodation": accommodation,
        "interests": interests,
        "center": center.model_dump(),
        "data": {"days": [d.model_dump() for d in plan]},
        "thumbnail": "",
    }
    stored = await run_in_threadpool(store.create, doc)
    log.info("stored itinerary %s for user %s", stored["_id"], owner)
    return stored
