# utils.py
# Helpers: element normalization, scoring, dedupe, day scheduling

from __future__ import annotations
import math
from typing import Any, Dict, List
from errors import ValidationError
from models import DayPlan, Place, ScheduledPlace

UNNAMED = "Unnamed place"
CATEGORY_KEYS = ("tourism", "amenity", "shop", "natural", "leisure")
ADDRESS_KEYS = ("addr:housenumber", "addr:street", "addr:city", "addr:postcode", "addr:country")
DAY_START_HOUR = 9
SLOT_HOURS = 3
VISIT_MINUTES = 90
DEFAULT_DAYS = 3
MAX_DAYS = 30


def _coord(el: Dict[str, Any], key: str) -> float | None:
    value = el.get(key)
    if value is None:
        value = (el.get("center") or {}).get(key)
    return float(value) if value is not None else None


def normalize_element(el: Dict[str, Any]) -> Place:
    """One raw Overpass element -> Place. Missing coordinates stay None."""
    tags = {str(k): str(v) for k, v in (el.get("tags") or {}).items()}
    name = tags.get("name") or tags.get("addr:street") or UNNAMED
    category = next((tags[k] for k in CATEGORY_KEYS if tags.get(k)), "place")
    address = ", ".join(tags[k] for k in ADDRESS_KEYS if tags.get(k))
    osm_type = str(el.get("type") or "node")
    osm_id = int(el.get("id") or 0)
    return Place(
        id=f"{osm_type}/{osm_id}",
        osm_type=osm_type,
        osm_id=osm_id,
        name=name,
        lat=_coord(el, "lat"),
        lon=_coord(el, "lon"),
        address=address,
        category=category,
        tags=tags,
    )


def score(place: Place) -> int:
    s = 0
    if place.name and place.name != UNNAMED:
        s += 3
    if place.address:
        s += 1
    if any(place.tags.get(k) for k in ("tourism", "amenity", "shop")):
        s += 1
    return s


def _approx(value: float | None) -> str:
    # + 0.0 folds -0.0 into 0.0 so both sides of the equator/meridian match
    return f"{round(value or 0, 4) + 0.0:.4f}"


def dedupe_key(place: Place) -> str:
    return f"{place.name.lower()}|{_approx(place.lat)}|{_approx(place.lon)}"


def dedupe(places: List[Place]) -> List[Place]:
    """Deduplicate by (name + approx coords), first occurrence wins."""
    seen = set()
    out: List[Place] = []
    for p in places:
        k = dedupe_key(p)
        if k not in seen:
            seen.add(k)
            out.append(p)
    return out


def rank_places(places: List[Place], limit: int = 12) -> List[Place]:
    """
    Prefer places with complete data.
    Weights:
      real name +3, address +1, tourism/amenity/shop tag +1
    sorted() is stable so ties keep input order; dedupe runs on the sorted
    list so the best scored duplicate survives, then truncate.
    """
    scored = [p.model_copy(update={"score": score(p)}) for p in places]
    scored = sorted(scored, key=lambda p: p.score, reverse=True)
    return dedupe(scored)[:limit]


def resolve_days(days: Any, max_days: int = MAX_DAYS) -> int:
    """Missing or non-positive -> DEFAULT_DAYS; non-integers and more than max_days rejected."""
    if days is None or days == "":
        return DEFAULT_DAYS
    if isinstance(days, bool):
        raise ValidationError("days must be a whole number")
    try:
        n = int(str(days).strip())
    except ValueError:
        raise ValidationError("days must be a whole number")
    if n > max_days:
        raise ValidationError(f"days must be at most {max_days}")
    return n if n > 0 else DEFAULT_DAYS


def slot_time(index: int) -> str:
    return f"{DAY_START_HOUR + index * SLOT_HOURS:02d}:00"


def describe(place: Place) -> str:
    return (place.tags.get("description")
            or place.tags.get("description:en")
            or f"{place.name} — a recommended stop.")


def schedule_places(places: List[Place], days: Any = DEFAULT_DAYS, max_days: int = MAX_DAYS) -> List[DayPlan]:
    """Contiguous slices in ranked order, always exactly `days` buckets."""
    days = resolve_days(days, max_days)
    per_day = max(1, math.ceil(len(places) / days))
    plan: List[DayPlan] = []
    for d in range(days):
        chunk = places[d * per_day:(d + 1) * per_day]
        plan.append(DayPlan(
            day=d + 1,
            title=f"Day {d + 1}",
            places=[
                ScheduledPlace(
                    place_id=p.id,
                    name=p.name,
                    lat=p.lat,
                    lon=p.lon,
                    address=p.address,
                    estimated_time=slot_time(idx),
                    duration_mins=VISIT_MINUTES,
                    type=p.category,
                    description=describe(p),
                    osm={"type": p.osm_type, "id": p.osm_id},
                )
                for idx, p in enumerate(chunk)
            ],
        ))
    return plan
