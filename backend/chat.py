# chat.py
# rule-based travel chat (no external API): intent keywords + city match -> canned reply

import re
from abc import ABC, abstractmethod
from difflib import SequenceMatcher
from types import MappingProxyType
from typing import Optional, Sequence
from fastapi import APIRouter, Body, Request
from errors import ValidationError
from models import ChatRequest, ChatResponse

chat_router = APIRouter(prefix="/api/chat", tags=["chat"])

# canned replies per city; "default" answers when no city matched
REPLIES = MappingProxyType({
    "jaipur": MappingProxyType({
        "best_places": "Top Jaipur: Amer Fort (sunset view), City Palace, Hawa Mahal, Jantar Mantar, Jal Mahal. "
                       "Best time: Oct–Mar. Tip: Start early to beat heat and take a guided tour at Amer Fort.",
        "food": "Jaipur food must-tries: Dal Baati Churma, Laal Maas, Ghevar (sweet), kachori. "
                "Try the old-city street stalls and traditional Rajasthani thalis.",
        "itinerary_2days": "2-day Jaipur: Day 1 — City Palace, Jantar Mantar, Hawa Mahal, local markets. "
                           "Day 2 — Amer Fort (morning), Jaigarh/Fort view, lunch, Jaipur bazaars.",
    }),
    "goa": MappingProxyType({
        "best_places": "Top Goa: Baga & Calangute (lively beaches), Anjuna (market), Old Goa (churches), "
                       "Palolem (quiet southern beach). Best time: Nov–Feb. Tip: Rent a scooter to explore hidden bays.",
        "food": "Goa food: Goan fish curry, vindaloo, bebinca (dessert). "
                "Visit beach shacks for fresh seafood and local toddy shops for authenticity.",
        "itinerary_3days": "3-day Goa: Day 1 — North beaches & nightlife. Day 2 — Old Goa + Panaji + Dona Paula. "
                           "Day 3 — South Goa beaches and relaxation.",
    }),
    "default": MappingProxyType({
        "best_places": "Tell me the city (e.g. Jaipur, Goa, Manali) and I’ll suggest top places. "
                       "General tip: pick 2–3 highlights per day to avoid rushing.",
        "food": "Tell me the city and I'll share local food recommendations. "
                "General tip: try regional specialties, visit local markets for authentic eats.",
        "best_time": "Best time depends on the destination — coastal areas are great Nov–Feb, "
                     "mountains Apr–Jun and Sep–Nov. Tell me the city for specifics.",
        "itinerary": "Mention how many days and the city (eg. '2 days in Jaipur') and I will suggest a short itinerary.",
    }),
})

# checked in order, first keyword hit wins
INTENTS = MappingProxyType({
    "best_places": ("best places", "top places", "what to see", "places to visit", "best of", "highlights"),
    "food": ("food", "eat", "where to eat", "local cuisine", "restaurants"),
    "itinerary": ("itinerary", "plan", "days", "trip", "schedule"),
    "best_time": ("best time", "when to visit", "when is best"),
})

KNOWN_CITIES = tuple(k for k in REPLIES if k != "default")
DAYS_RE = re.compile(r"\b(\d+)\s*days?\b")


class CityMatcher(ABC):
    """Strategy: pick a known city mentioned in free text, or None."""

    @abstractmethod
    def match(self, text: str, cities: Sequence[str]) -> Optional[str]:
        ...


class SubstringMatcher(CityMatcher):
    def match(self, text, cities):
        t = text.lower()
        return next((c for c in cities if c in t), None)


class SimilarityMatcher(CityMatcher):
    """Best difflib ratio of the whole message against each known city."""

    def __init__(self, threshold: float = 0.4):
        self.threshold = threshold

    def match(self, text, cities):
        t = text.lower().strip()
        best, best_ratio = None, 0.0
        for city in cities:
            ratio = SequenceMatcher(None, t, city).ratio()
            if ratio > best_ratio:
                best, best_ratio = city, ratio
        return best if best_ratio > self.threshold else None


class FallbackMatcher(CityMatcher):
    def __init__(self, *matchers: CityMatcher):
        self.matchers = matchers

    def match(self, text, cities):
        for m in self.matchers:
            city = m.match(text, cities)
            if city:
                return city
        return None


def build_matcher(fuzzy: bool) -> CityMatcher:
    if fuzzy:
        return FallbackMatcher(SubstringMatcher(), SimilarityMatcher())
    return SubstringMatcher()


def detect_intent(text: str) -> Optional[str]:
    t = text.lower()
    for intent, keywords in INTENTS.items():
        if any(kw in t for kw in keywords):
            return intent
    if DAYS_RE.search(t):
        return "itinerary"
    return None


def pick_reply(city: Optional[str], intent: Optional[str], text: str) -> str:
    city_data = REPLIES.get(city) if city else None
    if city_data:
        if intent and intent in city_data:
            return city_data[intent]
        if intent == "itinerary":
            m = DAYS_RE.search(text.lower())
            if m and f"itinerary_{m.group(1)}days" in city_data:
                return city_data[f"itinerary_{m.group(1)}days"]
        if "best_places" in city_data:
            return city_data["best_places"]
    default = REPLIES["default"]
    if intent and intent in default:
        return default[intent]
    return default["best_places"]


def reply(message: str, matcher: CityMatcher) -> str:
    intent = detect_intent(message) or "best_places"
    city = matcher.match(message, KNOWN_CITIES)
    text = pick_reply(city, intent, message)
    prefix = f"Here you go — {city.capitalize()}:\n\n" if city else ""
    return prefix + text


@chat_router.post("", response_model=ChatResponse)
async def chat(request: Request, req: Optional[ChatRequest] = Body(default=None)):
    if req is None or not req.message or not isinstance(req.message, str):
        raise ValidationError("Missing message")
    return ChatResponse(reply=reply(req.message, request.app.state.matcher))
