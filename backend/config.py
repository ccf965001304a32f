# config.py
# explicit runtime settings, read once from env (.env supported) at startup

import os
import logging
from dataclasses import dataclass
from dotenv import load_dotenv

log = logging.getLogger(__name__)

DEV_JWT_SECRET = "dev-secret-change-me-before-deploying-0123456789"


def _flag(value: str) -> bool:
    return value.lower() not in ["0", "false", "no", ""]


@dataclass(frozen=True)
class Settings:
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "travel_planner"
    jwt_secret: str = DEV_JWT_SECRET
    jwt_ttl_hours: int = 168

    nominatim_url: str = "https://nominatim.openstreetmap.org/search"
    overpass_url: str = "https://overpass-api.de/api/interpreter"
    user_agent: str = "TravelPlanner/1.0 (https://github.com/travel-planner)"

    # seconds
    geocode_timeout_s: float = 20.0
    overpass_timeout_s: float = 30.0

    search_radius_m: int = 25000
    overpass_result_limit: int = 100
    overpass_query_timeout_s: int = 25

    max_days: int = 30

    frontend_prod: str = ""
    chat_fuzzy_match: bool = True

    @property
    def cors_origins(self) -> list[str]:
        origins = ["http://localhost:3000", "http://localhost:5173"]
        if self.frontend_prod:
            origins.append(self.frontend_prod)
        return origins

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        secret = os.getenv("JWT_SECRET", "")
        if not secret:
            log.warning("JWT_SECRET not set, using development secret")
            secret = DEV_JWT_SECRET
        return cls(
            mongo_uri=os.getenv("MONGO_URI", cls.mongo_uri),
            mongo_db=os.getenv("MONGO_DB", cls.mongo_db),
            jwt_secret=secret,
            jwt_ttl_hours=int(os.getenv("JWT_TTL_HOURS", str(cls.jwt_ttl_hours))),
            nominatim_url=os.getenv("NOMINATIM_URL", cls.nominatim_url),
            overpass_url=os.getenv("OVERPASS_URL", cls.overpass_url),
            user_agent=os.getenv("USER_AGENT", cls.user_agent),
            geocode_timeout_s=float(os.getenv("GEOCODE_TIMEOUT_S", str(cls.geocode_timeout_s))),
            overpass_timeout_s=float(os.getenv("OVERPASS_TIMEOUT_S", str(cls.overpass_timeout_s))),
            search_radius_m=int(os.getenv("SEARCH_RADIUS_M", str(cls.search_radius_m))),
            overpass_result_limit=int(os.getenv("OVERPASS_RESULT_LIMIT", str(cls.overpass_result_limit))),
            max_days=int(os.getenv("MAX_DAYS", str(cls.max_days))),
            frontend_prod=os.getenv("FRONTEND_PROD", ""),
            chat_fuzzy_match=_flag(os.getenv("CHAT_FUZZY_MATCH", "1")),
        )
