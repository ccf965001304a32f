# models.py
# typed request/response models plus the Place / DayPlan shapes of the generator

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional, Union


class GeoPoint(BaseModel):
    lat: float
    lon: float
    display_name: str = ""


class Place(BaseModel):
    id: str
    osm_type: str
    osm_id: int
    name: str
    lat: Optional[float] = None
    lon: Optional[float] = None
    address: str = ""
    category: str = "place"
    tags: Dict[str, str] = Field(default_factory=dict)
    # ranking only, never persisted
    score: int = 0


class ScheduledPlace(BaseModel):
    place_id: str
    name: str
    lat: Optional[float] = None
    lon: Optional[float] = None
    address: str = ""
    estimated_time: str
    duration_mins: int = 90
    type: str = "place"
    description: str
    osm: Dict[str, Any]


class DayPlan(BaseModel):
    day: int
    title: str
    places: List[ScheduledPlace] = Field(default_factory=list)


class GenerateRequest(BaseModel):
    destination: Optional[str] = None
    # int-like strings are accepted, anything else is a ValidationError in planner
    days: Optional[Union[int, str]] = None
    interests: Optional[List[str]] = None
    adults: int = 1
    children: int = 0
    budget: Optional[float] = None
    notes: Optional[str] = None
    title: Optional[str] = None
    travelType: Optional[str] = None
    accommodation: Optional[str] = None


class ItineraryCreate(BaseModel):
    """Manual create. Unknown keys are dropped."""
    title: Optional[str] = None
    destination: Optional[str] = None
    days: Optional[int] = None
    budget: Optional[float] = None
    adults: Optional[int] = None
    children: Optional[int] = None
    travelType: Optional[str] = None
    accommodation: Optional[str] = None
    interests: List[str] = Field(default_factory=list)
    notes: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    thumbnail: Optional[str] = None


class SignupRequest(BaseModel):
    name: Optional[str] = None
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6, max_length=72)


class LoginRequest(BaseModel):
    email: str
    password: str


class UserOut(BaseModel):
    id: str
    name: Optional[str] = None
    email: str


class AuthResponse(BaseModel):
    token: str
    user: UserOut


class ChatRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")
    message: Any = None


class ChatResponse(BaseModel):
    reply: str
