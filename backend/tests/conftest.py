import json

import httpx
import mongomock
import pytest
from fastapi.testclient import TestClient

from config import Settings
from main import create_app
from store import ItineraryStore, UserStore

NOMINATIM = "https://nominatim.test/search"
OVERPASS = "https://overpass.test/api/interpreter"


class FakeOsm:
    """MockTransport handler standing in for Nominatim + Overpass."""

    def __init__(self):
        self.matches = [{"lat": "26.9124", "lon": "75.7873", "display_name": "Jaipur, Rajasthan, India"}]
        self.elements = []
        self.overpass_status = 200
        self.overpass_exc = None
        self.calls = []
        self.queries = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if request.url.host == "nominatim.test":
            return httpx.Response(200, json=self.matches)
        if request.url.host == "overpass.test":
            if self.overpass_exc:
                raise self.overpass_exc
            self.queries.append(request.content.decode())
            if self.overpass_status != 200:
                return httpx.Response(self.overpass_status, text="busy")
            return httpx.Response(200, content=json.dumps({"elements": self.elements}))
        return httpx.Response(404)


def element(osm_id, name=None, lat=26.9, lon=75.8, kind="node", **tags):
    el = {"type": kind, "id": osm_id, "tags": dict(tags)}
    if name is not None:
        el["tags"]["name"] = name
    if kind == "node":
        el["lat"], el["lon"] = lat, lon
    else:
        el["center"] = {"lat": lat, "lon": lon}
    return el


@pytest.fixture
def settings():
    return Settings(
        jwt_secret="test-secret-0123456789abcdef-0123456789",
        nominatim_url=NOMINATIM,
        overpass_url=OVERPASS,
        chat_fuzzy_match=False,
    )


@pytest.fixture
def db():
    return mongomock.MongoClient()["travel_planner_test"]


@pytest.fixture
def itinerary_store(db):
    return ItineraryStore(db["itineraries"])


@pytest.fixture
def user_store(db):
    return UserStore(db["users"])


@pytest.fixture
def osm():
    return FakeOsm()


@pytest.fixture
def transport(osm):
    return httpx.MockTransport(osm)


@pytest.fixture
def client(settings, itinerary_store, user_store, transport):
    app = create_app(settings, itineraries=itinerary_store, users=user_store, transport=transport)
    with TestClient(app) as c:
        yield c


def signup(client, email="ava@example.com", password="hunter22"):
    resp = client.post("/api/auth/signup", json={"name": "Ava", "email": email, "password": password})
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture
def auth_headers(client):
    token = signup(client)["token"]
    return {"Authorization": f"Bearer {token}"}
