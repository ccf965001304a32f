# main.py
# FastAPI app factory: auth, itinerary generation/CRUD and chat under /api

import logging
from contextlib import asynccontextmanager
from typing import Optional
import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from auth import auth_router
from chat import build_matcher, chat_router
from config import Settings
from errors import PlannerError
from itineraries import generate_router, itinerary_router
from store import ItineraryStore, UserStore, connect

# logging
logging.basicConfig(level=logging.INFO)
log = logging.getLogger("travel-planner")


def create_app(
    settings: Optional[Settings] = None,
    itineraries: Optional[ItineraryStore] = None,
    users: Optional[UserStore] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the API. Stores and the outbound HTTP transport can be injected;
    otherwise Mongo collections come from settings and httpx uses the network.
    """
    settings = settings or Settings.from_env()
    if itineraries is None or users is None:
        default_itineraries, default_users = connect(settings.mongo_uri, settings.mongo_db)
        itineraries = itineraries or default_itineraries
        users = users or default_users

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            itineraries.ensure_indexes()
            users.ensure_indexes()
        except PyMongoError as e:
            log.warning("could not ensure indexes: %s", e)
        yield

    app = FastAPI(title="Travel Planner API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.itineraries = itineraries
    app.state.users = users
    app.state.transport = transport
    app.state.matcher = build_matcher(settings.chat_fuzzy_match)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # global JSON error handling
    # - PlannerError / HTTPException -> { "error": <message> } with its status
    # - request validation -> 400
    # - any other exception -> { "error": "Server error" }
    @app.exception_handler(PlannerError)
    async def planner_error_handler(request: Request, exc: PlannerError):
        log.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(HTTPException)
    async def http_error_handler(request: Request, exc: HTTPException):
        log.warning("HTTP %s: %s", exc.status_code, exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        first = (exc.errors() or [{}])[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        msg = f"{field}: {first.get('msg', 'invalid')}" if field else first.get("msg", "Invalid request")
        log.warning("invalid request %s: %s", request.url.path, msg)
        return JSONResponse(status_code=400, content={"error": msg})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        # log stack once. do not leak details to client
        log.exception("Unhandled exception")
        return JSONResponse(status_code=500, content={"error": "Server error"})

    app.include_router(auth_router)
    app.include_router(generate_router)
    app.include_router(itinerary_router)
    app.include_router(chat_router)

    @app.get("/health")
    def health():
        return {"ok": True}

    return app


app = create_app()
