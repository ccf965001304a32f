# itineraries.py
# owner-scoped itinerary CRUD: generate, manual create, list, detail, delete

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from starlette.concurrency import run_in_threadpool
from auth import get_current_user, get_settings
from config import Settings
from models import GenerateRequest, ItineraryCreate
from planner import generate
from store import ItineraryStore

itinerary_router = APIRouter(prefix="/api/itineraries", tags=["itineraries"])
generate_router = APIRouter(prefix="/api/generate", tags=["generate"])


def get_itineraries(request: Request) -> ItineraryStore:
    return request.app.state.itineraries


@generate_router.post("", status_code=201)
async def create_generated(
    req: GenerateRequest,
    request: Request,
    user_id: str = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
    store: ItineraryStore = Depends(get_itineraries),
):
    """Geocode, fetch POIs, bucket into days and store. Returns the stored doc."""
    return await generate(
        settings,
        store,
        owner=user_id,
        destination=req.destination,
        days=req.days,
        interests=req.interests,
        budget=req.budget,
        notes=req.notes,
        title=req.title,
        adults=req.adults,
        children=req.children,
        travel_type=req.travelType,
        accommodation=req.accommodation,
        transport=request.app.state.transport,
    )


@itinerary_router.post("", status_code=201)
async def create_itinerary(
    req: ItineraryCreate,
    user_id: str = Depends(get_current_user),
    store: ItineraryStore = Depends(get_itineraries),
):
    payload = req.model_dump(exclude_none=True)
    return await run_in_threadpool(store.create, {**payload, "user": user_id})


@itinerary_router.get("")
async def list_itineraries(
    user_id: str = Depends(get_current_user),
    store: ItineraryStore = Depends(get_itineraries),
):
    return await run_in_threadpool(store.list_for_owner, user_id)


@itinerary_router.get("/{itinerary_id}")
async def get_itinerary(
    itinerary_id: str,
    user_id: str = Depends(get_current_user),
    store: ItineraryStore = Depends(get_itineraries),
):
    doc = await run_in_threadpool(store.get_for_owner, user_id, itinerary_id)
    if not doc:
        raise HTTPException(status_code=404, detail="Not found")
    return doc


@itinerary_router.delete("/{itinerary_id}", status_code=204)
async def delete_itinerary(
    itinerary_id: str,
    user_id: str = Depends(get_current_user),
    store: ItineraryStore = Depends(get_itineraries),
):
    # idempotent: deleting someone else's or a missing id is still 204
    await run_in_threadpool(store.delete_for_owner, user_id, itinerary_id)
    return Response(status_code=204)
