from fastapi import APIRouter, HTTPException

from app.models.itinerary import (
    AddItemRequest,
    DateValidationResponse,
    ItineraryState,
    ItinerarySummary,
    MoveItemRequest,
    RemoveItemRequest,
    SelectDayRequest,
    TripDetailsRequest,
)
from app.services import itinerary_store
from app.services.trip_days import validate_trip_dates

router = APIRouter()


def _apply(transition, *args) -> ItinerarySummary:
    try:
        return itinerary_store.summarize(transition(*args))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/summary", response_model=ItinerarySummary)
async def summarize_itinerary(state: ItineraryState):
    return itinerary_store.summarize(state)


@router.post("/items", response_model=ItinerarySummary)
async def add_item(request: AddItemRequest):
    return _apply(itinerary_store.add_item, request.state, request.candidate, request.day)


@router.post("/items/remove", response_model=ItinerarySummary)
async def remove_item(request: RemoveItemRequest):
    return _apply(itinerary_store.remove_item, request.state, request.item_id)


@router.post("/items/move", response_model=ItinerarySummary)
async def move_item(request: MoveItemRequest):
    return _apply(itinerary_store.move_item, request.state, request.item_id, request.new_day)


@router.post("/days", response_model=ItinerarySummary)
async def add_day(state: ItineraryState):
    return _apply(itinerary_store.add_day, state)


@router.post("/select-day", response_model=ItinerarySummary)
async def select_day(request: SelectDayRequest):
    return _apply(itinerary_store.select_day, request.state, request.day)


@router.post("/details", response_model=ItinerarySummary)
async def set_trip_details(request: TripDetailsRequest):
    return _apply(itinerary_store.set_trip_details, request.state, request.details)


@router.post("/validate", response_model=DateValidationResponse)
async def validate_dates(state: ItineraryState):
    error = validate_trip_dates(state.trip.startDate, state.trip.endDate)
    return DateValidationResponse(valid=error is None, error=error)
