from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging

from app.database.connection import get_db
from app.database.models import Trip as TripModel
from app.models.itinerary import TripDetails
from app.models.trip import (
    CollaboratorCreate,
    CollaboratorResponse,
    CommentCreate,
    CommentResponse,
    TripItemResponse,
    TripResponse,
    TripSaveRequest,
    TripSaveResponse,
    TripUpdateRequest,
    TripWithItems,
)
from app.services import trip_service
from app.services.itinerary_store import from_trip_items, to_trip_items, total_cost
from app.services.pdf_export import build_trip_pdf, content_disposition, pdf_filename
from app.services.sharing import create_shareable_url
from app.services.trip_days import total_days, validate_trip_dates

router = APIRouter()
logger = logging.getLogger(__name__)

TRIP_NOT_FOUND = "Trip not found or has been removed"


async def _get_trip_or_404(db: AsyncSession, trip_id: str) -> TripModel:
    db_trip = await trip_service.get_trip(db, trip_id)
    if not db_trip:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=TRIP_NOT_FOUND)
    return db_trip


def _trip_details(db_trip: TripModel) -> TripDetails:
    return TripDetails(
        name=db_trip.name,
        startDate=db_trip.start_date.isoformat() if db_trip.start_date else None,
        endDate=db_trip.end_date.isoformat() if db_trip.end_date else None,
        travelers=db_trip.travelers or 1,
        budget=db_trip.budget or 0,
    )


@router.post("/", response_model=TripSaveResponse, status_code=status.HTTP_201_CREATED)
async def save_trip(request: TripSaveRequest, db: AsyncSession = Depends(get_db)):
    error = validate_trip_dates(request.trip.start_date, request.trip.end_date)
    if error:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)

    db_trip = await trip_service.save_trip(db, request.trip, to_trip_items(request.items))
    if not db_trip:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            detail="Failed to save trip. Please try again.")
    return TripSaveResponse(
        trip=TripResponse.model_validate(db_trip),
        short_id=db_trip.short_id,
        share_url=create_shareable_url(db_trip.short_id),
    )


@router.get("/public", response_model=List[TripResponse])
async def get_public_trips(limit: int = Query(10, ge=1, le=100), db: AsyncSession = Depends(get_db)):
    return await trip_service.get_public_trips(db, limit)


@router.get("/short-id/{short_id}/available", response_model=dict)
async def check_short_id(short_id: str, db: AsyncSession = Depends(get_db)):
    return {"short_id": short_id, "available": await trip_service.is_short_id_available(db, short_id)}


@router.get("/{short_id}", response_model=TripWithItems)
async def load_trip(short_id: str, db: AsyncSession = Depends(get_db)):
    loaded = await trip_service.load_trip_by_short_id(db, short_id)
    if not loaded:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=TRIP_NOT_FOUND)
    db_trip, db_items = loaded
    items = from_trip_items(db_items)
    return TripWithItems(
        trip=TripResponse.model_validate(db_trip),
        items=[TripItemResponse.model_validate(item) for item in db_items],
        total_days=total_days(db_trip.start_date, db_trip.end_date, items),
        total_cost=total_cost(items),
        share_url=create_shareable_url(db_trip.short_id),
    )


@router.get("/{short_id}/pdf")
async def export_trip_pdf(short_id: str, db: AsyncSession = Depends(get_db)):
    db_trip = await trip_service.get_trip_by_short_id(db, short_id)
    if not db_trip:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=TRIP_NOT_FOUND)
    items = from_trip_items(await trip_service.get_trip_items(db, db_trip.id))
    if not items:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="This trip has no itinerary to export.")
    try:
        content = build_trip_pdf(_trip_details(db_trip), items)
    except Exception as e:
        logger.error(f"Error generating PDF for trip {short_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            detail="Error generating PDF. Please try again.")
    return Response(content=content, media_type="application/pdf",
                    headers={"Content-Disposition": content_disposition(pdf_filename(db_trip.name))})


@router.put("/{trip_id}", response_model=dict)
async def update_trip(trip_id: str, request: TripUpdateRequest, db: AsyncSession = Depends(get_db)):
    db_trip = await _get_trip_or_404(db, trip_id)
    changes = request.trip.model_dump(exclude_unset=True)
    if "start_date" in changes or "end_date" in changes:
        # A trip that already started may still have its end date moved.
        error = validate_trip_dates(changes.get("start_date", db_trip.start_date),
                                    changes.get("end_date", db_trip.end_date),
                                    check_past="start_date" in changes)
        if error:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)

    if not await trip_service.update_trip(db, trip_id, request.trip, to_trip_items(request.items)):
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            detail="Failed to update trip. Please try again.")
    return {"success": True}


@router.get("/{trip_id}/comments", response_model=List[CommentResponse])
async def get_comments(trip_id: str, db: AsyncSession = Depends(get_db)):
    await _get_trip_or_404(db, trip_id)
    return await trip_service.get_trip_comments(db, trip_id)


@router.post("/{trip_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(trip_id: str, comment: CommentCreate, db: AsyncSession = Depends(get_db)):
    db_trip = await _get_trip_or_404(db, trip_id)
    if not db_trip.allow_comments:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Comments are disabled for this trip.")
    db_comment = await trip_service.add_comment(db, trip_id, comment.author_email, comment.author_name,
                                                comment.content)
    if not db_comment:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            detail="Failed to add comment. Please try again.")
    return db_comment


@router.get("/{trip_id}/collaborators", response_model=List[CollaboratorResponse])
async def get_collaborators(trip_id: str, db: AsyncSession = Depends(get_db)):
    await _get_trip_or_404(db, trip_id)
    return await trip_service.get_trip_collaborators(db, trip_id)


@router.post("/{trip_id}/collaborators", response_model=CollaboratorResponse,
             status_code=status.HTTP_201_CREATED)
async def add_collaborator(trip_id: str, collaborator: CollaboratorCreate, db: AsyncSession = Depends(get_db)):
    db_trip = await _get_trip_or_404(db, trip_id)
    if not db_trip.allow_collaboration:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN,
                            detail="Collaboration is disabled for this trip.")
    db_collaborator = await trip_service.add_collaborator(db, trip_id, collaborator.email, collaborator.role)
    if not db_collaborator:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            detail="Failed to add collaborator. Please try again.")
    return db_collaborator


@router.post("/{trip_id}/like", response_model=dict)
async def like_trip(trip_id: str, db: AsyncSession = Depends(get_db)):
    await _get_trip_or_404(db, trip_id)
    if not await trip_service.like_trip(db, trip_id):
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to like trip.")
    return {"success": True}
