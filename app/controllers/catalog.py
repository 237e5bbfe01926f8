from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, orm
from datetime import date
from typing import List, Optional
import logging

from app.database.connection import get_db
from app.database.models import Island as IslandModel, Hotel as HotelModel, Event as EventModel
from app.models.catalog import Event, Hotel, Island
from app.models.itinerary import ItineraryItem
from app.services.catalog_filters import (
    EVENT_CANDIDATE_LIMIT,
    HOTEL_CANDIDATE_LIMIT,
    ISLAND_CANDIDATE_LIMIT,
    HotelSort,
    build_candidates,
    filter_events,
    filter_hotels,
    search_candidates,
)

router = APIRouter()
logger = logging.getLogger(__name__)


async def load_islands(db: AsyncSession, limit: Optional[int] = None) -> List[Island]:
    stmt = select(IslandModel).order_by(IslandModel.name)
    if limit:
        stmt = stmt.limit(limit)
    result = await db.execute(stmt)
    return [Island.model_validate(i) for i in result.scalars().all()]


async def load_hotels(db: AsyncSession, limit: Optional[int] = None) -> List[Hotel]:
    stmt = select(HotelModel).options(orm.selectinload(HotelModel.island)).order_by(HotelModel.name)
    if limit:
        stmt = stmt.limit(limit)
    result = await db.execute(stmt)
    return [Hotel.model_validate(h) for h in result.scalars().all()]


async def load_events(db: AsyncSession, limit: Optional[int] = None) -> List[Event]:
    stmt = select(EventModel).options(orm.selectinload(EventModel.island)).order_by(EventModel.start_date)
    if limit:
        stmt = stmt.limit(limit)
    result = await db.execute(stmt)
    return [Event.model_validate(e) for e in result.scalars().all()]


@router.get("/islands", response_model=List[Island])
async def get_islands(db: AsyncSession = Depends(get_db)):
    return await load_islands(db)


@router.get("/islands/{slug}", response_model=Island)
async def get_island(slug: str, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(IslandModel).where(IslandModel.slug == slug))
    island = result.scalars().first()
    if not island:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Island not found.")
    return Island.model_validate(island)


@router.get("/hotels", response_model=List[Hotel])
async def get_hotels(
        q: str = "",
        stars: List[int] = Query([]),
        islands: List[str] = Query([]),
        price_ranges: List[str] = Query([]),
        amenities: List[str] = Query([]),
        sort_by: HotelSort = "rating",
        db: AsyncSession = Depends(get_db),
):
    hotels = await load_hotels(db)
    return filter_hotels(hotels, query=q, star_ratings=stars, island_slugs=islands,
                         price_ranges=price_ranges, amenities=amenities, sort_by=sort_by)


@router.get("/hotels/{hotel_id}", response_model=Hotel)
async def get_hotel(hotel_id: str, db: AsyncSession = Depends(get_db)):
    stmt = select(HotelModel).options(orm.selectinload(HotelModel.island)).where(HotelModel.id == hotel_id)
    result = await db.execute(stmt)
    hotel = result.scalars().first()
    if not hotel:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Hotel not found.")
    return Hotel.model_validate(hotel)


@router.get("/events", response_model=List[Event])
async def get_events(
        q: str = "",
        types: List[str] = Query([]),
        islands: List[str] = Query([]),
        start: Optional[date] = None,
        end: Optional[date] = None,
        db: AsyncSession = Depends(get_db),
):
    events = await load_events(db)
    return filter_events(events, query=q, event_types=types, island_slugs=islands, start=start, end=end)


@router.get("/events/{event_id}", response_model=Event)
async def get_event(event_id: str, db: AsyncSession = Depends(get_db)):
    stmt = select(EventModel).options(orm.selectinload(EventModel.island)).where(EventModel.id == event_id)
    result = await db.execute(stmt)
    event = result.scalars().first()
    if not event:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found.")
    return Event.model_validate(event)


@router.get("/catalog/candidates", response_model=List[ItineraryItem])
async def get_itinerary_candidates(search: str = "", category: str = "all", db: AsyncSession = Depends(get_db)):
    try:
        candidates = build_candidates(
            await load_islands(db, ISLAND_CANDIDATE_LIMIT),
            await load_events(db, EVENT_CANDIDATE_LIMIT),
            await load_hotels(db, HOTEL_CANDIDATE_LIMIT),
        )
    except Exception as e:
        logger.error(f"Error loading items: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to load catalog.")
    return search_candidates(candidates, search, category)
