# file: services/trip_service.py

import logging
from typing import List, Optional, Tuple

from sqlalchemy import select, delete, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.models import (
    Trip as TripModel,
    TripItem as TripItemModel,
    TripComment as TripCommentModel,
    TripCollaborator as TripCollaboratorModel,
)
from app.models.trip import TripCreate, TripItemCreate, TripUpdate
from app.services.sharing import generate_short_id

logger = logging.getLogger(__name__)

SHORT_ID_ATTEMPTS = 5


async def is_short_id_available(db: AsyncSession, short_id: str) -> bool:
    try:
        result = await db.execute(select(TripModel.id).where(TripModel.short_id == short_id))
        return result.scalars().first() is None
    except Exception as e:
        logger.error(f"Error checking short ID availability: {e}", exc_info=True)
        return False


async def _new_short_id(db: AsyncSession) -> Optional[str]:
    for _ in range(SHORT_ID_ATTEMPTS):
        candidate = generate_short_id()
        if await is_short_id_available(db, candidate):
            return candidate
        logger.warning(f"Short ID collision on {candidate}, generating another")
    return None


def _item_rows(trip_id: str, items: List[TripItemCreate]) -> List[TripItemModel]:
    return [TripItemModel(**item.model_dump(), trip_id=trip_id) for item in items]


async def save_trip(db: AsyncSession, trip_data: TripCreate,
                    items: List[TripItemCreate]) -> Optional[TripModel]:
    """
    Inserts the trip row, then its items. When the items insert fails the
    trip row is deleted again so no trip is left without its itinerary.
    There is no transaction spanning both steps.
    """
    short_id = await _new_short_id(db)
    if not short_id:
        logger.error("Could not allocate a free short ID for the trip")
        return None

    db_trip = TripModel(**trip_data.model_dump(), short_id=short_id)
    try:
        db.add(db_trip)
        await db.commit()
        await db.refresh(db_trip)
    except Exception as e:
        await db.rollback()
        logger.error(f"Error saving trip: {e}", exc_info=True)
        return None

    trip_id = db_trip.id
    if items:
        try:
            db.add_all(_item_rows(trip_id, items))
            await db.commit()
        except Exception as e:
            await db.rollback()
            logger.error(f"Error saving trip items for {short_id}: {e}", exc_info=True)
            try:
                # The session was rolled back, so the trip instance is expired; skip session sync.
                await db.execute(
                    delete(TripModel)
                    .where(TripModel.id == trip_id)
                    .execution_options(synchronize_session=False)
                )
                await db.commit()
            except Exception as cleanup_error:
                await db.rollback()
                logger.error(f"Failed to remove orphaned trip {trip_id}: {cleanup_error}", exc_info=True)
            return None

    logger.info(f"Trip saved successfully with short_id: {short_id}")
    return db_trip


async def load_trip_by_short_id(db: AsyncSession,
                                short_id: str) -> Optional[Tuple[TripModel, List[TripItemModel]]]:
    try:
        db_trip = await get_trip_by_short_id(db, short_id)
    except Exception as e:
        logger.error(f"Error loading trip {short_id}: {e}", exc_info=True)
        return None
    if db_trip is None:
        return None
    trip_id = db_trip.id

    # A lost view-count update is tolerated.
    try:
        db_trip.views_count = (db_trip.views_count or 0) + 1
        await db.commit()
        await db.refresh(db_trip)
    except Exception as e:
        await db.rollback()
        logger.warning(f"Could not increment views for trip {short_id}: {e}")
        try:
            await db.refresh(db_trip)
        except Exception as reload_error:
            logger.error(f"Error reloading trip {short_id}: {reload_error}", exc_info=True)
            return None

    return db_trip, await get_trip_items(db, trip_id)


async def get_trip_items(db: AsyncSession, trip_id: str) -> List[TripItemModel]:
    try:
        stmt = (
            select(TripItemModel)
            .where(TripItemModel.trip_id == trip_id)
            .order_by(TripItemModel.day.asc(), TripItemModel.sort_order.asc())
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())
    except Exception as e:
        logger.error(f"Error loading trip items for {trip_id}: {e}", exc_info=True)
        return []


async def get_trip_by_short_id(db: AsyncSession, short_id: str) -> Optional[TripModel]:
    result = await db.execute(select(TripModel).where(TripModel.short_id == short_id))
    return result.scalars().first()


async def update_trip(db: AsyncSession, trip_id: str, trip_data: TripUpdate,
                      items: List[TripItemCreate]) -> bool:
    """Updates the trip row, then replaces its whole item set."""
    try:
        db_trip = await db.get(TripModel, trip_id)
        if db_trip is None:
            logger.warning(f"Cannot update missing trip {trip_id}")
            return False
        for field, value in trip_data.model_dump(exclude_unset=True).items():
            setattr(db_trip, field, value)
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(f"Error updating trip {trip_id}: {e}", exc_info=True)
        return False

    try:
        await db.execute(delete(TripItemModel).where(TripItemModel.trip_id == trip_id))
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(f"Error deleting old trip items for {trip_id}: {e}", exc_info=True)
        return False

    if items:
        try:
            db.add_all(_item_rows(trip_id, items))
            await db.commit()
        except Exception as e:
            await db.rollback()
            logger.error(f"Error updating trip items for {trip_id}: {e}", exc_info=True)
            return False

    return True


async def get_trip(db: AsyncSession, trip_id: str) -> Optional[TripModel]:
    return await db.get(TripModel, trip_id)


async def get_public_trips(db: AsyncSession, limit: int = 10) -> List[TripModel]:
    try:
        stmt = (
            select(TripModel)
            .where(TripModel.is_public.is_(True))
            .order_by(TripModel.created_at.desc())
            .limit(limit)
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())
    except Exception as e:
        logger.error(f"Error loading public trips: {e}", exc_info=True)
        return []


async def add_comment(db: AsyncSession, trip_id: str, author_email: str,
                      author_name: Optional[str], content: str) -> Optional[TripCommentModel]:
    db_comment = TripCommentModel(
        trip_id=trip_id,
        author_email=author_email,
        author_name=author_name or "Anonymous",
        content=content,
    )
    try:
        db.add(db_comment)
        await db.commit()
        await db.refresh(db_comment)
    except Exception as e:
        await db.rollback()
        logger.error(f"Error adding comment to trip {trip_id}: {e}", exc_info=True)
        return None

    try:
        await db.execute(
            update(TripModel)
            .where(TripModel.id == trip_id)
            .values(comments_count=TripModel.comments_count + 1)
        )
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.warning(f"Could not increment comment count for trip {trip_id}: {e}")

    return db_comment


async def get_trip_comments(db: AsyncSession, trip_id: str) -> List[TripCommentModel]:
    try:
        stmt = (
            select(TripCommentModel)
            .where(TripCommentModel.trip_id == trip_id)
            .order_by(TripCommentModel.created_at.desc())
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())
    except Exception as e:
        logger.error(f"Error loading comments for trip {trip_id}: {e}", exc_info=True)
        return []


async def add_collaborator(db: AsyncSession, trip_id: str, email: str,
                           role: str = "viewer") -> Optional[TripCollaboratorModel]:
    db_collaborator = TripCollaboratorModel(trip_id=trip_id, email=email, role=role)
    try:
        db.add(db_collaborator)
        await db.commit()
        await db.refresh(db_collaborator)
        return db_collaborator
    except Exception as e:
        await db.rollback()
        logger.error(f"Error adding collaborator to trip {trip_id}: {e}", exc_info=True)
        return None


async def get_trip_collaborators(db: AsyncSession, trip_id: str) -> List[TripCollaboratorModel]:
    try:
        result = await db.execute(
            select(TripCollaboratorModel).where(TripCollaboratorModel.trip_id == trip_id)
        )
        return list(result.scalars().all())
    except Exception as e:
        logger.error(f"Error loading collaborators for trip {trip_id}: {e}", exc_info=True)
        return []


async def like_trip(db: AsyncSession, trip_id: str) -> bool:
    try:
        result = await db.execute(
            update(TripModel)
            .where(TripModel.id == trip_id)
            .values(likes_count=TripModel.likes_count + 1)
        )
        await db.commit()
        return result.rowcount > 0
    except Exception as e:
        await db.rollback()
        logger.error(f"Error liking trip {trip_id}: {e}", exc_info=True)
        return False


async def check_connection(db: AsyncSession) -> bool:
    try:
        await db.execute(select(TripModel.id).limit(1))
        return True
    except Exception as e:
        logger.error(f"Database connection test failed: {e}", exc_info=True)
        return False
