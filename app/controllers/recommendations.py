from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging

from app.controllers.catalog import load_events, load_hotels, load_islands
from app.database.connection import get_db
from app.models.recommendations import Recommendation, RecommendationRequest
from app.services.match_scorer import recommend

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/recommendations", response_model=List[Recommendation])
async def get_recommendations(request: RecommendationRequest, db: AsyncSession = Depends(get_db)):
    try:
        islands = await load_islands(db)
        events = await load_events(db)
        hotels = await load_hotels(db)
    except Exception as e:
        logger.error(f"Error generating recommendations: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                            detail="Could not load the catalog for recommendations.")
    return recommend(islands, events, hotels, request.preferences, request.dismissed)
