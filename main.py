# file: main.py

from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncSession
from dotenv import load_dotenv
import logging
import os

load_dotenv()

logging.basicConfig(level=logging.INFO)

from app.controllers.catalog import router as catalog_router
from app.controllers.itinerary import router as itinerary_router
from app.controllers.recommendations import router as recommendations_router
from app.controllers.trips import router as trips_router
from app.database.connection import get_db, init_db
from app.services.trip_service import check_connection

CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    yield


app = FastAPI(title="Island Trips API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(itinerary_router, prefix="/api/itinerary", tags=["itinerary"])
app.include_router(trips_router, prefix="/api/trips", tags=["trips"])
app.include_router(catalog_router, prefix="/api", tags=["catalog"])
app.include_router(recommendations_router, prefix="/api", tags=["recommendations"])


@app.get("/")
async def root():
    return {"message": "Island Trips API is running"}


@app.get("/health")
async def health(db: AsyncSession = Depends(get_db)):
    connected = await check_connection(db)
    return {"status": "ok" if connected else "degraded", "database": connected}
