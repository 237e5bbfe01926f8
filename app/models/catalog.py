from pydantic import BaseModel, ConfigDict
from typing import List, Optional
from datetime import date


class IslandRef(BaseModel):
    name: str
    slug: str
    location: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class Island(BaseModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    location: Optional[str] = None
    country: Optional[str] = None
    climate: Optional[str] = None
    area_km2: Optional[float] = None
    image_url: Optional[str] = None
    featured: Optional[bool] = None

    model_config = ConfigDict(from_attributes=True)


class Hotel(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    type: Optional[str] = None
    star_rating: Optional[int] = None
    rating: Optional[float] = None
    price_range: Optional[str] = None
    price_per_night: Optional[float] = None
    amenities: Optional[List[str]] = None
    location: Optional[str] = None
    image_url: Optional[str] = None
    island_id: Optional[str] = None
    island: Optional[IslandRef] = None

    model_config = ConfigDict(from_attributes=True)


class Event(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    type: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None
    start_time: Optional[str] = None
    location: Optional[str] = None
    price: Optional[float] = None
    capacity: Optional[int] = None
    featured: Optional[bool] = None
    image_url: Optional[str] = None
    island_id: Optional[str] = None
    island: Optional[IslandRef] = None

    model_config = ConfigDict(from_attributes=True)
