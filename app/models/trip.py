from pydantic import BaseModel, EmailStr, ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import date, datetime

from app.models.itinerary import ItineraryItem


class TripBase(BaseModel):
    name: str
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    travelers: int = Field(default=1, ge=1)
    budget: Optional[float] = Field(default=None, ge=0)
    is_public: bool = False
    allow_comments: bool = True
    allow_collaboration: bool = False
    cover_image_url: Optional[str] = None
    tags: Optional[List[str]] = None

    @field_validator('name')
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Trip name cannot be empty')
        return v.strip()


class TripCreate(TripBase):
    pass


class TripUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    travelers: Optional[int] = Field(default=None, ge=1)
    budget: Optional[float] = Field(default=None, ge=0)
    is_public: Optional[bool] = None
    allow_comments: Optional[bool] = None
    allow_collaboration: Optional[bool] = None
    cover_image_url: Optional[str] = None
    tags: Optional[List[str]] = None


class TripItemCreate(BaseModel):
    type: str
    title: str
    description: Optional[str] = None
    day: int = Field(ge=1)
    time: Optional[str] = None
    duration: Optional[str] = None
    location: Optional[str] = None
    price: float = Field(default=0, ge=0)
    image_url: Optional[str] = None
    category: Optional[str] = None
    rating: Optional[float] = None
    external_id: Optional[str] = None
    external_type: Optional[str] = None
    sort_order: int = 0


class TripItemResponse(TripItemCreate):
    id: str
    trip_id: str

    model_config = ConfigDict(from_attributes=True)


class TripResponse(TripBase):
    id: str
    short_id: str
    views_count: int = 0
    likes_count: int = 0
    comments_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TripSaveRequest(BaseModel):
    trip: TripCreate
    items: List[ItineraryItem] = []


class TripUpdateRequest(BaseModel):
    trip: TripUpdate
    items: List[ItineraryItem] = []


class TripSaveResponse(BaseModel):
    trip: TripResponse
    short_id: str
    share_url: str


class TripWithItems(BaseModel):
    trip: TripResponse
    items: List[TripItemResponse]
    total_days: int
    total_cost: float
    share_url: str


class CommentCreate(BaseModel):
    author_email: EmailStr
    author_name: Optional[str] = None
    content: str

    @field_validator('content')
    def validate_content(cls, v):
        if not v.strip():
            raise ValueError('Comment cannot be empty')
        return v.strip()


class CommentResponse(BaseModel):
    id: str
    trip_id: str
    author_email: str
    author_name: Optional[str] = None
    content: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CollaboratorCreate(BaseModel):
    email: EmailStr
    role: str = "viewer"


class CollaboratorResponse(BaseModel):
    id: str
    trip_id: str
    email: str
    role: str
    invited_at: Optional[datetime] = None
    accepted_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
