from sqlalchemy.orm import relationship
from sqlalchemy import Column, Integer, String, Date, Text, Boolean, JSON, ForeignKey, Float, DateTime, func
import uuid

from app.database.connection import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class Island(Base):
    __tablename__ = "islands"
    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    country = Column(String(255), nullable=True)
    climate = Column(String(100), nullable=True)
    area_km2 = Column(Float, nullable=True)
    image_url = Column(Text, nullable=True)
    featured = Column(Boolean, default=False)
    hotels = relationship("Hotel", back_populates="island")
    events = relationship("Event", back_populates="island")


class Hotel(Base):
    __tablename__ = "hotels"
    id = Column(String(36), primary_key=True, default=_uuid)
    island_id = Column(String(36), ForeignKey("islands.id"), nullable=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(String(100), nullable=True)
    star_rating = Column(Integer, nullable=True)
    rating = Column(Float, nullable=True)
    price_range = Column(String(10), nullable=True)
    price_per_night = Column(Float, nullable=True)
    amenities = Column(JSON, nullable=True)
    location = Column(String(255), nullable=True)
    image_url = Column(Text, nullable=True)
    island = relationship("Island", back_populates="hotels")


class Event(Base):
    __tablename__ = "events"
    id = Column(String(36), primary_key=True, default=_uuid)
    island_id = Column(String(36), ForeignKey("islands.id"), nullable=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(String(100), nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    start_time = Column(String(10), nullable=True)
    location = Column(String(255), nullable=True)
    price = Column(Float, nullable=True)
    capacity = Column(Integer, nullable=True)
    featured = Column(Boolean, default=False)
    image_url = Column(Text, nullable=True)
    island = relationship("Island", back_populates="events")


class Trip(Base):
    __tablename__ = "trips"
    id = Column(String(36), primary_key=True, default=_uuid)
    short_id = Column(String(8), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    travelers = Column(Integer, default=1, nullable=False)
    budget = Column(Float, nullable=True)
    is_public = Column(Boolean, default=False, nullable=False)
    allow_comments = Column(Boolean, default=True, nullable=False)
    allow_collaboration = Column(Boolean, default=False, nullable=False)
    cover_image_url = Column(Text, nullable=True)
    tags = Column(JSON, nullable=True)
    views_count = Column(Integer, default=0, nullable=False)
    likes_count = Column(Integer, default=0, nullable=False)
    comments_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
    items = relationship("TripItem", back_populates="trip", cascade="all, delete-orphan")
    comments = relationship("TripComment", back_populates="trip", cascade="all, delete-orphan")
    collaborators = relationship("TripCollaborator", back_populates="trip", cascade="all, delete-orphan")


class TripItem(Base):
    __tablename__ = "trip_items"
    id = Column(String(36), primary_key=True, default=_uuid)
    trip_id = Column(String(36), ForeignKey("trips.id"), nullable=False, index=True)
    type = Column(String(20), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    day = Column(Integer, nullable=False)
    time = Column(String(10), nullable=True)
    duration = Column(String(50), nullable=True)
    location = Column(String(255), nullable=True)
    price = Column(Float, default=0, nullable=False)
    image_url = Column(Text, nullable=True)
    category = Column(String(100), nullable=True)
    rating = Column(Float, nullable=True)
    external_id = Column(String(255), nullable=True)
    external_type = Column(String(20), nullable=True)
    sort_order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    trip = relationship("Trip", back_populates="items")


class TripComment(Base):
    __tablename__ = "trip_comments"
    id = Column(String(36), primary_key=True, default=_uuid)
    trip_id = Column(String(36), ForeignKey("trips.id"), nullable=False, index=True)
    author_email = Column(String(255), nullable=False)
    author_name = Column(String(255), nullable=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    trip = relationship("Trip", back_populates="comments")


class TripCollaborator(Base):
    __tablename__ = "trip_collaborators"
    id = Column(String(36), primary_key=True, default=_uuid)
    trip_id = Column(String(36), ForeignKey("trips.id"), nullable=False, index=True)
    email = Column(String(255), nullable=False)
    role = Column(String(50), default="viewer", nullable=False)
    invited_at = Column(DateTime, server_default=func.now())
    accepted_at = Column(DateTime, nullable=True)
    trip = relationship("Trip", back_populates="collaborators")
