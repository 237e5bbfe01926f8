from pydantic import BaseModel, Field
from typing import List, Literal, Optional

ItemType = Literal["island", "activity", "hotel", "event"]


class ItineraryItem(BaseModel):
    id: str
    type: ItemType
    title: str
    description: Optional[str] = ""
    location: Optional[str] = ""
    day: int = Field(default=1, ge=1)
    # "HH:MM" shaped, only used for ordering within a day
    time: Optional[str] = ""
    duration: Optional[str] = ""
    price: float = Field(default=0, ge=0)
    image: Optional[str] = None
    category: Optional[str] = None
    rating: Optional[float] = None


class TripDetails(BaseModel):
    name: str = "My Island Adventure"
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    travelers: int = Field(default=2, ge=1)
    budget: float = Field(default=5000, ge=0)


class TripDetailsUpdate(BaseModel):
    name: Optional[str] = None
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    travelers: Optional[int] = Field(default=None, ge=1)
    budget: Optional[float] = Field(default=None, ge=0)


class ItineraryState(BaseModel):
    trip: TripDetails = TripDetails()
    items: List[ItineraryItem] = []
    selectedDay: int = Field(default=1, ge=1)


class DaySlot(BaseModel):
    day: int
    items: List[ItineraryItem] = []


class ItinerarySummary(BaseModel):
    state: ItineraryState
    totalDays: int
    totalCost: float
    days: List[DaySlot]


class AddItemRequest(BaseModel):
    state: ItineraryState
    candidate: ItineraryItem
    day: Optional[int] = Field(default=None, ge=1)


class RemoveItemRequest(BaseModel):
    state: ItineraryState
    item_id: str


class MoveItemRequest(BaseModel):
    state: ItineraryState
    item_id: str
    new_day: int


class SelectDayRequest(BaseModel):
    state: ItineraryState
    day: int


class TripDetailsRequest(BaseModel):
    state: ItineraryState
    details: TripDetailsUpdate


class DateValidationResponse(BaseModel):
    valid: bool
    error: Optional[str] = None
