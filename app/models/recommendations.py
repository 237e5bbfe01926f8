from pydantic import BaseModel, Field, field_validator
from typing import List, Literal, Tuple


class UserPreferences(BaseModel):
    travelStyle: List[str] = []
    interests: List[str] = []
    budgetRange: Tuple[float, float] = (1000, 5000)
    groupSize: int = Field(default=2, ge=1)
    duration: int = Field(default=7, ge=1)
    activityLevel: str = "moderate"
    accommodationType: List[str] = []
    diningPreferences: List[str] = []

    @field_validator('budgetRange')
    def validate_budget_range(cls, v):
        low, high = v
        if low < 0 or high < low:
            raise ValueError('Budget range must be non-negative and ordered')
        return v


class Recommendation(BaseModel):
    id: str
    type: Literal["island", "activity", "hotel"]
    title: str
    description: str = ""
    image_url: str = ""
    location: str = ""
    price: float = 0
    rating: float
    matchScore: float
    reasons: List[str] = []
    tags: List[str] = []


class RecommendationRequest(BaseModel):
    preferences: UserPreferences = UserPreferences()
    dismissed: List[str] = []
