# backend/app/models/itinerary_models.py

from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, Any, List, Optional


# -------------------------
# Generated itinerary document
# -------------------------
class Activity(BaseModel):
    model_config = ConfigDict(extra="allow")

    time: str
    activity: str
    location: str
    lat: Optional[float] = None
    lng: Optional[float] = None
    image_prompt: Optional[str] = None


class Day(BaseModel):
    model_config = ConfigDict(extra="allow")

    # not guaranteed contiguous, the model picks these
    dayNumber: int
    theme: str
    activities: List[Activity]


class Itinerary(BaseModel):
    model_config = ConfigDict(extra="allow")

    tripTitle: str
    destination: str
    days: List[Day]
    tips: Optional[List[str]] = None
    # budget_estimator / packing_list / local_vibe, stored as the model wrote them
    smart_features: Optional[Dict[str, Any]] = None


# -------------------------
# Requests
# -------------------------
class GenerateItineraryIn(BaseModel):
    destination: str = Field(..., min_length=1, max_length=200)
    preferences: Optional[str] = Field(None, max_length=1000)


class InsightsIn(BaseModel):
    destination: str = Field(..., min_length=2, max_length=200)
