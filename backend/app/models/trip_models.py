# backend/app/models/trip_models.py

from uuid import UUID

from pydantic import BaseModel, Field, StrictBool
from typing import Dict, Any, List

from app.models.itinerary_models import Itinerary


class CreateTripIn(BaseModel):
    # no is_public here: extra keys are ignored and new trips start private
    destination: str = Field(..., min_length=1, max_length=200)
    title: str = Field(..., min_length=1, max_length=200)
    itinerary: Itinerary


class ShareTripIn(BaseModel):
    is_public: StrictBool


class DeleteTripIn(BaseModel):
    id: UUID


class TripOut(BaseModel):
    id: str
    user_id: str
    destination: str
    title: str
    itinerary: Dict[str, Any]
    is_public: bool
    created_at: str


class TripEnvelope(BaseModel):
    trip: TripOut


class TripDetailOut(TripEnvelope):
    isOwner: bool


class TripListOut(BaseModel):
    trips: List[TripOut]
