# backend/app/api/routes_trips.py

from datetime import date
from typing import Any, Dict, Optional, Tuple
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from app.core.errors import ApiError
from app.core.logger import logger
from app.core.security import get_current_user, get_optional_user
from app.db.sqlite_store import get_store
from app.models.trip_models import (
    CreateTripIn,
    DeleteTripIn,
    ShareTripIn,
    TripDetailOut,
    TripEnvelope,
    TripListOut,
)
from app.utils.ics_export import build_calendar

router = APIRouter(prefix="/api/trips", tags=["trips"])


def _visible_trip(trip_id: UUID, user: Optional[Dict[str, Any]]) -> Tuple[Dict[str, Any], bool]:
    """Public trips are readable by anyone; private ones only by their owner."""
    trip = get_store().get_trip(str(trip_id))
    if not trip:
        raise ApiError.not_found("Trip not found")

    is_owner = bool(user) and user["id"] == trip["user_id"]
    if not trip["is_public"] and not is_owner:
        raise ApiError.forbidden("This trip is private")
    return trip, is_owner


# --------------------------
# List own trips
# --------------------------
@router.get("", response_model=TripListOut)
def list_trips(user: Dict[str, Any] = Depends(get_current_user)):
    return {"trips": get_store().list_trips(user["id"])}


# --------------------------
# Save a trip
# --------------------------
@router.post("", response_model=TripEnvelope, status_code=201)
def create_trip(data: CreateTripIn, user: Dict[str, Any] = Depends(get_current_user)):
    trip = get_store().create_trip(
        user_id=user["id"],
        destination=data.destination,
        title=data.title,
        itinerary=data.itinerary.model_dump(exclude_unset=True),
    )
    logger.info(f"User {user['id']} saved trip {trip['id']} ({data.destination})")
    return {"trip": trip}


# --------------------------
# Delete (owner-scoped)
# --------------------------
@router.delete("")
def delete_trip(data: DeleteTripIn, user: Dict[str, Any] = Depends(get_current_user)):
    deleted = get_store().delete_trip(str(data.id), user["id"])
    if not deleted:
        logger.info(f"Delete of trip {data.id} by {user['id']} matched no owned row")
    return {"success": True}


# --------------------------
# Get one trip
# --------------------------
@router.get("/{trip_id}", response_model=TripDetailOut)
def get_trip(trip_id: UUID, user: Optional[Dict[str, Any]] = Depends(get_optional_user)):
    trip, is_owner = _visible_trip(trip_id, user)
    return {"trip": trip, "isOwner": is_owner}


# --------------------------
# Sharing toggle (owner only)
# --------------------------
@router.put("/{trip_id}/share", response_model=TripEnvelope)
def update_sharing(trip_id: UUID, data: ShareTripIn,
                   user: Dict[str, Any] = Depends(get_current_user)):
    db = get_store()
    trip = db.get_trip(str(trip_id))
    if not trip:
        raise ApiError.not_found("Trip not found")
    if trip["user_id"] != user["id"]:
        raise ApiError.forbidden("Only the owner can change sharing")

    updated = db.set_trip_public(str(trip_id), user["id"], data.is_public)
    if updated is None:
        raise ApiError.not_found("Trip not found")
    logger.info(f"Trip {trip_id} is_public={data.is_public}")
    return {"trip": updated}


# --------------------------
# Calendar export
# --------------------------
@router.get("/{trip_id}/calendar")
def export_calendar(
    trip_id: UUID,
    start_date: Optional[date] = Query(None),
    user: Optional[Dict[str, Any]] = Depends(get_optional_user),
):
    trip, _ = _visible_trip(trip_id, user)
    ics = build_calendar(trip["itinerary"], start_date or date.today(), uid_prefix=trip["id"])

    filename = "".join(c if c.isalnum() else "_" for c in trip["title"]) or "trip"
    return Response(
        content=ics,
        media_type="text/calendar",
        headers={"Content-Disposition": f'attachment; filename="{filename}.ics"'},
    )
