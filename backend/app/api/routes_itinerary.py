# backend/app/api/routes_itinerary.py

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request

from app.agents.itinerary_agent import ItineraryAgent
from app.core.config_loader import settings
from app.core.logger import logger
from app.core.rate_limit import ai_limit
from app.core.security import get_optional_user
from app.db.sqlite_store import get_store
from app.models.itinerary_models import GenerateItineraryIn

router = APIRouter(prefix="/api/itinerary", tags=["itinerary"])
agent = ItineraryAgent()


def _silent_save(user_id: str, destination: str, itinerary: Dict[str, Any]) -> None:
    """Best-effort copy of a fresh itinerary into the caller's trips. Never raises."""
    try:
        trip = get_store().create_trip(
            user_id=user_id,
            destination=str(itinerary.get("destination") or destination),
            title=str(itinerary.get("tripTitle") or f"Trip to {destination}"),
            itinerary=itinerary,
        )
        logger.info(f"Auto-saved generated itinerary as trip {trip['id']}")
    except Exception as e:
        logger.error(f"Database save error (skipped): {e}")


@router.post("/generate")
@ai_limit
def generate_itinerary(
    request: Request,
    data: GenerateItineraryIn,
    user: Optional[Dict[str, Any]] = Depends(get_optional_user),
):
    itinerary = agent.generate_itinerary(data.destination, data.preferences)

    if settings.AUTO_SAVE_GENERATED and user:
        _silent_save(user["id"], data.destination, itinerary)

    return itinerary
