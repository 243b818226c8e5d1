# backend/app/api/routes_destinations.py

from fastapi import APIRouter, Request

from app.api.routes_itinerary import agent
from app.core.errors import ApiError
from app.core.rate_limit import ai_limit
from app.models.itinerary_models import InsightsIn
from app.services.country_service import CountryService

router = APIRouter(prefix="/api/destinations", tags=["destinations"])
countries = CountryService()


@router.post("/insights")
@ai_limit
def destination_insights(request: Request, data: InsightsIn):
    """Apps, visa and emergency numbers for a destination."""
    return agent.generate_insights(data.destination)


@router.get("/{name}/country")
def country_info(name: str):
    country = countries.get_country(name.strip())
    if not country:
        raise ApiError.not_found(f"No country data for '{name}'")
    return country
