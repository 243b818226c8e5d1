# backend/app/agents/itinerary_agent.py

from typing import Any, Dict, Optional

from app.core.llm import ModelFallbackInvoker
from app.core.logger import logger


ITINERARY_SCHEMA = """{
    "tripTitle": "Title of the trip",
    "destination": "%(destination)s",
    "days": [
        {
            "dayNumber": 1,
            "theme": "Day theme",
            "activities": [
                {
                    "time": "09:00",
                    "activity": "Description",
                    "location": "Place",
                    "lat": 0.0,
                    "lng": 0.0,
                    "image_prompt": "Short visual description of the place for a photo search"
                }
            ]
        }
    ],
    "tips": ["Tip 1"],
    "smart_features": {
        "budget_estimator": {
            "total_estimated": 0,
            "currency": "EUR",
            "breakdown": {"flights": 0, "accommodation": 0, "activities": 0, "food": 0},
            "budget_tips": ["Tip"]
        },
        "packing_list": {
            "weather_forecast": "Expected weather for the travel dates",
            "essentials": ["Item"]
        },
        "local_vibe": {
            "etiquette_tips": ["Tip"],
            "survival_phrases": [
                {"original": "Phrase", "pronunciation": "How to say it", "meaning": "English meaning"}
            ]
        }
    }
}"""

INSIGHTS_SCHEMA = """{
    "apps": [
        {
            "name": "Name of app (e.g. Grab, Suica)",
            "category": "Reason (Transport, Food, Chat)",
            "description": "Short explanation why it's needed"
        }
    ],
    "visa": {
        "summary": "Concise summary of visa rules for EU/US citizens (e.g. 'Visa-free for 90 days')",
        "warning": "Any important warning (e.g. 'Must have return ticket')"
    },
    "emergency": {
        "police": "Number",
        "ambulance": "Number"
    }
}"""


# ---------------------------------------------------------------------------
# PROMPTS
# ---------------------------------------------------------------------------
def build_itinerary_prompt(destination: str, preferences: Optional[str] = None) -> str:
    # destination/preferences go in verbatim, only length-checked upstream
    return f"""
Create a detailed travel itinerary for {destination}.
Preferences: {preferences or "No specific preferences"}.

Return ONLY a JSON object with this exact structure:
{ITINERARY_SCHEMA % {"destination": destination}}

VERY IMPORTANT: For each activity, specify the approximate "lat" (latitude) and
"lng" (longitude) for its location so it can be shown on a map.
Use 24h "HH:MM" times and number the days from 1.
"""


def build_insights_prompt(destination: str) -> str:
    return f"""
Provide a practical 'Travel Toolkit' for a tourist visiting {destination}.
Focus on digital tools, entry requirements, and safety.

Return ONLY a valid JSON object with this structure:
{INSIGHTS_SCHEMA}

Limit "apps" to the top 4-5 absolutely essential local apps.
"""


# ---------------------------------------------------------------------------
# AGENT
# ---------------------------------------------------------------------------
class ItineraryAgent:
    """Builds prompts and sends them through the model fallback chain."""

    def __init__(self, invoker: Optional[ModelFallbackInvoker] = None):
        self.invoker = invoker or ModelFallbackInvoker()

    def generate_itinerary(self, destination: str, preferences: Optional[str] = None) -> Dict[str, Any]:
        logger.info(f"Generating itinerary for: {destination}")
        itinerary = self.invoker.invoke(build_itinerary_prompt(destination, preferences))
        days = itinerary.get("days")
        logger.info(
            f"Itinerary for {destination}: {len(days) if isinstance(days, list) else 0} day(s)"
        )
        return itinerary

    def generate_insights(self, destination: str) -> Dict[str, Any]:
        logger.info(f"Generating travel insights for: {destination}")
        return self.invoker.invoke(build_insights_prompt(destination), json_mode=True)
