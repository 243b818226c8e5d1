# backend/app/services/google_places_service.py

import requests
from typing import Any, Dict, List, Optional

from app.core.config_loader import settings
from app.core.logger import logger


class GooglePlacesService:
    SEARCH_URL = "https://places.googleapis.com/v1/places:searchText"
    MEDIA_URL = "https://places.googleapis.com/v1/{photo_name}/media"

    @property
    def key(self) -> str:
        return settings.GOOGLE_MAPS_API_KEY

    @property
    def enabled(self) -> bool:
        return bool(self.key)

    # -------------------------------------------------------
    # GOOGLE PLACES SEARCH
    # -------------------------------------------------------
    def search_places(self, query: str, limit: int = 1) -> List[Dict[str, Any]]:
        """
        Text Search (New). Only the fields the image lookup needs are requested.
        """
        payload = {
            "textQuery": query,
            "maxResultCount": min(limit, 20),
            "languageCode": "en",
        }
        headers = {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self.key,
            "X-Goog-FieldMask": "places.displayName,places.formattedAddress,places.photos",
        }

        try:
            logger.debug(f"Searching places with query: {query}")
            resp = requests.post(self.SEARCH_URL, json=payload, headers=headers,
                                 timeout=settings.http_timeout_seconds)
            resp.raise_for_status()
            places = resp.json().get("places", [])
            logger.info(f"Found {len(places)} places for query: {query}")
            return places
        except requests.exceptions.HTTPError as e:
            body = e.response.text if e.response is not None else "N/A"
            logger.error(f"HTTP error searching places: {e}, Response: {body}")
            return []
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"Request error searching places: {e}")
            return []

    # -------------------------------------------------------
    # PHOTO URL
    # -------------------------------------------------------
    def find_photo_url(self, query: str, max_width: int = 800) -> Optional[str]:
        if not self.enabled:
            return None

        for place in self.search_places(query):
            photos = place.get("photos") or []
            if photos and photos[0].get("name"):
                photo_name = photos[0]["name"]
                return (
                    self.MEDIA_URL.format(photo_name=photo_name)
                    + f"?maxWidthPx={max_width}&key={self.key}"
                )
        return None
