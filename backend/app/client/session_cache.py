# backend/app/client/session_cache.py

import json
from datetime import date
from typing import Any, Dict, MutableMapping, Optional, Union

from app.core.logger import logger


NO_DATE = "no-date"
KEY_PREFIX = "itinerary:"


def cache_key(destination: str, travel_date: Optional[Union[date, str]] = None) -> str:
    if isinstance(travel_date, date):
        travel_date = travel_date.isoformat()
    return f"{KEY_PREFIX}{destination.strip().lower()}|{travel_date or NO_DATE}"


class SessionItineraryCache:
    """
    Itineraries already generated in this planner session.

    Entries are JSON strings, like a browser's sessionStorage. No size bound
    and no expiry: the cache lives exactly as long as the session object.
    A corrupt entry is dropped and reported as a miss.
    """

    def __init__(self, storage: Optional[MutableMapping[str, str]] = None):
        self._storage: MutableMapping[str, str] = storage if storage is not None else {}

    def get(self, destination: str, travel_date: Optional[Union[date, str]] = None) -> Optional[Dict[str, Any]]:
        key = cache_key(destination, travel_date)
        raw = self._storage.get(key)
        if raw is None:
            return None
        try:
            value = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning(f"Dropping corrupt cached itinerary under {key}")
            del self._storage[key]
            return None
        if not isinstance(value, dict):
            del self._storage[key]
            return None
        return value

    def set(self, destination: str, travel_date: Optional[Union[date, str]], itinerary: Dict[str, Any]) -> None:
        self._storage[cache_key(destination, travel_date)] = json.dumps(itinerary)

    def clear(self) -> None:
        for key in [k for k in self._storage if k.startswith(KEY_PREFIX)]:
            del self._storage[key]

    def __len__(self) -> int:
        return sum(1 for k in self._storage if k.startswith(KEY_PREFIX))
