# backend/app/services/country_service.py

import requests
from typing import Any, Dict, List, Optional

from app.core.cache import TTLCache
from app.core.config_loader import settings
from app.core.logger import logger


class CountryService:
    """
    Country facts for a destination page.

    The name lookup falls back to a capital-city lookup (so "Tokyo" finds
    Japan), and coordinates fall back to Nominatim when REST Countries has none.
    """

    REST_COUNTRIES_URL = "https://restcountries.com/v3.1"
    NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"
    USER_AGENT = "travel-planner-backend/1.0"

    def __init__(self, cache: Optional[TTLCache] = None):
        self.cache = cache or TTLCache(settings.country_cache_seconds)

    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Optional[Any]:
        try:
            resp = requests.get(
                url,
                params=params,
                headers={"User-Agent": self.USER_AGENT, "Accept-Language": "en"},
                timeout=settings.http_timeout_seconds,
            )
            if resp.status_code == 404:
                return None
            resp.raise_for_status()
            return resp.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"Country lookup failed for {url}: {e}")
            return None
        except ValueError as e:
            logger.error(f"Invalid JSON from {url}: {e}")
            return None

    def _lookup(self, kind: str, name: str) -> Optional[Dict[str, Any]]:
        data = self._get_json(f"{self.REST_COUNTRIES_URL}/{kind}/{name}", {"fullText": "false"})
        if isinstance(data, list) and data:
            return data[0]
        return None

    def geocode(self, query: str) -> Optional[Dict[str, float]]:
        data = self._get_json(self.NOMINATIM_URL, {
            "q": query,
            "format": "json",
            "addressdetails": 1,
            "limit": 1,
        })
        if not isinstance(data, list) or not data:
            return None
        try:
            return {"lat": float(data[0]["lat"]), "lng": float(data[0]["lon"])}
        except (KeyError, TypeError, ValueError):
            return None

    @staticmethod
    def normalize(raw: Dict[str, Any]) -> Dict[str, Any]:
        name = raw.get("name") or {}
        capital: List[str] = raw.get("capital") or []
        latlng = (raw.get("capitalInfo") or {}).get("latlng") or raw.get("latlng") or []

        return {
            "name": name.get("common"),
            "official_name": name.get("official"),
            "capital": capital[0] if capital else None,
            "region": raw.get("region"),
            "subregion": raw.get("subregion"),
            "population": raw.get("population"),
            "currencies": [
                {"code": code, "name": info.get("name"), "symbol": info.get("symbol")}
                for code, info in (raw.get("currencies") or {}).items()
            ],
            "languages": list((raw.get("languages") or {}).values()),
            "flag": raw.get("flag") or (raw.get("flags") or {}).get("png"),
            "lat": latlng[0] if len(latlng) == 2 else None,
            "lng": latlng[1] if len(latlng) == 2 else None,
        }

    def get_country(self, name: str) -> Optional[Dict[str, Any]]:
        cached = self.cache.get(name)
        if cached:
            return cached

        raw = self._lookup("name", name) or self._lookup("capital", name)
        if raw is None:
            logger.info(f"No country data for '{name}'")
            return None

        country = self.normalize(raw)
        if country["lat"] is None or country["lng"] is None:
            coords = self.geocode(country["name"] or name)
            if coords:
                country.update(coords)

        self.cache.set(name, country)
        return country
