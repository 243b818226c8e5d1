# backend/app/services/unsplash_service.py

import requests
from typing import Optional

from app.core.cache import TTLCache
from app.core.config_loader import settings
from app.core.logger import logger


class UnsplashService:
    BASE_URL = "https://api.unsplash.com/photos/random"

    def __init__(self, cache: Optional[TTLCache] = None):
        self.cache = cache or TTLCache(settings.image_cache_seconds)

    @property
    def access_key(self) -> str:
        return settings.UNSPLASH_ACCESS_KEY

    @property
    def enabled(self) -> bool:
        return bool(self.access_key)

    def find_photo(self, query: str) -> Optional[str]:
        """
        Return a landscape photo URL for `query`, or None when there is no key,
        no match or the API call fails.
        """
        cached = self.cache.get(query)
        if cached:
            return cached

        if not self.enabled:
            logger.warning("Unsplash API key missing, skipping Unsplash lookup")
            return None

        try:
            resp = requests.get(
                self.BASE_URL,
                params={"query": query, "orientation": "landscape"},
                headers={"Authorization": f"Client-ID {self.access_key}"},
                timeout=settings.http_timeout_seconds,
            )
            resp.raise_for_status()
            data = resp.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"Unsplash API error for '{query}': {e}")
            return None
        except ValueError as e:
            logger.error(f"Unsplash returned invalid JSON for '{query}': {e}")
            return None

        url = ((data or {}).get("urls") or {}).get("regular")
        if not url:
            logger.info(f"No Unsplash photo for '{query}'")
            return None

        self.cache.set(query, url)
        return url
