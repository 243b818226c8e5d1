# backend/app/services/image_service.py

import re
from typing import Dict, List, Optional
from urllib.parse import quote

from app.core.logger import logger
from app.services.google_places_service import GooglePlacesService
from app.services.unsplash_service import UnsplashService


FILLER_PHRASES = re.compile(
    r"Arrive at|Transfer to|Check into|Visit|Explore|Lunch at|Dinner at|Walk around",
    re.IGNORECASE,
)


def safe_query(query: Optional[str]) -> str:
    return query.strip() if query and query.strip() else "travel"


def extract_keywords(query: str, limit: int = 3) -> str:
    """'Visit the Louvre (morning)' -> 'the,Louvre'"""
    text = re.sub(r"\([^)]*\)", "", query)
    text = FILLER_PHRASES.sub("", text)
    text = re.sub(r"[^\w\s,]", "", text).strip()
    words = [w for w in text.split(" ") if w][:limit]
    return ",".join(words)


def query_seed(query: str) -> int:
    """Stable 32-bit string hash, so the same query always maps to the same image."""
    h = 0
    for ch in query:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


class ImageService:
    """
    Orders image sources from best to last resort:
    Google Places photo -> Unsplash -> keyword stock photo -> generated image -> text placeholder.
    """

    def __init__(self, places: Optional[GooglePlacesService] = None,
                 unsplash: Optional[UnsplashService] = None):
        self.places = places or GooglePlacesService()
        self.unsplash = unsplash or UnsplashService()

    @staticmethod
    def stock_url(query: str, width: int, height: int) -> str:
        keywords = quote(extract_keywords(query), safe=",")
        return (
            f"https://loremflickr.com/{width}/{height}/travel,landmark,tourism,{keywords}"
            f"/all?lock={query_seed(query)}"
        )

    @staticmethod
    def generative_url(query: str, width: int, height: int) -> str:
        prompt = quote(f"{query} cinematic travel photography 4k", safe="")
        return (
            f"https://pollinations.ai/p/{prompt}"
            f"?width={width}&height={height}&model=flux&seed={query_seed(query)}"
        )

    @staticmethod
    def placeholder_url(query: str, width: int, height: int) -> str:
        return f"https://placehold.co/{width}x{height}/EEE/31343C?text={quote(query[:30], safe='')}"

    def candidates(self, query: Optional[str], width: int = 800, height: int = 600) -> List[Dict[str, str]]:
        q = safe_query(query)
        sources: List[Dict[str, str]] = []

        places_url = self.places.find_photo_url(q, max_width=width)
        if places_url:
            sources.append({"source": "google_places", "url": places_url})

        unsplash_url = self.unsplash.find_photo(q)
        if unsplash_url:
            sources.append({"source": "unsplash", "url": unsplash_url})

        sources.append({"source": "stock", "url": self.stock_url(q, width, height)})
        sources.append({"source": "generative", "url": self.generative_url(q, width, height)})
        sources.append({"source": "placeholder", "url": self.placeholder_url(q, width, height)})

        logger.debug(f"Image sources for '{q}': {[s['source'] for s in sources]}")
        return sources
