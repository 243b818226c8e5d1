# backend/app/client/planner_client.py

import os
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Tuple, Union
from urllib.parse import quote

import requests
from dotenv import load_dotenv

from app.client.session_cache import SessionItineraryCache
from app.core.fallback import FallbackExhausted, run_fallback_chain
from app.core.logger import logger


load_dotenv()

DEFAULT_API_URL = "http://localhost:4000"


class PlannerApiError(Exception):
    def __init__(self, status: int, code: str, message: str):
        super().__init__(f"{status} {code}: {message}")
        self.status = status
        self.code = code
        self.message = message


def image_loads(url: str, timeout: float = 10.0) -> bool:
    """True when the URL answers with an image, the way a browser <img> would load it."""
    try:
        resp = requests.get(url, stream=True, timeout=timeout, allow_redirects=True)
        try:
            ok = resp.status_code < 400 and resp.headers.get("Content-Type", "").startswith("image/")
        finally:
            resp.close()
        return ok
    except requests.exceptions.RequestException as e:
        logger.debug(f"Image failed to load from {url}: {e}")
        return False


class PlannerClient:
    """
    Planner-side counterpart of the web front end: generate (cache first),
    save, share, delete and export trips, and pick images.
    """

    def __init__(self, base_url: Optional[str] = None, token: Optional[str] = None,
                 session: Optional[Any] = None, cache: Optional[SessionItineraryCache] = None,
                 timeout: float = 60.0):
        self.base_url = (base_url or os.getenv("API_URL", DEFAULT_API_URL)).rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.cache = cache if cache is not None else SessionItineraryCache()
        self.timeout = timeout

    # -----------------------------
    # HTTP plumbing
    # -----------------------------
    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, **kwargs) -> Any:
        resp = self.session.request(
            method,
            f"{self.base_url}{path}",
            headers=self._headers(),
            timeout=self.timeout,
            **kwargs,
        )
        if resp.status_code >= 400:
            try:
                body = resp.json()
            except ValueError:
                body = {}
            if not isinstance(body, dict):
                body = {}
            raise PlannerApiError(
                resp.status_code,
                body.get("error", "HTTP_ERROR"),
                body.get("message", "Request failed"),
            )
        return resp

    def _json(self, method: str, path: str, **kwargs) -> Any:
        return self._request(method, path, **kwargs).json()

    # -----------------------------
    # Accounts
    # -----------------------------
    def register(self, email: str, password: str, full_name: Optional[str] = None) -> str:
        data = self._json("POST", "/api/auth/register",
                          json={"email": email, "password": password, "full_name": full_name})
        self.token = data["access_token"]
        return self.token

    def login(self, email: str, password: str) -> str:
        data = self._json("POST", "/api/auth/login", json={"email": email, "password": password})
        self.token = data["access_token"]
        return self.token

    def profile(self) -> Dict[str, Any]:
        return self._json("GET", "/api/profile")

    # -----------------------------
    # Itinerary generation
    # -----------------------------
    def load_itinerary(self, destination: str, travel_date: Optional[Union[date, str]] = None,
                       preferences: Optional[str] = None) -> Dict[str, Any]:
        """Session cache first; the generation API is only called on a miss."""
        cached = self.cache.get(destination, travel_date)
        if cached is not None:
            logger.info(f"Using cached itinerary for {destination}")
            return cached

        parts = []
        if preferences:
            parts.append(preferences)
        if travel_date:
            when = travel_date.isoformat() if isinstance(travel_date, date) else travel_date
            parts.append(f"Travel date: {when}")

        body: Dict[str, Any] = {"destination": destination}
        if parts:
            body["preferences"] = ". ".join(parts)

        itinerary = self._json("POST", "/api/itinerary/generate", json=body)
        self.cache.set(destination, travel_date, itinerary)
        return itinerary

    # -----------------------------
    # Trips
    # -----------------------------
    def save_trip(self, itinerary: Dict[str, Any], title: Optional[str] = None,
                  destination: Optional[str] = None) -> Dict[str, Any]:
        payload = {
            "destination": destination or itinerary.get("destination"),
            "title": title or itinerary.get("tripTitle"),
            "itinerary": itinerary,
        }
        return self._json("POST", "/api/trips", json=payload)["trip"]

    def list_trips(self) -> List[Dict[str, Any]]:
        return self._json("GET", "/api/trips")["trips"]

    def get_trip(self, trip_id: str) -> Tuple[Dict[str, Any], bool]:
        data = self._json("GET", f"/api/trips/{trip_id}")
        return data["trip"], data["isOwner"]

    def set_sharing(self, trip_id: str, is_public: bool) -> Dict[str, Any]:
        return self._json("PUT", f"/api/trips/{trip_id}/share", json={"is_public": is_public})["trip"]

    def toggle_sharing(self, trip_id: str) -> Dict[str, Any]:
        trip, _ = self.get_trip(trip_id)
        return self.set_sharing(trip_id, not trip["is_public"])

    def delete_trip(self, trip_id: str) -> bool:
        return bool(self._json("DELETE", "/api/trips", json={"id": trip_id}).get("success"))

    def download_calendar(self, trip_id: str, start_date: Optional[date] = None) -> bytes:
        params = {"start_date": start_date.isoformat()} if start_date else None
        return self._request("GET", f"/api/trips/{trip_id}/calendar", params=params).content

    # -----------------------------
    # Destinations + images
    # -----------------------------
    def destination_insights(self, destination: str) -> Dict[str, Any]:
        return self._json("POST", "/api/destinations/insights", json={"destination": destination})

    def country_info(self, name: str) -> Dict[str, Any]:
        return self._json("GET", f"/api/destinations/{quote(name, safe='')}/country")

    def image_sources(self, query: str, width: int = 800, height: int = 600) -> List[Dict[str, str]]:
        data = self._json("GET", "/api/images/sources",
                          params={"query": query, "width": width, "height": height})
        return data["sources"]

    def pick_image(self, query: str, is_loadable: Optional[Callable[[str], bool]] = None,
                   width: int = 800, height: int = 600) -> Optional[Tuple[str, str]]:
        """
        Walk the image sources in order and stop at the first one that loads.
        Returns (source, url), or None when every source failed.
        """
        check = is_loadable or image_loads
        attempts = [
            (src["source"], lambda url=src["url"]: url if check(url) else None)
            for src in self.image_sources(query, width=width, height=height)
        ]
        try:
            return run_fallback_chain(attempts, label="image")
        except FallbackExhausted:
            logger.info(f"All image sources failed for: {query}")
            return None
