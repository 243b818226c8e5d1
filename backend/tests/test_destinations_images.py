"""
Tests for destination insights, the country proxy and the image routes.
Outbound HTTP is mocked at requests.get / requests.post.
"""
import json
import pytest
from unittest.mock import MagicMock, patch

import requests

from app.core.config_loader import settings
from app.services.image_service import ImageService, extract_keywords, query_seed, safe_query


def _response(status=200, payload=None):
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = payload
    if status >= 400:
        resp.raise_for_status.side_effect = requests.exceptions.HTTPError(f"{status}", response=resp)
    else:
        resp.raise_for_status.return_value = None
    return resp


FRANCE = {
    "name": {"common": "France", "official": "French Republic"},
    "capital": ["Paris"],
    "region": "Europe",
    "subregion": "Western Europe",
    "population": 67391582,
    "currencies": {"EUR": {"name": "Euro", "symbol": "€"}},
    "languages": {"fra": "French"},
    "flag": "🇫🇷",
    "capitalInfo": {"latlng": [48.87, 2.33]},
}


# ---------------------------------------------------------------------------
# Insights
# ---------------------------------------------------------------------------

class TestInsights:
    TOOLKIT = {
        "apps": [{"name": "Suica", "category": "Transport", "description": "Tap to ride"}],
        "visa": {"summary": "Visa-free for 90 days", "warning": "Return ticket needed"},
        "emergency": {"police": "110", "ambulance": "119"},
    }

    def test_returns_toolkit(self, client):
        with patch("app.core.llm._chat", return_value=json.dumps(self.TOOLKIT)) as chat:
            resp = client.post("/api/destinations/insights", json={"destination": "Tokyo"})

        assert resp.status_code == 200
        assert resp.json() == self.TOOLKIT
        assert chat.call_args.kwargs["json_mode"] is True

    def test_short_destination_rejected(self, client):
        resp = client.post("/api/destinations/insights", json={"destination": "T"})
        assert resp.status_code == 400

    def test_missing_key(self, client, monkeypatch):
        monkeypatch.setattr(settings, "OPENAI_API_KEY", "")
        resp = client.post("/api/destinations/insights", json={"destination": "Tokyo"})
        assert resp.status_code == 500
        assert resp.json()["error"] == "AI_CONFIG_ERROR"


# ---------------------------------------------------------------------------
# Country proxy
# ---------------------------------------------------------------------------

class TestCountry:
    def test_lookup_by_name(self, client):
        with patch("app.services.country_service.requests.get",
                   return_value=_response(200, [FRANCE])) as get:
            resp = client.get("/api/destinations/France/country")

        assert resp.status_code == 200
        data = resp.json()
        assert data["name"] == "France"
        assert data["capital"] == "Paris"
        assert data["currencies"] == [{"code": "EUR", "name": "Euro", "symbol": "€"}]
        assert data["languages"] == ["French"]
        assert (data["lat"], data["lng"]) == (48.87, 2.33)
        assert get.call_count == 1

    def test_falls_back_to_capital_then_caches(self, client):
        responses = [_response(404), _response(200, [FRANCE])]
        with patch("app.services.country_service.requests.get", side_effect=responses) as get:
            first = client.get("/api/destinations/Paris/country")
            second = client.get("/api/destinations/paris/country")

        assert first.json()["name"] == "France"
        assert second.json() == first.json()
        assert "/capital/Paris" in get.call_args_list[1].args[0]
        assert get.call_count == 2

    def test_geocodes_when_coordinates_missing(self, client):
        bare = {k: v for k, v in FRANCE.items() if k != "capitalInfo"}
        responses = [_response(200, [bare]), _response(200, [{"lat": "46.6", "lon": "1.9"}])]
        with patch("app.services.country_service.requests.get", side_effect=responses):
            data = client.get("/api/destinations/France/country").json()

        assert (data["lat"], data["lng"]) == (46.6, 1.9)

    def test_not_found(self, client):
        with patch("app.services.country_service.requests.get", return_value=_response(404)):
            resp = client.get("/api/destinations/Atlantis/country")
        assert resp.status_code == 404
        assert resp.json()["error"] == "NOT_FOUND"

    def test_network_error_is_not_found(self, client):
        with patch("app.services.country_service.requests.get",
                   side_effect=requests.exceptions.ConnectionError("offline")):
            resp = client.get("/api/destinations/France/country")
        assert resp.status_code == 404


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------

class TestImageHelpers:
    def test_keywords(self):
        assert extract_keywords("Visit the Louvre (morning)") == "the,Louvre"
        assert extract_keywords("Lunch at Café de Flore, Paris") == "Café,de,Flore,"

    def test_seed_is_stable_and_positive(self):
        assert query_seed("Paris") == query_seed("Paris")
        assert query_seed("Paris") != query_seed("Lyon")
        assert query_seed("a" * 200) >= 0
        assert query_seed("") == 0

    def test_safe_query(self):
        assert safe_query("  ") == "travel"
        assert safe_query(None) == "travel"
        assert safe_query(" Rome ") == "Rome"


class TestUnsplashRoute:
    def test_missing_query(self, client):
        resp = client.get("/api/images/unsplash")
        assert resp.status_code == 400

    def test_no_key_returns_404(self, client):
        with patch("app.services.unsplash_service.requests.get") as get:
            resp = client.get("/api/images/unsplash", params={"query": "Eiffel Tower"})
        assert resp.status_code == 404
        get.assert_not_called()

    def test_found_and_cached(self, client, monkeypatch):
        monkeypatch.setattr(settings, "UNSPLASH_ACCESS_KEY", "key")
        payload = {"urls": {"regular": "https://images.unsplash.com/photo-1"}}
        with patch("app.services.unsplash_service.requests.get",
                   return_value=_response(200, payload)) as get:
            first = client.get("/api/images/unsplash", params={"query": "Eiffel Tower"})
            second = client.get("/api/images/unsplash", params={"query": "  eiffel tower "})

        assert first.json() == {"url": "https://images.unsplash.com/photo-1"}
        assert second.json() == first.json()
        assert get.call_count == 1
        assert get.call_args.kwargs["headers"] == {"Authorization": "Client-ID key"}

    @pytest.mark.parametrize("upstream", [
        _response(200, {"urls": {}}),
        _response(500, None),
    ])
    def test_upstream_miss_returns_404(self, client, monkeypatch, upstream):
        monkeypatch.setattr(settings, "UNSPLASH_ACCESS_KEY", "key")
        with patch("app.services.unsplash_service.requests.get", return_value=upstream):
            resp = client.get("/api/images/unsplash", params={"query": "Nowhere"})
        assert resp.status_code == 404


class TestImageSources:
    def test_without_keys_only_generated_sources(self, client):
        resp = client.get("/api/images/sources", params={"query": "Sacre-Coeur", "width": 400, "height": 300})
        sources = resp.json()["sources"]

        assert [s["source"] for s in sources] == ["stock", "generative", "placeholder"]
        assert "width=400&height=300" in sources[1]["url"]
        assert sources[2]["url"].startswith("https://placehold.co/400x300/")

    def test_full_chain_order(self):
        places = MagicMock()
        places.find_photo_url.return_value = "https://places/photo"
        unsplash = MagicMock()
        unsplash.find_photo.return_value = "https://unsplash/photo"

        sources = ImageService(places=places, unsplash=unsplash).candidates("Louvre")

        assert [s["source"] for s in sources] == ["google_places", "unsplash", "stock", "generative", "placeholder"]
        assert sources[0]["url"] == "https://places/photo"

    def test_stock_url_uses_keywords_and_seed(self):
        url = ImageService.stock_url("Visit the Louvre (morning)", 640, 480)

        assert url.startswith("https://loremflickr.com/640/480/travel,landmark,tourism,the,Louvre/all")
        assert url.endswith(f"?lock={query_seed('Visit the Louvre (morning)')}")

    def test_google_places_photo_url(self, monkeypatch):
        monkeypatch.setattr(settings, "GOOGLE_MAPS_API_KEY", "gkey")
        payload = {"places": [{"photos": [{"name": "places/abc/photos/xyz"}]}]}
        with patch("app.services.google_places_service.requests.post",
                   return_value=_response(200, payload)):
            url = ImageService().places.find_photo_url("Louvre", max_width=640)

        assert url == "https://places.googleapis.com/v1/places/abc/photos/xyz/media?maxWidthPx=640&key=gkey"
