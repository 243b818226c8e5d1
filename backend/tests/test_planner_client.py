"""
Tests for the planner client: session cache, rendering and the HTTP flow
against the real app through TestClient.
"""
import json
from datetime import date
from unittest.mock import MagicMock, patch

import pytest

from app.client.planner_client import PlannerApiError, PlannerClient
from app.client.render import render_itinerary
from app.client.session_cache import NO_DATE, SessionItineraryCache, cache_key


# ---------------------------------------------------------------------------
# Session cache
# ---------------------------------------------------------------------------

class TestSessionCache:
    def test_key_uses_destination_and_date(self):
        assert cache_key("Paris", date(2026, 6, 1)) == "itinerary:paris|2026-06-01"
        assert cache_key(" Paris ") == f"itinerary:paris|{NO_DATE}"

    def test_miss_then_hit(self, sample_itinerary):
        cache = SessionItineraryCache()
        assert cache.get("Paris") is None
        cache.set("Paris", None, sample_itinerary)
        assert cache.get("Paris") == sample_itinerary
        assert cache.get("Paris", "2026-06-01") is None

    def test_corrupt_entry_is_a_miss_and_dropped(self):
        storage = {cache_key("Paris"): "{not json"}
        cache = SessionItineraryCache(storage)
        assert cache.get("Paris") is None
        assert storage == {}

    def test_non_object_entry_is_a_miss(self):
        storage = {cache_key("Paris"): "[1, 2]"}
        assert SessionItineraryCache(storage).get("Paris") is None

    def test_clear_only_touches_itineraries(self, sample_itinerary):
        storage = {"theme": "dark"}
        cache = SessionItineraryCache(storage)
        cache.set("Paris", None, sample_itinerary)
        cache.set("Rome", "2026-01-01", sample_itinerary)
        assert len(cache) == 2

        cache.clear()
        assert storage == {"theme": "dark"}


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

class TestRender:
    def test_full_itinerary(self, sample_itinerary):
        text = render_itinerary(sample_itinerary)
        assert text.startswith("PARIS IN THREE DAYS")
        assert "Day 1: Icons" in text
        assert "Eiffel Tower @ Champ de Mars [48.8584, 2.2945]" in text
        assert "Budget: 1,200 EUR" in text
        assert "Merci (mair-see) = Thank you" in text

    def test_out_of_order_and_duplicate_days(self, sample_itinerary):
        days = sample_itinerary["days"]
        sample_itinerary["days"] = [days[1], days[0], dict(days[0])]
        text = render_itinerary(sample_itinerary)

        assert text.index("Day 2") < text.index("Day 1")
        assert text.count("Day 1: Icons") == 2

    def test_theme_punctuation_is_kept(self):
        text = render_itinerary({"days": [
            {"dayNumber": 1, "theme": "Art: "},
            {"dayNumber": 2},
        ]})
        assert "Day 1: Art: \n" in text + "\n"
        assert "Day 2\n" in text + "\n"

    @pytest.mark.parametrize("doc", [
        {},
        {"days": None},
        {"days": "three"},
        {"days": [None, {"activities": "x"}, {"dayNumber": None, "activities": [None, {}]}]},
        {"tripTitle": 7, "days": [{"activities": [{"lat": "north", "lng": None}]}]},
        {"smart_features": {"budget_estimator": {"total_estimated": "lots"}, "packing_list": [],
                            "local_vibe": {"survival_phrases": [None]}}},
    ])
    def test_malformed_documents_do_not_crash(self, doc):
        assert isinstance(render_itinerary(doc), str)


# ---------------------------------------------------------------------------
# Client against the API
# ---------------------------------------------------------------------------

@pytest.fixture
def planner(client):
    return PlannerClient(base_url="http://testserver", session=client)


class TestPlannerClient:
    def test_load_itinerary_uses_cache(self, planner, sample_itinerary):
        with patch("app.core.llm._chat", return_value=json.dumps(sample_itinerary)) as chat:
            first = planner.load_itinerary("Paris", travel_date=date(2026, 6, 1))
            second = planner.load_itinerary("Paris", travel_date=date(2026, 6, 1))

        assert first == second == sample_itinerary
        assert chat.call_count == 1
        assert "Travel date: 2026-06-01" in chat.call_args.args[1]

    def test_different_date_is_a_new_request(self, planner, sample_itinerary):
        with patch("app.core.llm._chat", return_value=json.dumps(sample_itinerary)) as chat:
            planner.load_itinerary("Paris")
            planner.load_itinerary("Paris", travel_date="2026-07-14")
        assert chat.call_count == 2

    def test_corrupt_cache_regenerates(self, client, sample_itinerary):
        storage = {cache_key("Paris"): "}}corrupt"}
        planner = PlannerClient(base_url="http://testserver", session=client,
                                cache=SessionItineraryCache(storage))
        with patch("app.core.llm._chat", return_value=json.dumps(sample_itinerary)) as chat:
            assert planner.load_itinerary("Paris") == sample_itinerary
        assert chat.call_count == 1
        assert json.loads(storage[cache_key("Paris")]) == sample_itinerary

    def test_api_errors_surface(self, planner):
        with patch("app.core.llm._chat", side_effect=RuntimeError("down")):
            with pytest.raises(PlannerApiError) as exc:
                planner.load_itinerary("Paris")
        assert exc.value.status == 500
        assert exc.value.code == "AI_GENERATION_ERROR"
        assert len(planner.cache) == 0

    def test_save_share_export_delete(self, planner, client, sample_itinerary):
        planner.register("traveller@travel.io", "a-good-password")

        trip = planner.save_trip(sample_itinerary)
        assert trip["title"] == "Paris in Three Days"
        assert trip["is_public"] is False
        assert [t["id"] for t in planner.list_trips()] == [trip["id"]]

        shared = planner.toggle_sharing(trip["id"])
        assert shared["is_public"] is True
        assert planner.toggle_sharing(trip["id"])["is_public"] is False

        ics = planner.download_calendar(trip["id"], start_date=date(2026, 6, 1))
        assert ics.startswith(b"BEGIN:VCALENDAR")

        assert planner.profile()["stats"]["trips_count"] == 1
        assert planner.delete_trip(trip["id"]) is True
        assert planner.list_trips() == []

    def test_other_user_sees_forbidden(self, client, sample_itinerary):
        owner = PlannerClient(base_url="http://testserver", session=client)
        owner.register("a@travel.io", "a-good-password")
        trip = owner.save_trip(sample_itinerary)

        stranger = PlannerClient(base_url="http://testserver", session=client)
        with pytest.raises(PlannerApiError) as exc:
            stranger.get_trip(trip["id"])
        assert exc.value.status == 403

        owner.set_sharing(trip["id"], True)
        shared, is_owner = stranger.get_trip(trip["id"])
        assert shared["id"] == trip["id"]
        assert is_owner is False

    def test_pick_image_walks_sources_in_order(self, planner):
        tried = []

        def loads(url):
            tried.append(url)
            return "placehold.co" in url

        source, url = planner.pick_image("Louvre", is_loadable=loads)

        assert source == "placeholder"
        assert len(tried) == 3
        assert "loremflickr.com" in tried[0]
        assert "pollinations.ai" in tried[1]

    def test_pick_image_all_fail(self, planner):
        assert planner.pick_image("Louvre", is_loadable=lambda url: False) is None

    def test_pick_image_stops_at_first_loadable(self, planner):
        tried = []

        def loads(url):
            tried.append(url)
            return True

        source, _ = planner.pick_image("Louvre", is_loadable=loads)
        assert source == "stock"
        assert len(tried) == 1


class TestPlannerClientRequests:
    def _planner(self, status=200, payload=None):
        resp = MagicMock()
        resp.status_code = status
        resp.json.return_value = payload
        session = MagicMock()
        session.request.return_value = resp
        return PlannerClient(base_url="http://api", session=session), session

    def test_country_name_is_escaped(self):
        planner, session = self._planner(payload={"name": "Sao Tome and Principe"})
        planner.country_info("São Tomé/Príncipe")

        url = session.request.call_args.args[1]
        assert url == "http://api/api/destinations/S%C3%A3o%20Tom%C3%A9%2FPr%C3%ADncipe/country"

    @pytest.mark.parametrize("payload", [["bad gateway"], "oops", None])
    def test_non_object_error_body(self, payload):
        planner, _ = self._planner(status=502, payload=payload)
        with pytest.raises(PlannerApiError) as exc:
            planner.country_info("France")

        assert exc.value.status == 502
        assert exc.value.code == "HTTP_ERROR"
