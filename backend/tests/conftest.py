import os
import tempfile
from pathlib import Path

import pytest

# Settings are read at import time, so point them at throwaway locations first.
_tmp = Path(tempfile.mkdtemp(prefix="travel-planner-tests-"))
os.environ["DB_PATH"] = str(_tmp / "test.sqlite3")
os.environ["LOG_DIR"] = str(_tmp / "logs")
os.environ["OPENAI_API_KEY"] = "test-key"
os.environ["UNSPLASH_ACCESS_KEY"] = ""
os.environ["GOOGLE_MAPS_API_KEY"] = ""
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["AI_MODELS"] = "model-a,model-b,model-c"

from fastapi.testclient import TestClient  # noqa: E402

from main import app  # noqa: E402
from app.api import routes_destinations, routes_images  # noqa: E402
from app.core.rate_limit import limiter  # noqa: E402
from app.db.sqlite_store import get_store  # noqa: E402


SAMPLE_ITINERARY = {
    "tripTitle": "Paris in Three Days",
    "destination": "Paris",
    "days": [
        {
            "dayNumber": 1,
            "theme": "Icons",
            "activities": [
                {"time": "09:00", "activity": "Eiffel Tower", "location": "Champ de Mars",
                 "lat": 48.8584, "lng": 2.2945, "image_prompt": "Eiffel Tower at sunrise"},
                {"time": "14:30", "activity": "Louvre", "location": "Rue de Rivoli",
                 "lat": 48.8606, "lng": 2.3376},
            ],
        },
        {
            "dayNumber": 2,
            "theme": "Montmartre",
            "activities": [
                {"time": "10:00", "activity": "Sacre-Coeur", "location": "Montmartre",
                 "lat": 48.8867, "lng": 2.3431},
            ],
        },
    ],
    "tips": ["Buy a Navigo pass"],
    "smart_features": {
        "budget_estimator": {
            "total_estimated": 1200,
            "currency": "EUR",
            "breakdown": {"flights": 300, "accommodation": 500, "activities": 200, "food": 200},
            "budget_tips": ["Picnic by the Seine"],
        },
        "packing_list": {"weather_forecast": "Mild, 18C", "essentials": ["Umbrella"]},
        "local_vibe": {
            "etiquette_tips": ["Say bonjour"],
            "survival_phrases": [
                {"original": "Merci", "pronunciation": "mair-see", "meaning": "Thank you"}
            ],
        },
    },
}


@pytest.fixture(autouse=True)
def _clean_state():
    get_store().clear()
    limiter.reset()
    routes_images.images.unsplash.cache.clear()
    routes_destinations.countries.cache.clear()
    yield


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def sample_itinerary():
    import copy
    return copy.deepcopy(SAMPLE_ITINERARY)


def _register(client, email):
    resp = client.post("/api/auth/register",
                       json={"email": email, "password": "correct-horse", "full_name": email.split("@")[0]})
    assert resp.status_code == 201, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def owner_headers(client):
    return _register(client, "owner@travel.io")


@pytest.fixture
def other_headers(client):
    return _register(client, "other@travel.io")


@pytest.fixture
def saved_trip(client, owner_headers, sample_itinerary):
    resp = client.post("/api/trips", headers=owner_headers, json={
        "destination": "Paris",
        "title": "Paris weekend",
        "itinerary": sample_itinerary,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()["trip"]
