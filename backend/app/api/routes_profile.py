# backend/app/api/routes_profile.py

from typing import Any, Dict

from fastapi import APIRouter, Depends

from app.core.security import get_current_user
from app.db.sqlite_store import get_store
from app.models.user_models import ProfileOut

router = APIRouter(prefix="/api/profile", tags=["profile"])


# --------------------------------------------------------
# GET /api/profile  → current user + trip stats
# --------------------------------------------------------
@router.get("", response_model=ProfileOut)
def get_profile(user: Dict[str, Any] = Depends(get_current_user)):
    return {
        "user": {
            "id": user["id"],
            "email": user["email"],
            "full_name": user["full_name"],
        },
        "stats": {
            "trips_count": get_store().count_trips(user["id"]),
        },
    }
