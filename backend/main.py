from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.api.routes_auth import router as auth_router
from app.api.routes_itinerary import router as itinerary_router
from app.api.routes_trips import router as trips_router
from app.api.routes_profile import router as profile_router
from app.api.routes_destinations import router as destinations_router
from app.api.routes_images import router as images_router

from app.core.config_loader import settings
from app.core.errors import register_error_handlers
from app.core.logger import log_requests, logger
from app.core.rate_limit import limiter, rate_limit_exceeded_handler


app = FastAPI(
    title="Travel Planner AI",
    description="AI itinerary generation, saved trips and sharing",
    version="1.0.0"
)

# -------------------------------------------------------------
# RATE LIMITING
# -------------------------------------------------------------
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# -------------------------------------------------------------
# CORS
# -------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.CLIENT_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -------------------------------------------------------------
# REQUEST LOGGING + ERRORS
# -------------------------------------------------------------
app.middleware("http")(log_requests)
register_error_handlers(app)

# -------------------------------------------------------------
# ROUTES
# -------------------------------------------------------------
app.include_router(auth_router)
app.include_router(itinerary_router)
app.include_router(trips_router)
app.include_router(profile_router)
app.include_router(destinations_router)
app.include_router(images_router)


# -------------------------------------------------------------
# HEALTH
# -------------------------------------------------------------
@app.get("/health")
def health():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "env": settings.environment,
    }


logger.info(f"Travel Planner AI backend ready ({settings.environment})")


# -------------------------------------------------------------
# RUN LOCAL
# -------------------------------------------------------------
if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=4000,
        reload=True
    )
