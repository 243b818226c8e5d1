# backend/app/core/rate_limit.py

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from app.core.config_loader import settings
from app.core.logger import logger


# Fixed window per client IP, kept in process memory by default.
# Point RATE_LIMIT_STORAGE_URI at redis:// to share counters between instances.
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.general_rate_limit],
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    enabled=settings.RATE_LIMIT_ENABLED,
)

AI_LIMIT_MESSAGE = "Too many AI generation requests, please try again later"
AUTH_LIMIT_MESSAGE = "Too many authentication attempts, please try again later"
GENERAL_LIMIT_MESSAGE = "Too many requests, please try again later"

ai_limit = limiter.limit(settings.ai_rate_limit, error_message=AI_LIMIT_MESSAGE)
auth_limit = limiter.limit(settings.auth_rate_limit, error_message=AUTH_LIMIT_MESSAGE)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    logger.warning(f"Rate limit hit by {get_remote_address(request)} on {request.url.path}")
    message = exc.detail if isinstance(exc.detail, str) and exc.detail.startswith("Too many") \
        else GENERAL_LIMIT_MESSAGE
    return JSONResponse(
        status_code=429,
        content={"error": "RATE_LIMIT_EXCEEDED", "message": message},
    )
