# backend/app/core/logger.py

import logging
import os
import time
import uuid
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import Request


# -------------------------------------------------------------------
# LOG DIRECTORY + FILE SETUP
# -------------------------------------------------------------------
LOG_DIR = Path(os.getenv("LOG_DIR", Path(__file__).resolve().parents[2] / "logs"))
LOG_DIR.mkdir(parents=True, exist_ok=True)

LOG_FILE = LOG_DIR / "app.log"


# -------------------------------------------------------------------
# FORMATTER
# -------------------------------------------------------------------
LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
)

formatter = logging.Formatter(LOG_FORMAT)


# -------------------------------------------------------------------
# HANDLER: FILE (rotating)
# -------------------------------------------------------------------
file_handler = RotatingFileHandler(
    LOG_FILE,
    maxBytes=5 * 1024 * 1024,   # 5 MB
    backupCount=5,
    encoding="utf-8"
)
file_handler.setFormatter(formatter)
file_handler.setLevel(logging.INFO)


# -------------------------------------------------------------------
# HANDLER: CONSOLE
# -------------------------------------------------------------------
console_handler = logging.StreamHandler()
console_handler.setFormatter(formatter)
console_handler.setLevel(logging.DEBUG)


# -------------------------------------------------------------------
# GLOBAL LOGGER
# -------------------------------------------------------------------
logger = logging.getLogger("travel_planner")
logger.setLevel(logging.DEBUG)

# Prevent duplicate handlers when reloading app
if not logger.handlers:
    logger.addHandler(file_handler)
    logger.addHandler(console_handler)


# -------------------------------------------------------------------
# REQUEST LOGGING MIDDLEWARE
# -------------------------------------------------------------------
async def log_requests(request: Request, call_next):
    """Log every request on the way in and its status + duration on the way out."""
    request_id = uuid.uuid4().hex[:8]
    start = time.perf_counter()
    status_code = 500

    logger.info(f"[{request_id}] --> {request.method} {request.url.path}")
    try:
        response = await call_next(request)
        status_code = response.status_code
    finally:
        duration_ms = int((time.perf_counter() - start) * 1000)
        mark = "x" if status_code >= 400 else "ok"
        logger.info(
            f"[{request_id}] <-- {request.method} {request.url.path} "
            f"{mark} {status_code} ({duration_ms}ms)"
        )
    response.headers["X-Request-ID"] = request_id
    return response
