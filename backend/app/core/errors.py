# backend/app/core/errors.py

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config_loader import settings
from app.core.logger import logger


class ApiError(Exception):
    """Error carrying an HTTP status and a stable machine-readable code."""

    def __init__(self, status_code: int, code: str, message: str,
                 details: Optional[Any] = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details

    @classmethod
    def bad_request(cls, message: str, code: str = "BAD_REQUEST"):
        return cls(400, code, message)

    @classmethod
    def unauthorized(cls, message: str = "Unauthorized", code: str = "UNAUTHORIZED"):
        return cls(401, code, message)

    @classmethod
    def forbidden(cls, message: str = "Forbidden", code: str = "FORBIDDEN"):
        return cls(403, code, message)

    @classmethod
    def not_found(cls, message: str = "Resource not found", code: str = "NOT_FOUND"):
        return cls(404, code, message)

    @classmethod
    def internal(cls, message: str = "Internal server error", code: str = "INTERNAL_ERROR",
                 details: Optional[Any] = None):
        return cls(500, code, message, details)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.code, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


def _field_errors(exc: RequestValidationError) -> List[Dict[str, str]]:
    details = []
    for err in exc.errors():
        # drop the "body"/"query"/"path" prefix FastAPI puts in front
        loc = [str(part) for part in err.get("loc", ())][1:]
        details.append({"field": ".".join(loc), "message": err.get("msg", "Invalid value")})
    return details


# -------------------------------------------------------------------
# HANDLERS
# -------------------------------------------------------------------
async def api_error_handler(request: Request, exc: ApiError):
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "details": _field_errors(exc),
        },
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return JSONResponse(
            status_code=404,
            content={"error": "NOT_FOUND", "message": "The requested resource was not found"},
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": str(exc.detail)},
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    body = {"error": "INTERNAL_ERROR", "message": "An unexpected error occurred"}
    if settings.environment == "development" and settings.AI_DEBUG_ERRORS:
        body["details"] = str(exc)
    return JSONResponse(status_code=500, content=body)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
