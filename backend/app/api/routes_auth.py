# backend/app/api/routes_auth.py

from typing import Any, Dict

from fastapi import APIRouter, Depends, Request

from app.core.errors import ApiError
from app.core.logger import logger
from app.core.rate_limit import auth_limit
from app.core.security import (
    create_access_token,
    get_current_user,
    get_password_hash,
    verify_password,
)
from app.db.sqlite_store import get_store
from app.models.user_models import LoginIn, RegisterIn, TokenOut, UserOut

router = APIRouter(prefix="/api/auth", tags=["auth"])


# --------------------------
# REGISTER
# --------------------------
@router.post("/register", response_model=TokenOut, status_code=201)
@auth_limit
def register(request: Request, data: RegisterIn):
    db = get_store()
    email = data.email.lower()
    if db.get_user_by_email(email):
        raise ApiError.bad_request("Email already registered", code="EMAIL_TAKEN")

    user_id = db.create_user(
        email=email,
        full_name=data.full_name or "",
        hashed_password=get_password_hash(data.password),
    )
    logger.info(f"Registered user {user_id}")
    return {"access_token": create_access_token(subject=user_id)}


# --------------------------
# LOGIN
# --------------------------
@router.post("/login", response_model=TokenOut)
@auth_limit
def login(request: Request, data: LoginIn):
    user = get_store().get_user_by_email(data.email.lower())
    if not user or not verify_password(data.password, user["hashed_password"]):
        raise ApiError.unauthorized("Invalid credentials", code="INVALID_CREDENTIALS")

    return {"access_token": create_access_token(subject=user["id"])}


# --------------------------
# ME
# --------------------------
@router.get("/me", response_model=UserOut)
def me(user: Dict[str, Any] = Depends(get_current_user)):
    return {
        "id": user["id"],
        "email": user["email"],
        "full_name": user["full_name"],
    }
