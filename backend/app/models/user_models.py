# backend/app/models/user_models.py

from pydantic import BaseModel, EmailStr, Field
from typing import Optional


# -------------------------
# Registration model
# -------------------------
class RegisterIn(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    full_name: Optional[str] = Field(None, max_length=200)


# -------------------------
# Login model
# -------------------------
class LoginIn(BaseModel):
    email: EmailStr
    password: str


# -------------------------
# Token response
# -------------------------
class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"


# -------------------------
# Basic user info
# -------------------------
class UserOut(BaseModel):
    id: str
    email: EmailStr
    full_name: Optional[str] = None


# -------------------------
# Profile response
# -------------------------
class ProfileStats(BaseModel):
    trips_count: int = 0


class ProfileOut(BaseModel):
    user: UserOut
    stats: ProfileStats
