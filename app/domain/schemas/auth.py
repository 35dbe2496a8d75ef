"""Pydantic schemas for Auth."""

from pydantic import BaseModel, EmailStr, Field
from uuid import UUID
from typing import Literal, Optional


class LoginRequest(BaseModel):
    identifier: str = Field(min_length=1)  # username or email
    password: str = Field(min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: Optional[str] = None


class RegisterRequest(BaseModel):
    username: str = Field(min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.]+$")
    email: EmailStr
    fullname: str = Field(min_length=2, max_length=100)
    password: str = Field(min_length=8, max_length=72)
    phone_number: Optional[str] = Field(default=None, min_length=5, max_length=50)
    role: Optional[str] = None


class UserInfo(BaseModel):
    id: UUID
    username: str
    email: str
    fullname: str
    role: str


class LoginResponse(BaseModel):
    token: str
    refresh_token: str
    user: Optional[UserInfo] = None


class TokenClaims(BaseModel):
    """Decoded JWT payload."""

    user_id: UUID
    username: str
    email: str = ""
    role: str = ""
    token_type: Literal["access", "refresh"]
    jti: Optional[str] = None
    exp: Optional[int] = None
