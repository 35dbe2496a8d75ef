"""Pydantic schemas for User."""

from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from uuid import UUID
from typing import Literal, Optional


class UserCreate(BaseModel):
    """Internal payload for inserting a user. The password is already hashed."""

    username: str
    email: str
    full_name: str
    phone_number: Optional[str] = None
    password_hash: str
    role: Optional[str] = None


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    username: Optional[str] = Field(default=None, min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.]+$")
    full_name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    phone_number: Optional[str] = Field(default=None, max_length=50)
    status: Optional[Literal["active", "suspended"]] = None


class UserProfile(BaseModel):
    id: UUID
    email: str
    fullname: str
    phone: str
    username: str
    role: str
    credibility_score: int = 0
    status: str
    is_email_verified: bool = False
    is_phone_verified: bool = False
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserList(BaseModel):
    items: list[UserProfile]
    total: int
    page: int
    limit: int
