"""Pydantic schemas for Role."""

from pydantic import BaseModel, Field
from datetime import datetime
from uuid import UUID
from typing import Optional


class RoleCreate(BaseModel):
    name: str = Field(min_length=3, max_length=20)
    description: str = ""


class RoleUpdate(RoleCreate):
    pass


class AssignRoleRequest(BaseModel):
    role_name: str = Field(min_length=1)


class RoleRead(BaseModel):
    id: UUID
    name: str
    description: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
