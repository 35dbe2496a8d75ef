"""Pydantic schemas for Category."""

from pydantic import BaseModel, Field
from datetime import datetime
from uuid import UUID
from typing import Optional


class CategoryBase(BaseModel):
    name: str = Field(min_length=3, max_length=100)
    slug: str = Field(min_length=3, max_length=100)
    icon: Optional[str] = None
    color: Optional[str] = None
    is_active: bool = False
    sort_order: int = 0


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(CategoryBase):
    pass


class CategoryRead(CategoryBase):
    id: UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class CategoryStatus(BaseModel):
    id: UUID
    is_active: bool
