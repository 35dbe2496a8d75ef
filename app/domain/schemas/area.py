"""Pydantic schemas for Area."""

from pydantic import BaseModel, Field
from datetime import datetime
from uuid import UUID
from typing import Any, Optional, Union


class AreaCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    area_type: str = Field(min_length=1, max_length=50)
    area_code: str = Field(min_length=1, max_length=50)
    # FeatureCollection as JSON text or as an already-decoded object
    geojson: Union[str, dict]


class AreaRead(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    area_type: str
    area_code: str
    is_active: bool
    created_by: Optional[UUID] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AreaWithGeometry(AreaRead):
    geometry: dict[str, Any]


class AreaBoundary(BaseModel):
    id: UUID
    name: str
    boundary: dict[str, Any]


class AreaStatus(BaseModel):
    id: UUID
    is_active: bool
