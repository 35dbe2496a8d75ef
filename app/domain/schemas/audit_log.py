"""Pydantic schemas for AuditLog."""

import json

from pydantic import BaseModel, field_validator
from datetime import datetime
from uuid import UUID
from typing import Any, Optional


class AuditLogRead(BaseModel):
    id: UUID
    entity_name: str
    action: str
    entity_id: Optional[UUID] = None
    performed_by: Optional[UUID] = None
    metadata: Optional[Any] = None
    created_at: Optional[datetime] = None

    @field_validator("metadata", mode="before")
    @classmethod
    def decode_quoted_json(cls, value: Any) -> Any:
        # some writers stored the metadata object as a JSON string
        if isinstance(value, str):
            try:
                return json.loads(value)
            except ValueError:
                return value
        return value
