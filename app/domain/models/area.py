"""Area domain model — administrative boundaries stored as canonical GeoJSON text."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, String, Text, UniqueConstraint, Uuid
from sqlalchemy.sql import func

from app.infrastructure.database import Base


class Area(Base):
    __tablename__ = "areas"
    __table_args__ = (UniqueConstraint("name", "area_code", name="uq_areas_name_code"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    area_type = Column(String(50), nullable=False)
    area_code = Column(String(50), nullable=False, index=True)
    boundary = Column(Text, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_by = Column(Uuid, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Area {self.area_code} - {self.name}>"
