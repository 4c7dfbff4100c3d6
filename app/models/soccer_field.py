from sqlalchemy import (
    Column,
    Integer,
    String,
    Numeric,
    ForeignKey,
    DateTime,
    Boolean,
)
from sqlalchemy.orm import relationship
from app.database import Base
import enum
from datetime import datetime


class FieldType(enum.Enum):
    FUTBOL_5 = "futbol_5"
    FUTBOL_7 = "futbol_7"
    FUTBOL_11 = "futbol_11"


class SoccerField(Base):
    __tablename__ = "soccer_fields"
    __table_args__ = {"extend_existing": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    address = Column(String, nullable=True)
    description = Column(String, nullable=True)
    field_type = Column(String, default=FieldType.FUTBOL_5.value)
    price_per_hour = Column(Numeric(10, 2), nullable=True)  # Colones por hora
    is_active = Column(Boolean, default=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    owner = relationship("User", back_populates="owned_fields")
    occupations = relationship("FieldOccupation", back_populates="field")
