from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class SoccerFieldBase(BaseModel):
    name: str
    address: Optional[str] = None
    description: Optional[str] = None
    field_type: str = "futbol_5"
    price_per_hour: Optional[float] = None


class SoccerFieldCreate(SoccerFieldBase):
    pass


class SoccerFieldUpdate(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None
    field_type: Optional[str] = None
    price_per_hour: Optional[float] = None
    is_active: Optional[bool] = None


class SoccerFieldInDB(SoccerFieldBase):
    id: int
    is_active: bool = True
    owner_id: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True


class SoccerFieldResponse(SoccerFieldInDB):
    pass
