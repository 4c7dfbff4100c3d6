from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Optional

# "HH:MM" en formato 24 horas
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class ReservationCreate(BaseModel):
    field_id: int
    reservation_date: date
    start_time: str = Field(..., pattern=TIME_PATTERN, examples=["18:00"])
    end_time: str = Field(..., pattern=TIME_PATTERN, examples=["19:30"])
    game_id: Optional[int] = None


class ReservationResponse(BaseModel):
    id: int
    field_id: int
    user_id: int
    game_id: Optional[int] = None
    occupation_date: date
    start_time: str
    end_time: str
    total_amount: float
    currency: str
    status: str
    payment_reference: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
