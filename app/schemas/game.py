from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Optional

from app.schemas.reservation import TIME_PATTERN


class GameDetails(BaseModel):
    title: str
    description: Optional[str] = None
    max_players: int = 22
    price_per_player: Optional[float] = None
    game_type: str = "casual"


class GameCreate(GameDetails):
    field_id: int
    game_date: date
    start_time: str = Field(..., pattern=TIME_PATTERN, examples=["20:00"])
    end_time: str = Field(..., pattern=TIME_PATTERN, examples=["21:00"])


class GameResponse(BaseModel):
    id: int
    field_id: int
    field_name: Optional[str] = None
    field_address: Optional[str] = None
    organizer_id: int
    organizer_name: Optional[str] = None
    title: str
    description: Optional[str] = None
    occupation_date: date
    start_time: str
    end_time: str
    max_players: int
    current_players: int
    spots_remaining: int
    price_per_player: Optional[float] = None
    game_type: str
    status: str
    created_at: datetime

    class Config:
        from_attributes = True


class ParticipantResponse(BaseModel):
    id: int
    game_id: int
    user_id: int
    joined_at: datetime

    class Config:
        from_attributes = True


class JoinGameResponse(BaseModel):
    message: str = "Successfully joined the game!"
    participant: ParticipantResponse
    game_status: str
    spots_remaining: int
