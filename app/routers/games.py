from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.crud import occupation as crud
from app.schemas.game import (
    GameCreate,
    GameDetails,
    GameResponse,
    JoinGameResponse,
)
from app.models.field_occupation import GameStatus, OccupationKind
from app.services import availability_ledger as ledger
from app.services.auth import get_current_user
from app.models.user import User
from app.utils.time_ranges import minutes_of_day, parse_time_to_minutes

router = APIRouter()


@router.post("/", response_model=GameResponse)
def create_game(
    game: GameCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Organiza una mejenga. El organizador queda anotado como primer jugador.
    """
    details = GameDetails(**game.model_dump(include=set(GameDetails.model_fields)))
    return ledger.request_occupation(
        db,
        field_id=game.field_id,
        occupation_date=game.game_date,
        start_minute=parse_time_to_minutes(game.start_time),
        end_minute=parse_time_to_minutes(game.end_time),
        kind=OccupationKind.GAME,
        requester_id=current_user.id,
        game_details=details,
        enroll_requester=True,
    )


@router.get("/upcoming", response_model=List[GameResponse])
def read_upcoming_games(skip: int = 0, limit: int = 20, db: Session = Depends(get_db)):
    now = ledger.local_now()
    return crud.get_upcoming_games(
        db,
        today=now.date(),
        current_minute=minutes_of_day(now),
        skip=skip,
        limit=limit,
    )


@router.get("/{game_id}", response_model=GameResponse)
def read_game(game_id: int, db: Session = Depends(get_db)):
    db_game = crud.get_game(db, game_id)
    if db_game is None:
        raise HTTPException(status_code=404, detail="Game not found")
    return db_game


@router.post("/{game_id}/join", response_model=JoinGameResponse)
def join_game(
    game_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    participant = ledger.admit_participant(db, game_id, current_user.id)
    game = crud.get_game(db, game_id)
    return {
        "participant": participant,
        "game_status": game.status,
        "spots_remaining": game.spots_remaining,
    }


@router.post("/{game_id}/cancel", response_model=GameResponse)
def cancel_game(
    game_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    db_game = crud.get_game(db, game_id)
    if db_game is None:
        raise HTTPException(status_code=404, detail="Game not found")
    if db_game.organizer_id != current_user.id and not current_user.is_admin:
        raise HTTPException(
            status_code=403, detail="Only the organizer can cancel this game"
        )
    return ledger.update_occupation_status(db, game_id, GameStatus.CANCELLED)
