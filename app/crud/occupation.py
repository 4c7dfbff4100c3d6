from sqlalchemy import or_, and_
from sqlalchemy.orm import Session, joinedload
from datetime import date
from typing import List, Optional

from app.models.field_occupation import (
    ALL_HOLDING_STATUSES,
    FieldOccupation,
    Game,
    GameParticipant,
    GameStatus,
    Reservation,
)


def get_occupation(
    db: Session, occupation_id: int, for_update: bool = False
) -> Optional[FieldOccupation]:
    query = db.query(FieldOccupation).filter(FieldOccupation.id == occupation_id)
    if for_update:
        query = query.with_for_update(nowait=False)
    return query.first()


def get_reservation(db: Session, reservation_id: int) -> Optional[Reservation]:
    return db.query(Reservation).filter(Reservation.id == reservation_id).first()


def get_game(db: Session, game_id: int, for_update: bool = False) -> Optional[Game]:
    query = db.query(Game).filter(Game.id == game_id)
    if for_update:
        query = query.with_for_update(nowait=False)
    return query.first()


def get_overlapping_occupations(
    db: Session,
    field_id: int,
    occupation_date: date,
    start_minute: int,
    end_minute: int,
) -> List[FieldOccupation]:
    """
    Ocupaciones vigentes (reservas y mejengas) que chocan con [start, end).

    Una reserva bloquea una mejenga y viceversa, por eso la consulta no filtra
    por tipo.
    """
    return (
        db.query(FieldOccupation)
        .filter(FieldOccupation.field_id == field_id)
        .filter(FieldOccupation.occupation_date == occupation_date)
        .filter(FieldOccupation.status.in_(ALL_HOLDING_STATUSES))
        .filter(FieldOccupation.start_minute < end_minute)
        .filter(FieldOccupation.end_minute > start_minute)
        .order_by(FieldOccupation.start_minute)
        .all()
    )


def get_holding_occupations(
    db: Session, field_id: int, occupation_date: date
) -> List[FieldOccupation]:
    return (
        db.query(FieldOccupation)
        .filter(FieldOccupation.field_id == field_id)
        .filter(FieldOccupation.occupation_date == occupation_date)
        .filter(FieldOccupation.status.in_(ALL_HOLDING_STATUSES))
        .order_by(FieldOccupation.start_minute)
        .all()
    )


def get_participant(
    db: Session, game_id: int, user_id: int
) -> Optional[GameParticipant]:
    return (
        db.query(GameParticipant)
        .filter(GameParticipant.game_id == game_id)
        .filter(GameParticipant.user_id == user_id)
        .first()
    )


def get_upcoming_games(
    db: Session,
    today: date,
    current_minute: int,
    skip: int = 0,
    limit: int = 20,
) -> List[Game]:
    """Mejengas abiertas que todavía no empezaron, de la más próxima a la más lejana."""
    return (
        db.query(Game)
        .options(joinedload(Game.field), joinedload(Game.requester))
        .filter(Game.status == GameStatus.OPEN.value)
        .filter(
            or_(
                Game.occupation_date > today,
                and_(
                    Game.occupation_date == today,
                    Game.start_minute > current_minute,
                ),
            )
        )
        .order_by(Game.occupation_date, Game.start_minute)
        .offset(skip)
        .limit(limit)
        .all()
    )
