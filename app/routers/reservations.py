from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.crud import occupation as crud
from app.schemas.reservation import ReservationCreate, ReservationResponse
from app.models.field_occupation import OccupationKind, ReservationStatus
from app.services import availability_ledger as ledger
from app.services.auth import get_current_user
from app.models.user import User
from app.utils.time_ranges import parse_time_to_minutes

router = APIRouter()


@router.post("/", response_model=ReservationResponse)
def create_reservation(
    reservation: ReservationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Reserva una cancha. La reserva queda en estado pending hasta que el
    proveedor de pagos confirme el cobro.
    """
    return ledger.request_occupation(
        db,
        field_id=reservation.field_id,
        occupation_date=reservation.reservation_date,
        start_minute=parse_time_to_minutes(reservation.start_time),
        end_minute=parse_time_to_minutes(reservation.end_time),
        kind=OccupationKind.RESERVATION,
        requester_id=current_user.id,
        game_id=reservation.game_id,
    )


def _get_own_reservation(db: Session, reservation_id: int, user: User):
    db_reservation = crud.get_reservation(db, reservation_id)
    if db_reservation is None:
        raise HTTPException(status_code=404, detail="Reservation not found")
    if db_reservation.requester_id != user.id and not user.is_admin:
        raise HTTPException(
            status_code=403, detail="You can only access your own reservations"
        )
    return db_reservation


@router.get("/{reservation_id}", response_model=ReservationResponse)
def read_reservation(
    reservation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _get_own_reservation(db, reservation_id, current_user)


@router.post("/{reservation_id}/cancel", response_model=ReservationResponse)
def cancel_reservation(
    reservation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _get_own_reservation(db, reservation_id, current_user)
    return ledger.update_occupation_status(
        db, reservation_id, ReservationStatus.CANCELLED
    )
