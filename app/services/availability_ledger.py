"""
Libro de disponibilidad de canchas.

Decide si una reserva o una mejenga puede ocupar una cancha en un rango
horario, y si un jugador puede sumarse a una mejenga. Cada operación corre en
una única transacción: la lectura de choques y la escritura quedan atómicas,
así que de dos pedidos simultáneos que se solapan sólo uno es admitido.

Reglas:
- Una reserva bloquea una mejenga y viceversa (mismo recurso físico).
- Los rangos son semiabiertos [inicio, fin); tocarse en el borde no es choque.
- El primero que escribe gana; no hay prioridades ni desalojo.
"""
import logging
import os
from contextlib import contextmanager
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
from zoneinfo import ZoneInfo

from dotenv import load_dotenv
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from app.crud import occupation as occupation_crud
from app.crud import soccer_field as field_crud
from app.models.field_occupation import (
    INITIAL_STATUS,
    FieldOccupation,
    Game,
    GameParticipant,
    GameStatus,
    OccupationKind,
    Reservation,
    ReservationStatus,
)
from app.schemas.game import GameDetails
from app.services.ledger_errors import (
    AlreadyJoinedError,
    ConflictError,
    GameExpiredOrStartedError,
    GameFullError,
    GameNotOpenError,
    InvalidAmount,
    LedgerError,
    ResourceNotFound,
    StorageUnavailable,
    ValidationError,
)
from app.utils.time_ranges import (
    MINUTES_PER_DAY,
    minutes_of_day,
    minutes_to_time_string,
    start_instant,
)

load_dotenv()

logger = logging.getLogger(__name__)

MIN_OCCUPATION_MINUTES = int(os.getenv("MIN_OCCUPATION_MINUTES", "30"))
MAX_OCCUPATION_MINUTES = int(os.getenv("MAX_OCCUPATION_MINUTES", "480"))
APP_TIMEZONE = os.getenv("APP_TIMEZONE", "America/Costa_Rica")

MIN_PLAYERS = 2
MAX_PLAYERS = 50
MAX_PRICE_PER_PLAYER = 100000

ALLOWED_TRANSITIONS = {
    OccupationKind.RESERVATION: {
        ReservationStatus.PENDING.value: {
            ReservationStatus.PAID.value,
            ReservationStatus.FAILED.value,
            ReservationStatus.CANCELLED.value,
        },
        ReservationStatus.PAID.value: {ReservationStatus.CANCELLED.value},
    },
    OccupationKind.GAME: {
        GameStatus.OPEN.value: {GameStatus.CANCELLED.value, GameStatus.COMPLETED.value},
        GameStatus.FULL.value: {GameStatus.CANCELLED.value, GameStatus.COMPLETED.value},
    },
}


def local_now() -> datetime:
    """Hora actual de la aplicación, sin tzinfo (las fechas se guardan naive)."""
    return datetime.now(ZoneInfo(APP_TIMEZONE)).replace(tzinfo=None)


def _translate_integrity_error(exc: IntegrityError) -> Optional[LedgerError]:
    detail = str(exc.orig)
    if "no_overlapping_field_occupations" in detail:
        return ConflictError()
    if (
        "uq_game_participants_game_user" in detail
        or "game_participants.game_id, game_participants.user_id" in detail
    ):
        return AlreadyJoinedError()
    if "ck_games_capacity" in detail:
        return GameFullError()
    return None


@contextmanager
def _ledger_transaction(db: Session, operation: str):
    """
    Frontera transaccional de cada operación del libro.

    Hace commit al salir sin errores y rollback ante cualquier error, de modo
    que un pedido abortado nunca deja una ocupación a medio escribir.
    """
    try:
        yield
        db.commit()
    except LedgerError as exc:
        db.rollback()
        logger.info(f"{operation} rechazada: {exc.code}")
        raise
    except IntegrityError as exc:
        db.rollback()
        error = _translate_integrity_error(exc)
        if error is None:
            raise
        logger.info(f"{operation} rechazada por la base de datos: {error.code}")
        raise error from exc
    except OperationalError as exc:
        db.rollback()
        logger.warning(f"Storage no disponible durante {operation}: {exc}")
        raise StorageUnavailable() from exc
    except Exception:
        db.rollback()
        raise


def _validate_interval(
    occupation_date: date, start_minute: int, end_minute: int, now: datetime
) -> None:
    if not (0 <= start_minute < MINUTES_PER_DAY and 0 < end_minute <= MINUTES_PER_DAY):
        raise ValidationError(
            "Start and end time must be valid times of day",
            code="INVALID_TIME_RANGE",
        )

    if end_minute <= start_minute:
        raise ValidationError(
            "End time must be after start time", code="INVALID_TIME_RANGE"
        )

    if start_instant(occupation_date, start_minute) <= now:
        raise ValidationError(
            "Date and time must be in the future", code="INVALID_DATE"
        )

    duration = end_minute - start_minute
    if duration < MIN_OCCUPATION_MINUTES:
        raise ValidationError(
            f"Minimum occupation time is {MIN_OCCUPATION_MINUTES} minutes",
            code="DURATION_TOO_SHORT",
        )
    if duration > MAX_OCCUPATION_MINUTES:
        raise ValidationError(
            f"Occupation cannot exceed {MAX_OCCUPATION_MINUTES // 60} hours",
            code="DURATION_TOO_LONG",
        )


def _validate_game_details(details: Optional[GameDetails]) -> None:
    if details is None or not (details.title or "").strip():
        raise ValidationError(
            "A game needs a title", code="MISSING_REQUIRED_FIELDS"
        )

    if not MIN_PLAYERS <= details.max_players <= MAX_PLAYERS:
        raise ValidationError(
            f"Max players must be between {MIN_PLAYERS} and {MAX_PLAYERS}",
            code="INVALID_PLAYER_COUNT",
        )

    price = details.price_per_player
    if price is not None and not 0 <= price <= MAX_PRICE_PER_PLAYER:
        raise ValidationError(
            f"Price per player must be between 0 and {MAX_PRICE_PER_PLAYER:,}",
            code="INVALID_PRICE",
        )


def calculate_total_amount(price_per_hour, duration_minutes: int) -> Decimal:
    """
    Monto de una reserva: tarifa por hora × horas reservadas.

    Una tarifa ausente o en cero es un error de configuración de la cancha y se
    informa como InvalidAmount en lugar de cobrar cero.
    """
    if price_per_hour is None:
        raise InvalidAmount()

    total = (Decimal(str(price_per_hour)) * duration_minutes / 60).quantize(
        Decimal("0.01"), rounding=ROUND_HALF_UP
    )
    if total <= 0:
        raise InvalidAmount()
    return total


def _seat_participant(db: Session, game: Game, user_id: int) -> GameParticipant:
    participant = GameParticipant(game_id=game.id, user_id=user_id)
    db.add(participant)

    game.current_players = (game.current_players or 0) + 1
    if game.current_players >= game.max_players:
        game.status = GameStatus.FULL.value

    db.flush()
    return participant


def request_occupation(
    db: Session,
    field_id: int,
    occupation_date: date,
    start_minute: int,
    end_minute: int,
    kind: OccupationKind,
    requester_id: int,
    game_details: Optional[GameDetails] = None,
    game_id: Optional[int] = None,
    enroll_requester: bool = False,
    now: Optional[datetime] = None,
) -> FieldOccupation:
    """
    Admite (o rechaza) una ocupación de la cancha en [start_minute, end_minute).

    Args:
        db: Sesión de base de datos
        field_id: ID de la cancha
        occupation_date: Fecha de la ocupación
        start_minute: Inicio, en minutos desde medianoche
        end_minute: Fin (excluido), en minutos desde medianoche
        kind: reservation o game
        requester_id: Usuario que hace el pedido
        game_details: Datos de la mejenga (sólo para kind=game)
        game_id: Mejenga a cuyo nombre se hace la reserva (opcional)
        enroll_requester: Si es True el organizador queda anotado como
            primer jugador de la mejenga, en la misma transacción
        now: Hora de referencia; por defecto la hora local actual

    Returns:
        FieldOccupation: La Reservation o Game creada, ya confirmada

    Raises:
        ValidationError, ResourceNotFound, ConflictError, InvalidAmount,
        StorageUnavailable
    """
    kind = OccupationKind(kind)
    now = now or local_now()

    _validate_interval(occupation_date, start_minute, end_minute, now)
    if kind == OccupationKind.GAME:
        _validate_game_details(game_details)

    with _ledger_transaction(db, "request_occupation"):
        # CRÍTICO: bloquear la cancha antes de buscar choques
        field = field_crud.get_soccer_field(db, field_id, for_update=True)
        if field is None or not field.is_active:
            raise ResourceNotFound()

        conflicts = occupation_crud.get_overlapping_occupations(
            db, field_id, occupation_date, start_minute, end_minute
        )
        if conflicts:
            raise ConflictError(conflicts[0].kind)

        if kind == OccupationKind.RESERVATION:
            if game_id is not None and occupation_crud.get_game(db, game_id) is None:
                raise ResourceNotFound("Game not found", code="GAME_NOT_FOUND")

            occupation = Reservation(
                game_id=game_id,
                total_amount=calculate_total_amount(
                    field.price_per_hour, end_minute - start_minute
                ),
                currency="crc",
            )
        else:
            occupation = Game(
                title=game_details.title.strip(),
                description=game_details.description,
                max_players=game_details.max_players,
                current_players=0,
                price_per_player=game_details.price_per_player,
                game_type=game_details.game_type,
            )

        occupation.field_id = field_id
        occupation.occupation_date = occupation_date
        occupation.start_minute = start_minute
        occupation.end_minute = end_minute
        occupation.requester_id = requester_id
        occupation.status = INITIAL_STATUS[kind].value
        db.add(occupation)
        db.flush()

        if kind == OccupationKind.GAME and enroll_requester:
            _seat_participant(db, occupation, requester_id)

        occupation_id = occupation.id

    db.refresh(occupation)
    logger.info(
        f"Ocupación {occupation_id} admitida ({kind.value}): cancha {field_id}, "
        f"{occupation_date} {minutes_to_time_string(start_minute)}-"
        f"{minutes_to_time_string(end_minute)}"
    )
    return occupation


def admit_participant(
    db: Session, game_id: int, user_id: int, now: Optional[datetime] = None
) -> GameParticipant:
    """
    Suma un jugador a una mejenga.

    El conteo de jugadores y el pase a FULL se hacen con la fila de la mejenga
    bloqueada, así dos jugadores que entran a la vez nunca superan max_players.

    Raises:
        ResourceNotFound, GameNotOpenError, GameExpiredOrStartedError,
        AlreadyJoinedError, GameFullError, StorageUnavailable
    """
    now = now or local_now()

    with _ledger_transaction(db, "admit_participant"):
        game = occupation_crud.get_game(db, game_id, for_update=True)
        if game is None:
            raise ResourceNotFound("Game not found", code="GAME_NOT_FOUND")

        if game.status not in (GameStatus.OPEN.value, GameStatus.FULL.value):
            raise GameNotOpenError()

        today = now.date()
        if game.occupation_date < today:
            raise GameExpiredOrStartedError()
        if game.occupation_date == today and game.start_minute <= minutes_of_day(now):
            raise GameExpiredOrStartedError(
                "Cannot join a game that has already started", code="GAME_STARTED"
            )

        if occupation_crud.get_participant(db, game.id, user_id) is not None:
            raise AlreadyJoinedError()

        if game.status == GameStatus.FULL.value or game.current_players >= game.max_players:
            raise GameFullError()

        participant = _seat_participant(db, game, user_id)
        current_players = game.current_players
        max_players = game.max_players

    db.refresh(participant)
    logger.info(
        f"Usuario {user_id} se sumó a la mejenga {game_id} "
        f"({current_players}/{max_players})"
    )
    return participant


def update_occupation_status(
    db: Session, occupation_id: int, new_status: str
) -> FieldOccupation:
    """
    Cambia el estado de una ocupación (pago confirmado, cancelación, etc.).

    Sólo se permiten las transiciones de ALLOWED_TRANSITIONS; una ocupación en
    estado terminal no vuelve a retener la cancha.
    """
    new_status = getattr(new_status, "value", new_status)

    with _ledger_transaction(db, "update_occupation_status"):
        occupation = occupation_crud.get_occupation(db, occupation_id, for_update=True)
        if occupation is None:
            raise ResourceNotFound(
                "Occupation not found", code="OCCUPATION_NOT_FOUND"
            )

        kind = OccupationKind(occupation.kind)
        allowed = ALLOWED_TRANSITIONS[kind].get(occupation.status, set())
        if new_status not in allowed:
            raise ValidationError(
                f"Cannot change a {kind.value} from {occupation.status} to {new_status}",
                code="INVALID_STATUS_TRANSITION",
            )

        previous_status = occupation.status
        occupation.status = new_status
        db.flush()

    db.refresh(occupation)
    logger.info(
        f"Ocupación {occupation_id} pasó de {previous_status} a {new_status}"
    )
    return occupation
