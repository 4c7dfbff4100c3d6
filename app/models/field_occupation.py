from sqlalchemy import (
    Column,
    Integer,
    String,
    Date,
    DateTime,
    Numeric,
    ForeignKey,
    CheckConstraint,
    UniqueConstraint,
    Index,
    DDL,
    event,
)
from sqlalchemy.orm import relationship, synonym
from datetime import datetime
import enum

from app.database import Base
from app.utils.time_ranges import minutes_to_time_string


class OccupationKind(str, enum.Enum):
    RESERVATION = "reservation"
    GAME = "game"


class ReservationStatus(str, enum.Enum):
    PENDING = "pending"  # Esperando confirmación del pago
    PAID = "paid"
    CANCELLED = "cancelled"
    FAILED = "failed"  # El pago fue rechazado


class GameStatus(str, enum.Enum):
    OPEN = "open"  # Aceptando jugadores
    FULL = "full"  # Se llegó a max_players
    CANCELLED = "cancelled"
    COMPLETED = "completed"


# Estados que retienen el horario de la cancha, por tipo de ocupación
HOLDING_STATUSES = {
    OccupationKind.RESERVATION: (ReservationStatus.PENDING, ReservationStatus.PAID),
    OccupationKind.GAME: (GameStatus.OPEN, GameStatus.FULL),
}

ALL_HOLDING_STATUSES = [
    status.value for statuses in HOLDING_STATUSES.values() for status in statuses
]

INITIAL_STATUS = {
    OccupationKind.RESERVATION: ReservationStatus.PENDING,
    OccupationKind.GAME: GameStatus.OPEN,
}


class FieldOccupation(Base):
    """
    Ocupación de una cancha en un rango [start_minute, end_minute) de una fecha.

    Reservas y mejengas comparten esta tabla (herencia joined-table), así el
    chequeo de choques de horario es una única consulta sobre ambos tipos.
    """

    __tablename__ = "field_occupations"
    __table_args__ = (
        CheckConstraint(
            "end_minute > start_minute", name="ck_field_occupations_interval"
        ),
        Index("ix_field_occupations_field_date", "field_id", "occupation_date"),
        {"extend_existing": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    field_id = Column(Integer, ForeignKey("soccer_fields.id"), nullable=False)
    kind = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False)
    occupation_date = Column(Date, nullable=False)
    start_minute = Column(Integer, nullable=False)  # Minutos desde medianoche
    end_minute = Column(Integer, nullable=False)
    requester_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    field = relationship("SoccerField", back_populates="occupations")
    requester = relationship("User")

    __mapper_args__ = {"polymorphic_on": kind}

    @property
    def start_time(self) -> str:
        return minutes_to_time_string(self.start_minute)

    @property
    def end_time(self) -> str:
        return minutes_to_time_string(self.end_minute)

    @property
    def duration_minutes(self) -> int:
        return self.end_minute - self.start_minute

    @property
    def holds_slot(self) -> bool:
        return self.status in ALL_HOLDING_STATUSES


class Reservation(FieldOccupation):
    __tablename__ = "reservations"
    __table_args__ = {"extend_existing": True}

    id = Column(Integer, ForeignKey("field_occupations.id"), primary_key=True)
    # Reserva hecha a nombre de una mejenga (opcional)
    game_id = Column(Integer, ForeignKey("games.id"), nullable=True)
    total_amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), default="crc")
    # Referencia del cobro, la completa el proveedor de pagos
    payment_reference = Column(String, nullable=True)

    user_id = synonym("requester_id")

    __mapper_args__ = {"polymorphic_identity": OccupationKind.RESERVATION.value}


class Game(FieldOccupation):
    __tablename__ = "games"
    __table_args__ = (
        CheckConstraint("current_players <= max_players", name="ck_games_capacity"),
        {"extend_existing": True},
    )

    id = Column(Integer, ForeignKey("field_occupations.id"), primary_key=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    max_players = Column(Integer, nullable=False, default=22)
    current_players = Column(Integer, nullable=False, default=0)
    price_per_player = Column(Numeric(10, 2), nullable=True)
    game_type = Column(String, default="casual")

    organizer_id = synonym("requester_id")

    # Relationships
    participants = relationship(
        "GameParticipant",
        back_populates="game",
        order_by="GameParticipant.joined_at",
    )

    __mapper_args__ = {"polymorphic_identity": OccupationKind.GAME.value}

    @property
    def spots_remaining(self) -> int:
        return max(self.max_players - self.current_players, 0)

    @property
    def field_name(self):
        return self.field.name if self.field else None

    @property
    def field_address(self):
        return self.field.address if self.field else None

    @property
    def organizer_name(self):
        return self.requester.name if self.requester else None


class GameParticipant(Base):
    __tablename__ = "game_participants"
    __table_args__ = (
        UniqueConstraint("game_id", "user_id", name="uq_game_participants_game_user"),
        {"extend_existing": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    game_id = Column(Integer, ForeignKey("games.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    joined_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    game = relationship("Game", back_populates="participants")
    user = relationship("User", back_populates="game_participations")


# Segunda capa contra el doble booking: en PostgreSQL la base rechaza dos
# ocupaciones vigentes que se solapen en la misma cancha y fecha.
event.listen(
    FieldOccupation.__table__,
    "before_create",
    DDL("CREATE EXTENSION IF NOT EXISTS btree_gist").execute_if(
        dialect="postgresql"
    ),
)
event.listen(
    FieldOccupation.__table__,
    "after_create",
    DDL(
        "ALTER TABLE field_occupations "
        "ADD CONSTRAINT no_overlapping_field_occupations "
        "EXCLUDE USING gist ("
        "field_id WITH =, "
        "occupation_date WITH =, "
        "int4range(start_minute, end_minute, '[)') WITH &&"
        ") WHERE (status IN ('pending', 'paid', 'open', 'full'))"
    ).execute_if(dialect="postgresql"),
)
