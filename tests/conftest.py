"""
Configuración compartida para tests pytest
"""
from datetime import date, datetime

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, build_engine

# Importar todos los modelos para que SQLAlchemy pueda resolver las relaciones
from app.models.user import User
from app.models.soccer_field import SoccerField
from app.models.field_occupation import (
    FieldOccupation,
    Reservation,
    Game,
    GameParticipant,
)


# Fecha fija para que los tests no dependan del reloj
NOW = datetime(2030, 3, 10, 12, 0)
GAME_DAY = date(2030, 3, 15)


# Base de datos en memoria para tests
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = build_engine(SQLALCHEMY_DATABASE_URL, poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    """Crear base de datos de test y limpiarla después"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def override_get_db(db):
    """Override de get_db para tests"""
    def _get_db():
        try:
            yield db
        finally:
            pass
    return _get_db


def _create_user(db, user_id, email, is_admin=False):
    user = User(
        id=user_id,
        name="Test",
        email=email,
        hashed_password="hashed",
        is_active=True,
        is_admin=is_admin,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def sample_user(db):
    """Jugador que organiza y reserva"""
    return _create_user(db, 1, "jugador@mejengas.cr")


@pytest.fixture
def second_user(db):
    return _create_user(db, 2, "segundo@mejengas.cr")


@pytest.fixture
def third_user(db):
    return _create_user(db, 3, "tercero@mejengas.cr")


@pytest.fixture
def admin_user(db):
    return _create_user(db, 99, "admin@mejengas.cr", is_admin=True)


@pytest.fixture
def sample_field(db):
    """Cancha activa a ₡5000 la hora"""
    field = SoccerField(
        id=1,
        name="Cancha La Sabana",
        address="San José",
        field_type="futbol_5",
        price_per_hour=5000,
        is_active=True,
    )
    db.add(field)
    db.commit()
    db.refresh(field)
    return field


@pytest.fixture
def other_field(db):
    field = SoccerField(
        id=2, name="Cancha Escazú", price_per_hour=7000, is_active=True
    )
    db.add(field)
    db.commit()
    db.refresh(field)
    return field
