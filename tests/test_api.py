"""
Tests de la API: traducción de errores del libro de disponibilidad a HTTP
"""
import pytest
from fastapi.testclient import TestClient

from app.database import get_db
from app.main import app
from app.services.auth import (
    create_access_token,
    get_current_user,
    get_password_hash,
)

# Fecha lejana: la API usa el reloj real
FAR_DATE = "2099-06-01"


@pytest.fixture
def client(override_get_db):
    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def as_user(client):
    """Devuelve una función que autentica al cliente como el usuario dado"""
    def _login(user):
        app.dependency_overrides[get_current_user] = lambda: user
        return client
    return _login


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Welcome to Mejengas API"}


def test_reservation_requires_authentication(client, sample_field):
    response = client.post(
        "/reservations/",
        json={
            "field_id": sample_field.id,
            "reservation_date": FAR_DATE,
            "start_time": "18:00",
            "end_time": "19:00",
        },
    )
    assert response.status_code == 401


def test_login_returns_usable_token(client, db, sample_user):
    sample_user.hashed_password = get_password_hash("clave-segura")
    db.commit()

    response = client.post(
        "/auth/token",
        data={"username": "jugador@mejengas.cr", "password": "clave-segura"},
    )
    assert response.status_code == 200
    token = response.json()["access_token"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["id"] == sample_user.id


def test_invalid_token_is_rejected(client, sample_user):
    token = create_access_token({"sub": "nadie@mejengas.cr"})
    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_create_reservation_and_conflict(as_user, sample_user, second_user, sample_field):
    client = as_user(sample_user)
    payload = {
        "field_id": sample_field.id,
        "reservation_date": FAR_DATE,
        "start_time": "18:00",
        "end_time": "19:30",
    }

    response = client.post("/reservations/", json=payload)
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "pending"
    assert body["total_amount"] == 7500
    assert body["currency"] == "crc"
    assert body["start_time"] == "18:00"
    assert body["user_id"] == sample_user.id

    client = as_user(second_user)
    conflict = client.post(
        "/games/",
        json={
            "field_id": sample_field.id,
            "game_date": FAR_DATE,
            "start_time": "19:00",
            "end_time": "20:00",
            "title": "Mejenga nocturna",
        },
    )
    assert conflict.status_code == 409
    assert conflict.json() == {
        "detail": "This time slot is already reserved",
        "code": "TIME_CONFLICT",
    }


def test_reservation_validation_errors(as_user, sample_user, sample_field):
    client = as_user(sample_user)

    too_short = client.post(
        "/reservations/",
        json={
            "field_id": sample_field.id,
            "reservation_date": FAR_DATE,
            "start_time": "18:00",
            "end_time": "18:20",
        },
    )
    assert too_short.status_code == 400
    assert too_short.json()["code"] == "DURATION_TOO_SHORT"

    bad_format = client.post(
        "/reservations/",
        json={
            "field_id": sample_field.id,
            "reservation_date": FAR_DATE,
            "start_time": "6pm",
            "end_time": "19:00",
        },
    )
    assert bad_format.status_code == 422

    unknown_field = client.post(
        "/reservations/",
        json={
            "field_id": 404,
            "reservation_date": FAR_DATE,
            "start_time": "18:00",
            "end_time": "19:00",
        },
    )
    assert unknown_field.status_code == 404
    assert unknown_field.json()["code"] == "FIELD_NOT_FOUND"


def test_reservation_owner_can_read_and_cancel(as_user, sample_user, second_user, sample_field):
    client = as_user(sample_user)
    created = client.post(
        "/reservations/",
        json={
            "field_id": sample_field.id,
            "reservation_date": FAR_DATE,
            "start_time": "08:00",
            "end_time": "09:00",
        },
    ).json()

    client = as_user(second_user)
    assert client.get(f"/reservations/{created['id']}").status_code == 403
    assert client.post(f"/reservations/{created['id']}/cancel").status_code == 403

    client = as_user(sample_user)
    cancelled = client.post(f"/reservations/{created['id']}/cancel")
    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "cancelled"

    again = client.post(f"/reservations/{created['id']}/cancel")
    assert again.status_code == 400
    assert again.json()["code"] == "INVALID_STATUS_TRANSITION"


def test_game_flow(as_user, sample_user, second_user, third_user, sample_field):
    client = as_user(sample_user)
    created = client.post(
        "/games/",
        json={
            "field_id": sample_field.id,
            "game_date": FAR_DATE,
            "start_time": "20:00",
            "end_time": "21:00",
            "title": "Mejenga del jueves",
            "max_players": 2,
        },
    )
    assert created.status_code == 200
    game = created.json()
    assert game["status"] == "open"
    assert game["current_players"] == 1
    assert game["organizer_id"] == sample_user.id

    upcoming = client.get("/games/upcoming").json()
    assert [g["id"] for g in upcoming] == [game["id"]]

    client = as_user(second_user)
    joined = client.post(f"/games/{game['id']}/join")
    assert joined.status_code == 200
    assert joined.json()["game_status"] == "full"
    assert joined.json()["spots_remaining"] == 0
    assert joined.json()["participant"]["user_id"] == second_user.id

    client = as_user(third_user)
    full = client.post(f"/games/{game['id']}/join")
    assert full.status_code == 409
    assert full.json()["code"] == "GAME_FULL"

    # Las mejengas llenas ya no aparecen como próximas abiertas
    assert client.get("/games/upcoming").json() == []


def test_only_organizer_cancels_game(as_user, sample_user, second_user, sample_field):
    client = as_user(sample_user)
    game = client.post(
        "/games/",
        json={
            "field_id": sample_field.id,
            "game_date": FAR_DATE,
            "start_time": "10:00",
            "end_time": "11:00",
            "title": "Mejenga",
        },
    ).json()

    client = as_user(second_user)
    assert client.post(f"/games/{game['id']}/cancel").status_code == 403

    client = as_user(sample_user)
    cancelled = client.post(f"/games/{game['id']}/cancel")
    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "cancelled"

    client = as_user(second_user)
    closed = client.post(f"/games/{game['id']}/join")
    assert closed.status_code == 400
    assert closed.json()["code"] == "GAME_NOT_OPEN"


def test_fields_admin_only(as_user, sample_user, admin_user):
    client = as_user(sample_user)
    payload = {"name": "Cancha Heredia", "price_per_hour": 12000}
    assert client.post("/fields/", json=payload).status_code == 403

    client = as_user(admin_user)
    created = client.post("/fields/", json=payload)
    assert created.status_code == 200
    field = created.json()
    assert field["owner_id"] == admin_user.id
    assert field["is_active"] is True

    deactivated = client.put(f"/fields/{field['id']}", json={"is_active": False})
    assert deactivated.status_code == 200
    assert client.get("/fields/").json() == []
    assert client.get(f"/fields/{field['id']}").json()["is_active"] is False


def test_field_availability_lists_both_kinds(as_user, sample_user, sample_field):
    client = as_user(sample_user)
    client.post(
        "/reservations/",
        json={
            "field_id": sample_field.id,
            "reservation_date": FAR_DATE,
            "start_time": "16:00",
            "end_time": "17:00",
        },
    )
    game = client.post(
        "/games/",
        json={
            "field_id": sample_field.id,
            "game_date": FAR_DATE,
            "start_time": "18:00",
            "end_time": "19:30",
            "title": "Mejenga",
        },
    ).json()
    client.post(f"/games/{game['id']}/cancel")
    client.post(
        "/games/",
        json={
            "field_id": sample_field.id,
            "game_date": FAR_DATE,
            "start_time": "07:00",
            "end_time": "08:00",
            "title": "Mejenga temprano",
        },
    )

    response = client.get(
        f"/fields/{sample_field.id}/availability",
        params={"occupation_date": FAR_DATE},
    )
    assert response.status_code == 200
    occupied = [
        (slot["kind"], slot["start_time"], slot["end_time"])
        for slot in response.json()["occupied"]
    ]
    assert occupied == [
        ("game", "07:00", "08:00"),
        ("reservation", "16:00", "17:00"),
    ]


def test_field_availability_answers_for_a_range(as_user, sample_user, sample_field):
    client = as_user(sample_user)
    client.post(
        "/reservations/",
        json={
            "field_id": sample_field.id,
            "reservation_date": FAR_DATE,
            "start_time": "16:00",
            "end_time": "17:00",
        },
    )

    def check(start_time, end_time):
        return client.get(
            f"/fields/{sample_field.id}/availability",
            params={
                "occupation_date": FAR_DATE,
                "start_time": start_time,
                "end_time": end_time,
            },
        )

    assert check("16:30", "17:30").json()["is_available"] is False
    # Tocarse en el borde no es choque
    assert check("17:00", "18:00").json()["is_available"] is True
    assert check("18:00", "17:00").status_code == 400

    only_day = client.get(
        f"/fields/{sample_field.id}/availability",
        params={"occupation_date": FAR_DATE},
    )
    assert only_day.json()["is_available"] is None


def test_games_include_field_and_organizer_names(as_user, sample_user, sample_field):
    client = as_user(sample_user)
    client.post(
        "/games/",
        json={
            "field_id": sample_field.id,
            "game_date": FAR_DATE,
            "start_time": "20:00",
            "end_time": "21:00",
            "title": "Mejenga del viernes",
        },
    )

    upcoming = client.get("/games/upcoming").json()
    assert len(upcoming) == 1
    assert upcoming[0]["field_name"] == "Cancha La Sabana"
    assert upcoming[0]["field_address"] == "San José"
    assert upcoming[0]["organizer_name"] == sample_user.name


def test_field_price_cannot_be_updated_to_zero(as_user, admin_user, sample_field):
    client = as_user(admin_user)
    response = client.put(f"/fields/{sample_field.id}", json={"price_per_hour": 0})
    assert response.status_code == 400

    field = client.get(f"/fields/{sample_field.id}").json()
    assert field["price_per_hour"] == 5000
