from app.models.user import User
from app.models.soccer_field import SoccerField
from app.models.field_occupation import (
    FieldOccupation,
    Reservation,
    Game,
    GameParticipant,
)

# This makes the models directory a Python package and ensures all models are loaded
