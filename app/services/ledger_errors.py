"""
Errores tipados del libro de disponibilidad.

Cada error lleva un código estable (el mismo que ve el cliente HTTP), un
mensaje para el usuario y el status HTTP con el que lo traduce la API.
"""
from typing import Optional


class LedgerError(Exception):
    status_code = 400
    code = "LEDGER_ERROR"
    message = "The request could not be processed"
    retryable = False

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None):
        self.message = message or self.message
        self.code = code or self.code
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"detail": self.message, "code": self.code}


class ValidationError(LedgerError):
    code = "VALIDATION_ERROR"
    message = "Invalid request"


class ResourceNotFound(LedgerError):
    status_code = 404
    code = "FIELD_NOT_FOUND"
    message = "Soccer field not found or inactive"


class ConflictError(LedgerError):
    status_code = 409
    code = "TIME_CONFLICT"
    message = "This time slot is no longer available"

    def __init__(self, conflicting_kind: Optional[str] = None):
        self.conflicting_kind = conflicting_kind
        if conflicting_kind == "game":
            super().__init__(
                "There is already a game scheduled during this time",
                code="GAME_CONFLICT",
            )
        elif conflicting_kind == "reservation":
            super().__init__("This time slot is already reserved")
        else:
            super().__init__()


class GameFullError(LedgerError):
    status_code = 409
    code = "GAME_FULL"
    message = "This game is full"


class AlreadyJoinedError(LedgerError):
    status_code = 409
    code = "ALREADY_JOINED"
    message = "You are already participating in this game"


class GameNotOpenError(LedgerError):
    code = "GAME_NOT_OPEN"
    message = "This game is no longer accepting players"


class GameExpiredOrStartedError(LedgerError):
    code = "GAME_EXPIRED"
    message = "Cannot join a game that has already passed"


class InvalidAmount(LedgerError):
    status_code = 422
    code = "INVALID_AMOUNT"
    message = "Invalid reservation amount"


class StorageUnavailable(LedgerError):
    status_code = 503
    code = "STORAGE_UNAVAILABLE"
    message = "The booking service is temporarily unavailable. Please try again."
    retryable = True
