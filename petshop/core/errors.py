"""Error taxonomy shared by the cart, promo and checkout services"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Category of a failed operation"""
    VALIDATION = "validation"
    PRECONDITION = "precondition"
    PERSISTENCE = "persistence"
    NOT_FOUND = "not_found"
    BUSY = "busy"
    UNAUTHENTICATED = "unauthenticated"


STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.PRECONDITION: 409,
    ErrorKind.PERSISTENCE: 502,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.BUSY: 409,
    ErrorKind.UNAUTHENTICATED: 401,
}


@dataclass(frozen=True)
class ShopError:
    """Error value carried in the Error branch of a Result"""
    kind: ErrorKind
    message: str
    payload: Optional[dict] = field(default=None, compare=False)

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]

    def to_dict(self) -> dict:
        rv = dict(self.payload or ())
        rv["kind"] = self.kind.value
        rv["message"] = self.message
        return rv


def validation(message: str) -> ShopError:
    return ShopError(ErrorKind.VALIDATION, message)


def persistence(message: str) -> ShopError:
    return ShopError(ErrorKind.PERSISTENCE, message)


def not_found(message: str = "Resource not found") -> ShopError:
    return ShopError(ErrorKind.NOT_FOUND, message)


SIGN_IN_REQUIRED = ShopError(ErrorKind.UNAUTHENTICATED, "Please sign in to continue.")
BUSY = ShopError(ErrorKind.BUSY, "Another cart update is still in progress.")


class PreconditionFailure(Exception):
    """Raised when a checkout is attempted before its preconditions hold."""

    def __init__(self, message: str):
        super().__init__(message)
        self.error = ShopError(ErrorKind.PRECONDITION, message)
