# ============================================================================
# FILE: app/core/result.py
# Tagged success/failure values returned by the service layer
# ============================================================================
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(Enum):
    """Failure classes, each carrying its HTTP status code"""
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    NOT_FOUND = 404
    CONFLICT = 409
    INTERNAL = 500

    @property
    def status_code(self) -> int:
        return self.value


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[Any], Err]


def bad_request(message: str) -> Err:
    return Err(ErrorKind.BAD_REQUEST, message)


def unauthorized(message: str) -> Err:
    return Err(ErrorKind.UNAUTHORIZED, message)


def not_found(message: str) -> Err:
    return Err(ErrorKind.NOT_FOUND, message)


def conflict(message: str) -> Err:
    return Err(ErrorKind.CONFLICT, message)


def internal(message: str) -> Err:
    return Err(ErrorKind.INTERNAL, message)
