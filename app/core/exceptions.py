"""
Return authorization error taxonomy.

Services raise these; app.main maps them to HTTP responses.
"""
from enum import Enum
from typing import Dict, Optional

from fastapi import status


class ErrorKind(str, Enum):
    """Error categories surfaced at the HTTP boundary."""
    UNAUTHORIZED = "Unauthorized"
    NOT_FOUND = "NotFound"
    UNPROCESSABLE_STATE = "UnprocessableState"
    INVALID_INPUT = "InvalidInput"


STATUS_CODES: Dict[ErrorKind, int] = {
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.UNPROCESSABLE_STATE: 422,
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
}


class ReturnAuthorizationError(Exception):
    """Base exception for return authorization errors."""
    kind: ErrorKind = ErrorKind.INVALID_INPUT
    default_message = "Invalid request"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]


class Unauthorized(ReturnAuthorizationError):
    kind = ErrorKind.UNAUTHORIZED
    default_message = "You are not authorized to perform that action."


class NotFound(ReturnAuthorizationError):
    kind = ErrorKind.NOT_FOUND
    default_message = "The resource you were looking for could not be found."


class UnprocessableState(ReturnAuthorizationError):
    kind = ErrorKind.UNPROCESSABLE_STATE
    default_message = "The request could not be applied in the current state."


class InvalidTransition(UnprocessableState):
    """A state event that is never legal from the current state."""
    default_message = "That transition is not allowed from the current state."


class InvalidInput(ReturnAuthorizationError):
    kind = ErrorKind.INVALID_INPUT
