"""Domain error codes for the tutoring module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_AUTHORIZED = "NOT_AUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    DUPLICATE_REQUEST = "DUPLICATE_REQUEST"
    DUPLICATE_ENROLLMENT = "DUPLICATE_ENROLLMENT"
    ALREADY_ENROLLED = "ALREADY_ENROLLED"
    INVALID_STATE = "INVALID_STATE"
    SELF_REQUEST = "SELF_REQUEST"
    PERSISTENCE_ERROR = "PERSISTENCE_ERROR"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(DomainError):
    """Raised when input is malformed or out of range."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.VALIDATION_ERROR, message=message)


class AuthorizationError(DomainError):
    """Raised when the caller has no rights over the target entity."""

    def __init__(self, message: str = "You are not authorized to perform this action") -> None:
        super().__init__(code=ErrorCode.NOT_AUTHORIZED, message=message)


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.NOT_FOUND, message=message)


class SessionNotFoundError(NotFoundError):
    def __init__(self) -> None:
        super().__init__("Session not found")


class RequestNotFoundError(NotFoundError):
    def __init__(self) -> None:
        super().__init__("Request not found")


class EnrollmentNotFoundError(NotFoundError):
    def __init__(self, message: str = "Student not found in this session") -> None:
        super().__init__(message)


class CapacityExceededError(DomainError):
    """Raised when a session has no free seat left."""

    def __init__(self, message: str = "This session is already full") -> None:
        super().__init__(code=ErrorCode.CAPACITY_EXCEEDED, message=message)


class DuplicateRequestError(DomainError):
    """Raised when an active join request already exists for the pair."""

    def __init__(self, existing_status: str) -> None:
        if existing_status == "accepted":
            message = "Your request for this session has already been accepted"
        else:
            message = "You already have a pending request for this session"
        super().__init__(code=ErrorCode.DUPLICATE_REQUEST, message=message)


class DuplicateEnrollmentError(DomainError):
    """Raised when the ledger already holds the (session, student) pair."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_ENROLLMENT,
            message="Student is already enrolled in this session",
        )


class AlreadyEnrolledError(DomainError):
    """Raised when a student asks to join a session they already attend."""

    def __init__(self, message: str = "You are already enrolled in this session") -> None:
        super().__init__(code=ErrorCode.ALREADY_ENROLLED, message=message)


class InvalidStateError(DomainError):
    """Raised when a transition is attempted from a non-eligible state."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_STATE, message=message)


class SelfRequestError(DomainError):
    """Raised when a tutor asks to join their own session."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.SELF_REQUEST,
            message="You cannot request to join your own session",
        )


class PersistenceError(DomainError):
    """Raised when the store is unavailable or a transaction fails.

    The message is generic; details are logged, never returned.
    """

    def __init__(self, message: str = "Something went wrong. Please try again.") -> None:
        super().__init__(code=ErrorCode.PERSISTENCE_ERROR, message=message)
