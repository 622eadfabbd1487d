"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Self
from uuid import UUID

MAX_TITLE_LENGTH = 150
MIN_CAPACITY = 1
MAX_CAPACITY = 50


@dataclass(frozen=True)
class SessionId:
    """Unique identifier for a tutoring Session."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class RequestId:
    """Unique identifier for a JoinRequest."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    def __str__(self) -> str:
        return str(self.value)


class SessionKind(Enum):
    OPEN = "open"
    ONE_ON_ONE = "one_on_one"

    @property
    def label(self) -> str:
        return "One-on-One" if self is SessionKind.ONE_ON_ONE else "Group"


class SessionStatus(Enum):
    SCHEDULED = "scheduled"
    ACTIVE = "active"
    OVER = "over"


class Role(Enum):
    STUDENT = "student"
    TUTOR = "tutor"


@dataclass(frozen=True)
class Actor:
    """The authenticated caller: an opaque user id plus role."""

    user_id: int
    role: Role

    @property
    def is_tutor(self) -> bool:
        return self.role is Role.TUTOR


@dataclass(frozen=True)
class Capacity:
    """Seat count of a session, bounded to [1, 50]."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValueError("Capacity must be an integer")
        if not MIN_CAPACITY <= self.value <= MAX_CAPACITY:
            raise ValueError(
                f"Capacity must be between {MIN_CAPACITY} and {MAX_CAPACITY}"
            )

    @classmethod
    def for_kind(cls, kind: SessionKind, requested: int) -> Self:
        """Validate the requested capacity; one-on-one sessions always seat one."""
        capacity = cls(requested)
        if kind is SessionKind.ONE_ON_ONE:
            return cls(1)
        return capacity

    def is_full(self, enrolled: int) -> bool:
        return enrolled >= self.value


@dataclass(frozen=True)
class TimeWindow:
    """Start and end of a session; end is strictly after start."""

    starts_at: datetime
    ends_at: datetime

    def __post_init__(self) -> None:
        if self.ends_at <= self.starts_at:
            raise ValueError("End time must be after start time")

    def starts_after(self, moment: datetime) -> bool:
        return self.starts_at > moment
