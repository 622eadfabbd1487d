"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in tutoring/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime

from tutoring.domain.state_machine import RequestStatus
from tutoring.domain.value_objects import (
    Capacity,
    RequestId,
    SessionId,
    SessionKind,
    SessionStatus,
    TimeWindow,
)


@dataclass(frozen=True)
class Course:
    """A course a tutor is registered to teach."""

    id: int
    department_code: str
    course_number: str
    title: str

    @property
    def label(self) -> str:
        return f"{self.department_code} {self.course_number}"


@dataclass(frozen=True)
class Session:
    """Domain representation of a tutoring Session."""

    id: SessionId
    tutor_id: int
    title: str
    kind: SessionKind
    window: TimeWindow
    capacity: Capacity
    location: str | None
    status: SessionStatus
    course_ids: tuple[int, ...]
    created_at: datetime

    @property
    def location_or_tbd(self) -> str:
        return self.location or "TBD"


@dataclass(frozen=True)
class SessionDetail:
    """Read projection of a Session with its live enrollment count."""

    session: Session
    enrolled_count: int
    tutor_name: str
    course_labels: tuple[str, ...] = ()

    @property
    def is_full(self) -> bool:
        return self.session.capacity.is_full(self.enrolled_count)


@dataclass(frozen=True)
class Enrollment:
    """A confirmed, occupied seat in a session."""

    session_id: SessionId
    student_id: int
    enrolled_at: datetime
    student_name: str = ""
    student_email: str = ""


@dataclass(frozen=True)
class JoinRequest:
    """A student's ask to occupy one seat in a session."""

    id: RequestId
    session_id: SessionId
    requester_id: int
    tutor_id: int
    status: RequestStatus
    created_at: datetime
    responded_at: datetime | None = None
    message_id: int | None = None
    requester_name: str = ""
    requester_email: str = ""


@dataclass(frozen=True)
class EnrollmentRoster:
    """What a tutor sees for one of their sessions."""

    session_id: SessionId
    session_title: str
    capacity: Capacity
    enrollments: tuple[Enrollment, ...]
    pending_requests: tuple[JoinRequest, ...]

    @property
    def enrolled_count(self) -> int:
        return len(self.enrollments)


@dataclass(frozen=True)
class Notification:
    """A message durably filed into the sender's sent folder and receiver's inbox."""

    id: int
    sender_id: int
    receiver_id: int
    subject: str
    body: str
    kind: str
    sent_at: datetime
