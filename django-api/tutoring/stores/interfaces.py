"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime

from tutoring.domain import (
    Capacity,
    Course,
    Enrollment,
    JoinRequest,
    Notification,
    RequestId,
    RequestStatus,
    Session,
    SessionDetail,
    SessionId,
    SessionKind,
    TimeWindow,
)
from tutoring.domain.notifications import NotificationCommand


class UnitOfWork(ABC):
    """Groups store calls into one all-or-nothing transaction."""

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Return a context manager; leaving it with an exception rolls back.

        Storage failures surface as PersistenceError.
        """
        ...


class SessionStore(ABC):
    """Interface for session persistence operations."""

    @abstractmethod
    def create_session(
        self,
        tutor_id: int,
        title: str,
        kind: SessionKind,
        window: TimeWindow,
        capacity: Capacity,
        location: str | None,
        course_ids: list[int],
    ) -> Session:
        """Persist a scheduled session and its course links."""
        ...

    @abstractmethod
    def get_session(self, session_id: SessionId, for_update: bool = False) -> Session | None:
        """Return a session by ID, or None if not found.

        With ``for_update`` the session row stays locked until the
        surrounding transaction ends.
        """
        ...

    @abstractmethod
    def get_session_detail(self, session_id: SessionId) -> SessionDetail | None:
        """Return a session with its live enrolled count, or None."""
        ...

    @abstractmethod
    def list_for_tutor(self, tutor_id: int) -> list[SessionDetail]:
        """Return a tutor's sessions ordered by starts_at ascending."""
        ...

    @abstractmethod
    def list_for_student(self, student_id: int, ends_after: datetime) -> list[SessionDetail]:
        """Return sessions the student attends that end after ``ends_after``."""
        ...

    @abstractmethod
    def courses_taught_by(self, tutor_id: int, course_ids: list[int]) -> list[Course]:
        """Return the subset of ``course_ids`` the tutor is registered to teach."""
        ...

    @abstractmethod
    def delete_session(self, session_id: SessionId) -> None:
        """Remove the course links and the session row."""
        ...


class EnrollmentStore(ABC):
    """Interface for the enrollment ledger's persistence."""

    @abstractmethod
    def count(self, session_id: SessionId) -> int:
        ...

    @abstractmethod
    def exists(self, session_id: SessionId, student_id: int) -> bool:
        ...

    @abstractmethod
    def add(self, session_id: SessionId, student_id: int) -> Enrollment:
        """Insert an enrollment.

        Raises:
            DuplicateEnrollmentError: If the pair already exists.
        """
        ...

    @abstractmethod
    def remove(self, session_id: SessionId, student_id: int) -> bool:
        """Delete an enrollment; return False if there was none."""
        ...

    @abstractmethod
    def list_for_session(self, session_id: SessionId) -> list[Enrollment]:
        """Return enrollments ordered by enrolled_at ascending."""
        ...

    @abstractmethod
    def remove_all(self, session_id: SessionId) -> int:
        ...


class JoinRequestStore(ABC):
    """Interface for join request persistence."""

    @abstractmethod
    def get(self, request_id: RequestId, for_update: bool = False) -> JoinRequest | None:
        ...

    @abstractmethod
    def find_for_pair(self, session_id: SessionId, student_id: int) -> JoinRequest | None:
        """Return the most recent request for (session, student), if any."""
        ...

    @abstractmethod
    def create(
        self, session_id: SessionId, requester_id: int, tutor_id: int, message_id: int | None
    ) -> JoinRequest:
        """Insert a pending request.

        Raises:
            DuplicateRequestError: If an active request exists for the pair.
        """
        ...

    @abstractmethod
    def delete(self, request_id: RequestId) -> None:
        ...

    @abstractmethod
    def set_status(
        self,
        request_id: RequestId,
        expected: RequestStatus,
        status: RequestStatus,
        responded_at: datetime,
    ) -> JoinRequest:
        """Move the request from ``expected`` to ``status``.

        Raises:
            RequestNotFoundError: If the request does not exist.
            InvalidStateError: If the stored status is no longer ``expected``.
        """
        ...

    @abstractmethod
    def list_for_session(
        self, session_id: SessionId, status: RequestStatus | None = None
    ) -> list[JoinRequest]:
        """Return requests ordered by created_at ascending."""
        ...

    @abstractmethod
    def remove_all(self, session_id: SessionId) -> int:
        ...


class NotificationSink(ABC):
    """Durable message delivery used to announce state changes."""

    @abstractmethod
    def send(self, command: NotificationCommand) -> Notification:
        """File the message into the receiver's inbox and the sender's sent folder."""
        ...


class UserDirectory(ABC):
    """Read-only access to user display data."""

    @abstractmethod
    def display_name(self, user_id: int) -> str | None:
        """Return "First Last" for a user, or None if the user does not exist."""
        ...
