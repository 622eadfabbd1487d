"""Session entity manager - creation, read-back and removal of sessions.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Return domain models or raise domain errors
"""

import logging
from datetime import datetime
from typing import Callable

from django.utils import timezone
from django.utils.dateparse import parse_datetime

from tutoring.domain import (
    Actor,
    Capacity,
    Session,
    SessionDetail,
    SessionId,
    SessionKind,
    TimeWindow,
)
from tutoring.domain.errors import (
    AuthorizationError,
    SessionNotFoundError,
    ValidationError,
)
from tutoring.domain.value_objects import MAX_TITLE_LENGTH
from tutoring.stores.interfaces import SessionStore

logger = logging.getLogger(__name__)


def parse_session_id(value) -> SessionId:
    """
    Raises:
        ValidationError: If the value is not a valid UUID.
    """
    try:
        return SessionId.from_string(value)
    except (TypeError, ValueError):
        raise ValidationError("Invalid session ID") from None


def _parse_moment(value: datetime | str) -> datetime:
    if isinstance(value, datetime):
        moment = value
    else:
        try:
            moment = parse_datetime(str(value))
        except ValueError:
            moment = None
        if moment is None:
            raise ValidationError("Invalid date/time format")
    if timezone.is_naive(moment):
        moment = timezone.make_aware(moment)
    return moment


def _parse_capacity(kind: SessionKind, value) -> Capacity:
    try:
        requested = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Capacity must be between 1 and 50") from None
    try:
        return Capacity.for_kind(kind, requested)
    except ValueError as exc:
        raise ValidationError(str(exc)) from None


class SessionManager:
    """Owns creation, read-back and deletion of tutoring sessions."""

    def __init__(self, store: SessionStore, clock: Callable[[], datetime] = timezone.now) -> None:
        self._store = store
        self._clock = clock

    def create_session(
        self,
        actor: Actor,
        title: str,
        kind: str,
        course_ids: list[int],
        starts_at: datetime | str,
        ends_at: datetime | str,
        capacity: int,
        location: str | None = None,
    ) -> Session:
        """Validate and persist a new scheduled session.

        Raises:
            AuthorizationError: If the actor is not a tutor.
            ValidationError: If any field is missing, malformed or out of range.
        """
        if not actor.is_tutor:
            raise AuthorizationError("Only tutors can create sessions")

        title = (title or "").strip()
        if not title:
            raise ValidationError("Session title is required")
        if len(title) > MAX_TITLE_LENGTH:
            raise ValidationError(f"Session title must be {MAX_TITLE_LENGTH} characters or less")

        if not course_ids:
            raise ValidationError("At least one course must be selected")
        unique_course_ids = list(dict.fromkeys(course_ids))

        try:
            session_kind = SessionKind(kind)
        except ValueError:
            raise ValidationError('Invalid session type. Must be "open" or "one_on_one"') from None

        taught = self._store.courses_taught_by(actor.user_id, unique_course_ids)
        if len(taught) != len(unique_course_ids):
            raise ValidationError(
                "One or more courses not found or you are not registered to tutor them"
            )

        start = _parse_moment(starts_at)
        end = _parse_moment(ends_at)
        try:
            window = TimeWindow(starts_at=start, ends_at=end)
        except ValueError as exc:
            raise ValidationError(str(exc)) from None
        if not window.starts_after(self._clock()):
            raise ValidationError("Session must be scheduled in the future")

        seats = _parse_capacity(session_kind, capacity)
        location = (location or "").strip() or None

        session = self._store.create_session(
            tutor_id=actor.user_id,
            title=title,
            kind=session_kind,
            window=window,
            capacity=seats,
            location=location,
            course_ids=unique_course_ids,
        )
        logger.info(
            "Session %s created by tutor %s (kind=%s, capacity=%s)",
            session.id,
            actor.user_id,
            session_kind.value,
            seats.value,
        )
        return session

    def get_session(self, session_id: SessionId) -> SessionDetail:
        """
        Raises:
            SessionNotFoundError: If the session does not exist.
        """
        detail = self._store.get_session_detail(session_id)
        if detail is None:
            raise SessionNotFoundError()
        return detail

    def require_session(self, session_id: SessionId, for_update: bool = False) -> Session:
        session = self._store.get_session(session_id, for_update=for_update)
        if session is None:
            raise SessionNotFoundError()
        return session

    def require_owned(
        self, actor: Actor, session_id: SessionId, for_update: bool = False, action: str = "modify"
    ) -> Session:
        """Return the session if ``actor`` is its tutor.

        Raises:
            SessionNotFoundError: If the session does not exist.
            AuthorizationError: If the actor does not own the session.
        """
        session = self.require_session(session_id, for_update=for_update)
        if session.tutor_id != actor.user_id:
            raise AuthorizationError(f"You can only {action} your own sessions")
        return session

    def list_tutor_sessions(self, tutor_id: int) -> list[SessionDetail]:
        return self._store.list_for_tutor(tutor_id)

    def list_student_sessions(self, student_id: int) -> list[SessionDetail]:
        return self._store.list_for_student(student_id, ends_after=self._clock())

    def delete(self, session_id: SessionId) -> None:
        """Remove the session row and its course links.

        Callers must have cleared enrollments and requests first.
        """
        self._store.delete_session(session_id)
