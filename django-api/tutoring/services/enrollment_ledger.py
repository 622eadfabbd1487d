"""Enrollment ledger - confirmed attendees and the capacity invariant."""

import logging

from tutoring.domain import Enrollment, Session, SessionId
from tutoring.domain.errors import (
    CapacityExceededError,
    DuplicateEnrollmentError,
    EnrollmentNotFoundError,
)
from tutoring.stores.interfaces import EnrollmentStore

logger = logging.getLogger(__name__)


class EnrollmentLedger:
    """Service for the set of students holding a seat in a session.

    Seat counts are read from the store on every call and never cached.
    """

    def __init__(self, store: EnrollmentStore) -> None:
        self._store = store

    def is_enrolled(self, session_id: SessionId, student_id: int) -> bool:
        return self._store.exists(session_id, student_id)

    def ensure_seat_available(self, session: Session) -> int:
        """Return the current count, or raise if the session is full.

        Raises:
            CapacityExceededError: If every seat is taken.
        """
        enrolled = self._store.count(session.id)
        if session.capacity.is_full(enrolled):
            logger.warning(
                "Session %s is full (%s/%s)", session.id, enrolled, session.capacity.value
            )
            raise CapacityExceededError()
        return enrolled

    def enroll(self, session: Session, student_id: int) -> Enrollment:
        """Give ``student_id`` a seat in ``session``.

        ``session`` must have been read with a row lock inside the current
        transaction so the count and the insert cannot interleave with
        another enroll for the same session.

        Raises:
            DuplicateEnrollmentError: If the student already holds a seat.
            CapacityExceededError: If the session is full.
        """
        if self._store.exists(session.id, student_id):
            raise DuplicateEnrollmentError()
        self.ensure_seat_available(session)
        enrollment = self._store.add(session.id, student_id)
        logger.info("Student %s enrolled in session %s", student_id, session.id)
        return enrollment

    def unenroll(self, session_id: SessionId, student_id: int, not_found_message: str | None = None) -> None:
        """
        Raises:
            EnrollmentNotFoundError: If the student holds no seat.
        """
        if not self._store.remove(session_id, student_id):
            if not_found_message:
                raise EnrollmentNotFoundError(not_found_message)
            raise EnrollmentNotFoundError()
        logger.info("Student %s left session %s", student_id, session_id)

    def list_enrollments(self, session_id: SessionId) -> list[Enrollment]:
        """Return enrollments, first come first served."""
        return self._store.list_for_session(session_id)

    def clear(self, session_id: SessionId) -> int:
        return self._store.remove_all(session_id)
