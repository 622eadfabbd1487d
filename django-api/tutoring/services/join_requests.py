"""Join request service - the request side of enrollment.

All status changes go through tutoring.domain.state_machine.transition.
"""

import logging
from datetime import datetime
from typing import Callable

from django.utils import timezone

from tutoring.domain import (
    Actor,
    JoinRequest,
    RequestEvent,
    RequestId,
    RequestStatus,
    Session,
    SessionId,
)
from tutoring.domain.errors import (
    AlreadyEnrolledError,
    AuthorizationError,
    DuplicateRequestError,
    RequestNotFoundError,
    SelfRequestError,
    ValidationError,
)
from tutoring.domain.state_machine import transition
from tutoring.stores.interfaces import JoinRequestStore

logger = logging.getLogger(__name__)

ENROLLED = "enrolled"
NO_REQUEST = "none"


def parse_request_id(value) -> RequestId:
    try:
        return RequestId.from_string(value)
    except (TypeError, ValueError):
        raise ValidationError("Invalid request ID") from None


class JoinRequestService:
    """Creates join requests and moves them between states."""

    def __init__(
        self, store: JoinRequestStore, clock: Callable[[], datetime] = timezone.now
    ) -> None:
        self._store = store
        self._clock = clock

    def check_can_request(
        self, session: Session, student_id: int, enrolled: bool
    ) -> JoinRequest | None:
        """Validate that ``student_id`` may ask to join ``session``.

        Returns a previous denied request that the new one will replace,
        or None.

        Raises:
            SelfRequestError: If the student is the session's tutor.
            AlreadyEnrolledError: If the student already holds a seat.
            DuplicateRequestError: If a pending or accepted request exists.
        """
        if session.tutor_id == student_id:
            raise SelfRequestError()
        if enrolled:
            raise AlreadyEnrolledError()
        previous = self._store.find_for_pair(session.id, student_id)
        if previous is not None and previous.status.is_active:
            raise DuplicateRequestError(previous.status.value)
        return previous

    def open(
        self,
        session: Session,
        student_id: int,
        message_id: int | None,
        replaces: JoinRequest | None = None,
    ) -> JoinRequest:
        """Insert a pending request, deleting the denied one it replaces."""
        if replaces is not None:
            self._store.delete(replaces.id)
        request = self._store.create(
            session_id=session.id,
            requester_id=student_id,
            tutor_id=session.tutor_id,
            message_id=message_id,
        )
        logger.info(
            "Join request %s opened by student %s for session %s",
            request.id,
            student_id,
            session.id,
        )
        return request

    def get_owned(
        self, actor: Actor, request_id: RequestId, action: str, for_update: bool = True
    ) -> JoinRequest:
        """Return a request addressed to ``actor``, locked for update by default.

        Raises:
            RequestNotFoundError: If the request does not exist.
            AuthorizationError: If the actor is not the request's tutor.
        """
        request = self._store.get(request_id, for_update=for_update)
        if request is None:
            raise RequestNotFoundError()
        if request.tutor_id != actor.user_id:
            raise AuthorizationError(f"You are not authorized to {action} this request")
        return request

    def apply(self, request: JoinRequest, event: RequestEvent) -> JoinRequest:
        """Move ``request`` along ``event`` and stamp the response time.

        Raises:
            InvalidStateError: If the transition is not allowed, or the stored
                row has moved on since ``request`` was read.
        """
        status = transition(request.status, event)
        updated = self._store.set_status(
            request.id, request.status, status, responded_at=self._clock()
        )
        logger.info(
            "Join request %s: %s -> %s (%s)",
            request.id,
            request.status.value,
            status.value,
            event.value,
        )
        return updated

    def revoke_accepted(self, session_id: SessionId, student_id: int) -> JoinRequest | None:
        """Deny the accepted request behind an enrollment that was removed."""
        request = self._store.find_for_pair(session_id, student_id)
        if request is None or request.status is not RequestStatus.ACCEPTED:
            return None
        return self.apply(request, RequestEvent.REVOKE)

    def pending_for_session(self, session_id: SessionId) -> list[JoinRequest]:
        return self._store.list_for_session(session_id, status=RequestStatus.PENDING)

    def clear(self, session_id: SessionId) -> int:
        return self._store.remove_all(session_id)

    def status_for(self, session_id: SessionId, student_id: int, enrolled: bool) -> str:
        """Return "enrolled", the latest request status, or "none"."""
        if enrolled:
            return ENROLLED
        request = self._store.find_for_pair(session_id, student_id)
        if request is None:
            return NO_REQUEST
        return request.status.value
