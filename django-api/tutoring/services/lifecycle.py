"""Lifecycle coordinator - every externally triggered tutoring event.

The coordinator is the only writer that touches sessions, enrollments,
join requests and notifications together. Each public method is one unit
of work: state changes and the notifications announcing them commit or
roll back together.

Lock order is always session row first, then join request rows.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from tutoring.domain import (
    Actor,
    EnrollmentRoster,
    JoinRequest,
    RequestEvent,
    Session,
    SessionDetail,
)
from tutoring.domain.errors import (
    AlreadyEnrolledError,
    DomainError,
    NotFoundError,
    PersistenceError,
)
from tutoring.domain.notifications import (
    NotificationCommand,
    acceptance_notice,
    denial_notice,
    join_request_notice,
    plan_cancellation,
    removal_notice,
    unenroll_notice,
)
from tutoring.domain.state_machine import transition
from tutoring.services.enrollment_ledger import EnrollmentLedger
from tutoring.services.join_requests import NO_REQUEST, JoinRequestService, parse_request_id
from tutoring.services.session_manager import SessionManager, parse_session_id
from tutoring.stores.interfaces import NotificationSink, UnitOfWork, UserDirectory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CancellationResult:
    """Outcome of cancelling a session."""

    notified_count: int
    commands: tuple[NotificationCommand, ...] = ()


class LifecycleCoordinator:
    """Orchestrates session, enrollment, request and notification changes."""

    def __init__(
        self,
        sessions: SessionManager,
        ledger: EnrollmentLedger,
        requests: JoinRequestService,
        sink: NotificationSink,
        directory: UserDirectory,
        uow: UnitOfWork,
    ) -> None:
        self._sessions = sessions
        self._ledger = ledger
        self._requests = requests
        self._sink = sink
        self._directory = directory
        self._uow = uow

    def _name(self, user_id: int, fallback: str) -> str:
        return self._directory.display_name(user_id) or fallback

    def _dispatch(self, session: Session, commands: list[NotificationCommand]) -> list[int]:
        """Send every command; any failure aborts the enclosing unit of work.

        Raises:
            PersistenceError: If the sink fails to record a notification.
        """
        message_ids = []
        for index, command in enumerate(commands, start=1):
            try:
                message_ids.append(self._sink.send(command).id)
            except DomainError:
                raise
            except Exception as exc:
                logger.exception(
                    "Notification %s/%s to user %s for session %s failed",
                    index,
                    len(commands),
                    command.recipient_id,
                    session.id,
                )
                raise PersistenceError() from exc
        return message_ids

    # Sessions

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
    ) -> SessionDetail:
        with self._uow.atomic():
            session = self._sessions.create_session(
                actor,
                title=title,
                kind=kind,
                course_ids=course_ids,
                starts_at=starts_at,
                ends_at=ends_at,
                capacity=capacity,
                location=location,
            )
            return self._sessions.get_session(session.id)

    def get_session(self, session_id: str) -> SessionDetail:
        return self._sessions.get_session(parse_session_id(session_id))

    def list_tutor_sessions(self, tutor_id: int) -> list[SessionDetail]:
        return self._sessions.list_tutor_sessions(tutor_id)

    def list_student_sessions(self, actor: Actor) -> list[SessionDetail]:
        return self._sessions.list_student_sessions(actor.user_id)

    def cancel_session(self, actor: Actor, session_id: str) -> CancellationResult:
        """Delete a session after denying its pending requests and notifying everyone.

        Raises:
            SessionNotFoundError: If the session does not exist.
            AuthorizationError: If the actor does not own the session.
        """
        sid = parse_session_id(session_id)
        with self._uow.atomic():
            session = self._sessions.require_owned(actor, sid, for_update=True, action="delete")
            pending = self._requests.pending_for_session(sid)
            enrollments = self._ledger.list_enrollments(sid)
            commands = plan_cancellation(
                session, pending, enrollments, self._name(actor.user_id, "The tutor")
            )

            for request in pending:
                self._requests.apply(request, RequestEvent.CANCEL)
            self._dispatch(session, commands)

            self._requests.clear(sid)
            self._ledger.clear(sid)
            self._sessions.delete(sid)

        logger.info(
            "Session %s cancelled by tutor %s: %s pending requests denied, %s attendees notified",
            sid,
            actor.user_id,
            len(pending),
            len(enrollments),
        )
        return CancellationResult(notified_count=len(commands), commands=tuple(commands))

    # Join requests

    def request_to_join(
        self, actor: Actor, session_id: str, message: str | None = None
    ) -> JoinRequest:
        """Open a pending request and announce it to the tutor.

        Raises:
            SessionNotFoundError, SelfRequestError, AlreadyEnrolledError,
            DuplicateRequestError, CapacityExceededError
        """
        sid = parse_session_id(session_id)
        with self._uow.atomic():
            session = self._sessions.require_session(sid, for_update=True)
            replaces = self._requests.check_can_request(
                session, actor.user_id, enrolled=self._ledger.is_enrolled(sid, actor.user_id)
            )
            self._ledger.ensure_seat_available(session)

            notice = join_request_notice(
                session, actor.user_id, self._name(actor.user_id, "A student"), message
            )
            [message_id] = self._dispatch(session, [notice])
            return self._requests.open(session, actor.user_id, message_id, replaces=replaces)

    def accept_request(self, actor: Actor, request_id: str) -> JoinRequest:
        """Accept a pending request: enroll the student and tell them.

        Raises:
            RequestNotFoundError, AuthorizationError, InvalidStateError,
            AlreadyEnrolledError, CapacityExceededError
        """
        rid = parse_request_id(request_id)
        with self._uow.atomic():
            request = self._requests.get_owned(actor, rid, action="accept", for_update=False)
            session = self._sessions.require_session(request.session_id, for_update=True)
            request = self._requests.get_owned(actor, rid, action="accept")
            transition(request.status, RequestEvent.ACCEPT)

            if self._ledger.is_enrolled(session.id, request.requester_id):
                raise AlreadyEnrolledError("Student is already enrolled in this session")
            self._ledger.ensure_seat_available(session)

            accepted = self._requests.apply(request, RequestEvent.ACCEPT)
            self._ledger.enroll(session, request.requester_id)
            self._dispatch(
                session,
                [
                    acceptance_notice(
                        session, request.requester_id, self._name(actor.user_id, "Your tutor")
                    )
                ],
            )
            return accepted

    def deny_request(self, actor: Actor, request_id: str, reason: str | None = None) -> JoinRequest:
        """Deny a pending request and tell the student; enrollments are untouched.

        Raises:
            RequestNotFoundError, AuthorizationError, InvalidStateError
        """
        rid = parse_request_id(request_id)
        with self._uow.atomic():
            request = self._requests.get_owned(actor, rid, action="deny", for_update=False)
            session = self._sessions.require_session(request.session_id, for_update=True)
            request = self._requests.get_owned(actor, rid, action="deny")
            transition(request.status, RequestEvent.DENY)

            denied = self._requests.apply(request, RequestEvent.DENY)
            self._dispatch(session, [denial_notice(session, request.requester_id, reason)])
            return denied

    def request_status(self, actor: Actor, session_id: str) -> str | None:
        """Return "enrolled", "pending", "accepted", "denied" or None.

        Raises:
            SessionNotFoundError: If the session does not exist.
        """
        sid = parse_session_id(session_id)
        with self._uow.atomic():
            self._sessions.require_session(sid)
            enrolled = self._ledger.is_enrolled(sid, actor.user_id)
            status = self._requests.status_for(sid, actor.user_id, enrolled=enrolled)
        return None if status == NO_REQUEST else status

    # Enrollments

    def list_enrollments(self, actor: Actor, session_id: str) -> EnrollmentRoster:
        """Enrollments and pending requests of a session, oldest first."""
        sid = parse_session_id(session_id)
        with self._uow.atomic():
            session = self._sessions.require_owned(actor, sid, action="view")
            return EnrollmentRoster(
                session_id=session.id,
                session_title=session.title,
                capacity=session.capacity,
                enrollments=tuple(self._ledger.list_enrollments(sid)),
                pending_requests=tuple(self._requests.pending_for_session(sid)),
            )

    def remove_student(self, actor: Actor, session_id: str, student_id: int) -> str:
        """Tutor removes an attendee; returns the student's display name.

        Raises:
            SessionNotFoundError, AuthorizationError, NotFoundError
        """
        sid = parse_session_id(session_id)
        with self._uow.atomic():
            session = self._sessions.require_owned(actor, sid, for_update=True)
            student_name = self._directory.display_name(student_id)
            if student_name is None:
                raise NotFoundError("Student not found")

            self._ledger.unenroll(sid, student_id)
            self._requests.revoke_accepted(sid, student_id)
            self._dispatch(
                session,
                [removal_notice(session, student_id, self._name(actor.user_id, "the tutor"))],
            )

        logger.info("Student %s removed from session %s by tutor %s", student_id, sid, actor.user_id)
        return student_name

    def unenroll(self, actor: Actor, session_id: str) -> None:
        """Student leaves a session; the tutor is told a seat is free.

        Raises:
            SessionNotFoundError, EnrollmentNotFoundError
        """
        sid = parse_session_id(session_id)
        with self._uow.atomic():
            session = self._sessions.require_session(sid, for_update=True)
            self._ledger.unenroll(sid, actor.user_id, "You are not enrolled in this session")
            self._requests.revoke_accepted(sid, actor.user_id)
            self._dispatch(
                session,
                [unenroll_notice(session, actor.user_id, self._name(actor.user_id, "A student"))],
            )

