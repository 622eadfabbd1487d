"""Notification commands generated from lifecycle transitions.

Builders here are pure: they turn current state into the list of messages
that must be filed, without touching the sink. The coordinator executes the
commands inside the same transaction as the state change.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable

from tutoring.domain.models import Enrollment, JoinRequest, Session


class NotificationKind(Enum):
    NORMAL = "normal"
    JOIN_REQUEST = "session_join_request"


@dataclass(frozen=True)
class NotificationCommand:
    """One message to be sent from ``sender_id`` to ``recipient_id``."""

    sender_id: int
    recipient_id: int
    subject: str
    body: str
    kind: NotificationKind = NotificationKind.NORMAL


def format_date(moment: datetime) -> str:
    """Monday, March 2, 2026"""
    return f"{moment:%A, %B} {moment.day}, {moment.year}"


def format_time(moment: datetime) -> str:
    """3:05 PM"""
    hour = moment.hour % 12 or 12
    return f"{hour}:{moment:%M} {'AM' if moment.hour < 12 else 'PM'}"


def _schedule_lines(session: Session) -> str:
    starts_at = session.window.starts_at
    return (
        f"Date: {format_date(starts_at)}\n"
        f"Time: {format_time(starts_at)}\n"
        f"Location: {session.location_or_tbd}\n\n"
    )


def join_request_notice(
    session: Session, student_id: int, student_name: str, message: str | None = None
) -> NotificationCommand:
    title = session.title or "Tutoring Session"
    starts_at = session.window.starts_at
    body = (
        f"Session Request: {title}\n"
        f"{format_date(starts_at)} at {format_time(starts_at)}\n"
        f"{session.location or 'Location TBD'}\n"
        f"Type: {session.kind.label}\n\n"
        f"{student_name} would like to join this session."
    )
    if message and message.strip():
        body += f'\n\nMessage from student:\n"{message.strip()}"'
    return NotificationCommand(
        sender_id=student_id,
        recipient_id=session.tutor_id,
        subject=f"Session Request: {title}",
        body=body,
        kind=NotificationKind.JOIN_REQUEST,
    )


def acceptance_notice(session: Session, student_id: int, tutor_name: str) -> NotificationCommand:
    body = (
        f'Great news! Your request to join "{session.title}" has been accepted!\n\n'
        + _schedule_lines(session)
        + f"{tutor_name} is looking forward to seeing you at the session!"
    )
    return NotificationCommand(
        sender_id=session.tutor_id,
        recipient_id=student_id,
        subject=f"Request Accepted: {session.title}",
        body=body,
    )


def denial_notice(session: Session, student_id: int, reason: str | None = None) -> NotificationCommand:
    body = f'Unfortunately, your request to join "{session.title}" was not accepted.\n\n'
    if reason and reason.strip():
        body += f'Message from tutor:\n"{reason.strip()}"\n\n'
    body += "Don't be discouraged! Feel free to browse other available sessions or try again later."
    return NotificationCommand(
        sender_id=session.tutor_id,
        recipient_id=student_id,
        subject=f"Request Update: {session.title}",
        body=body,
    )


def removal_notice(session: Session, student_id: int, tutor_name: str) -> NotificationCommand:
    body = (
        f'You have been removed from the session "{session.title}".\n\n'
        + _schedule_lines(session)
        + f"If you have any questions about this change, please contact {tutor_name}.\n\n"
        "Feel free to browse other available sessions on the platform."
    )
    return NotificationCommand(
        sender_id=session.tutor_id,
        recipient_id=student_id,
        subject=f"Session Update: {session.title}",
        body=body,
    )


def unenroll_notice(session: Session, student_id: int, student_name: str) -> NotificationCommand:
    body = (
        f'{student_name} has unenrolled from your session "{session.title}".\n\n'
        + _schedule_lines(session)
        + "A spot is now available in this session."
    )
    return NotificationCommand(
        sender_id=student_id,
        recipient_id=session.tutor_id,
        subject=f"Student Unenrolled: {session.title}",
        body=body,
    )


def cancelled_request_notice(session: Session, student_id: int) -> NotificationCommand:
    body = (
        f'Your request to join the session "{session.title}" has been automatically '
        "denied because the session has been cancelled.\n\n"
        + _schedule_lines(session)
        + "We apologize for any inconvenience. "
        "Feel free to browse other available sessions on the platform."
    )
    return NotificationCommand(
        sender_id=session.tutor_id,
        recipient_id=student_id,
        subject=f"Session Cancelled: {session.title}",
        body=body,
    )


def cancelled_enrollment_notice(
    session: Session, student_id: int, tutor_name: str
) -> NotificationCommand:
    body = (
        f'We regret to inform you that the session "{session.title}" '
        f"has been cancelled by {tutor_name}.\n\n"
        + _schedule_lines(session)
        + "We apologize for any inconvenience this may cause. "
        "Please feel free to browse other available sessions on the platform."
    )
    return NotificationCommand(
        sender_id=session.tutor_id,
        recipient_id=student_id,
        subject=f"Session Cancelled: {session.title}",
        body=body,
    )


def plan_cancellation(
    session: Session,
    pending_requests: Iterable[JoinRequest],
    enrollments: Iterable[Enrollment],
    tutor_name: str,
) -> list[NotificationCommand]:
    """Notices for a cancelled session: pending requesters first, then attendees."""
    commands = [
        cancelled_request_notice(session, request.requester_id)
        for request in pending_requests
    ]
    commands.extend(
        cancelled_enrollment_notice(session, enrollment.student_id, tutor_name)
        for enrollment in enrollments
    )
    return commands
