"""Unit tests for domain primitives.

These test invariants that must hold at construction time.
Run with: pytest tests/test_domain.py -v
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import pytest

from tutoring.domain import (
    Capacity,
    Course,
    Enrollment,
    JoinRequest,
    RequestEvent,
    RequestId,
    RequestStatus,
    Session,
    SessionId,
    SessionKind,
    SessionStatus,
    TimeWindow,
)
from tutoring.domain.errors import DuplicateRequestError, ErrorCode, InvalidStateError
from tutoring.domain.notifications import (
    NotificationKind,
    denial_notice,
    format_date,
    format_time,
    join_request_notice,
    plan_cancellation,
)
from tutoring.domain.state_machine import transition

START = datetime(2026, 3, 2, 15, 5, tzinfo=timezone.utc)


def make_session(**overrides) -> Session:
    fields = dict(
        id=SessionId(uuid4()),
        tutor_id=1,
        title="Midterm review",
        kind=SessionKind.OPEN,
        window=TimeWindow(START, START + timedelta(hours=1)),
        capacity=Capacity(3),
        location="Library 204",
        status=SessionStatus.SCHEDULED,
        course_ids=(10,),
        created_at=START - timedelta(days=1),
    )
    fields.update(overrides)
    return Session(**fields)


class TestCapacity:
    """Tests for Capacity value object."""

    def test_capacity_accepts_bounds(self):
        assert Capacity(1).value == 1
        assert Capacity(50).value == 50

    @pytest.mark.parametrize("value", [0, -1, 51])
    def test_capacity_rejects_out_of_range(self, value):
        with pytest.raises(ValueError):
            Capacity(value)

    def test_one_on_one_forces_single_seat(self):
        assert Capacity.for_kind(SessionKind.ONE_ON_ONE, 12).value == 1

    def test_one_on_one_still_validates_requested_value(self):
        with pytest.raises(ValueError):
            Capacity.for_kind(SessionKind.ONE_ON_ONE, 99)

    def test_is_full(self):
        assert Capacity(2).is_full(2)
        assert not Capacity(2).is_full(1)


class TestTimeWindow:
    """Tests for TimeWindow value object."""

    def test_rejects_end_before_start(self):
        with pytest.raises(ValueError):
            TimeWindow(START, START - timedelta(minutes=1))

    def test_rejects_zero_length(self):
        with pytest.raises(ValueError):
            TimeWindow(START, START)

    def test_starts_after_is_strict(self):
        window = TimeWindow(START, START + timedelta(hours=1))
        assert window.starts_after(START - timedelta(seconds=1))
        assert not window.starts_after(START)


class TestCourse:
    def test_label_is_department_and_number(self):
        assert Course(1, "CSC", "210", "Data Structures").label == "CSC 210"


class TestIds:
    def test_from_string_valid_uuid(self):
        value = "6f1c1d2a-3b4c-4d5e-8f90-123456789abc"
        assert SessionId.from_string(value).value == UUID(value)
        assert str(RequestId.from_string(value)) == value

    def test_from_string_invalid_uuid(self):
        with pytest.raises(ValueError):
            SessionId.from_string("not-a-uuid")


class TestRequestStateMachine:
    @pytest.mark.parametrize(
        "current, event, expected",
        [
            (RequestStatus.PENDING, RequestEvent.ACCEPT, RequestStatus.ACCEPTED),
            (RequestStatus.PENDING, RequestEvent.DENY, RequestStatus.DENIED),
            (RequestStatus.PENDING, RequestEvent.CANCEL, RequestStatus.DENIED),
            (RequestStatus.ACCEPTED, RequestEvent.REVOKE, RequestStatus.DENIED),
        ],
    )
    def test_allowed_transitions(self, current, event, expected):
        assert transition(current, event) is expected

    @pytest.mark.parametrize("event", list(RequestEvent))
    def test_denied_is_terminal(self, event):
        with pytest.raises(InvalidStateError) as exc_info:
            transition(RequestStatus.DENIED, event)
        assert exc_info.value.message == "This request has already been denied"

    def test_accepted_cannot_be_accepted_or_denied_again(self):
        with pytest.raises(InvalidStateError):
            transition(RequestStatus.ACCEPTED, RequestEvent.ACCEPT)
        with pytest.raises(InvalidStateError) as exc_info:
            transition(RequestStatus.ACCEPTED, RequestEvent.DENY)
        assert exc_info.value.code is ErrorCode.INVALID_STATE

    def test_pending_cannot_be_revoked(self):
        with pytest.raises(InvalidStateError):
            transition(RequestStatus.PENDING, RequestEvent.REVOKE)

    def test_only_pending_and_accepted_are_active(self):
        assert RequestStatus.PENDING.is_active
        assert RequestStatus.ACCEPTED.is_active
        assert not RequestStatus.DENIED.is_active


class TestErrors:
    def test_duplicate_request_message_names_status(self):
        assert "pending" in DuplicateRequestError("pending").message
        assert "accepted" in DuplicateRequestError("accepted").message

    def test_str_includes_code(self):
        assert str(InvalidStateError("nope")) == "INVALID_STATE: nope"


class TestNotifications:
    def test_date_and_time_formatting(self):
        assert format_date(START) == "Monday, March 2, 2026"
        assert format_time(START) == "3:05 PM"
        assert format_time(START.replace(hour=0)) == "12:05 AM"

    def test_join_request_notice_goes_to_tutor(self):
        session = make_session(kind=SessionKind.ONE_ON_ONE)
        command = join_request_notice(session, 7, "Alice Able", "  see you there  ")

        assert command.sender_id == 7
        assert command.recipient_id == session.tutor_id
        assert command.kind is NotificationKind.JOIN_REQUEST
        assert command.subject == "Session Request: Midterm review"
        assert "Type: One-on-One" in command.body
        assert '"see you there"' in command.body

    def test_denial_notice_includes_optional_reason(self):
        session = make_session()
        assert "Message from tutor" not in denial_notice(session, 7).body
        assert '"Session is for seniors"' in denial_notice(session, 7, "Session is for seniors").body

    def test_location_falls_back_to_tbd(self):
        session = make_session(location=None)
        command = plan_cancellation(session, [], [_enrollment(session, 8)], "Tina Tutor")[0]
        assert "Location: TBD" in command.body

    def test_plan_cancellation_notifies_every_requester_and_attendee(self):
        session = make_session()
        pending = [_request(session, 5), _request(session, 6)]
        enrollments = [_enrollment(session, 8)]

        commands = plan_cancellation(session, pending, enrollments, "Tina Tutor")

        assert [c.recipient_id for c in commands] == [5, 6, 8]
        assert all(c.sender_id == session.tutor_id for c in commands)
        assert all(c.subject == "Session Cancelled: Midterm review" for c in commands)
        assert "automatically denied" in commands[0].body
        assert "cancelled by Tina Tutor" in commands[2].body

    def test_plan_cancellation_is_empty_for_quiet_session(self):
        assert plan_cancellation(make_session(), [], [], "Tina Tutor") == []


def _request(session: Session, student_id: int) -> JoinRequest:
    return JoinRequest(
        id=RequestId(uuid4()),
        session_id=session.id,
        requester_id=student_id,
        tutor_id=session.tutor_id,
        status=RequestStatus.PENDING,
        created_at=START - timedelta(hours=3),
    )


def _enrollment(session: Session, student_id: int) -> Enrollment:
    return Enrollment(session_id=session.id, student_id=student_id, enrolled_at=START)
