from tutoring.domain.models import (
    Course,
    Enrollment,
    EnrollmentRoster,
    JoinRequest,
    Notification,
    Session,
    SessionDetail,
)
from tutoring.domain.state_machine import RequestEvent, RequestStatus
from tutoring.domain.value_objects import (
    Actor,
    Capacity,
    RequestId,
    Role,
    SessionId,
    SessionKind,
    SessionStatus,
    TimeWindow,
)

__all__ = [
    "Course",
    "Session",
    "SessionDetail",
    "Enrollment",
    "EnrollmentRoster",
    "JoinRequest",
    "Notification",
    "RequestEvent",
    "RequestStatus",
    "Actor",
    "Role",
    "SessionId",
    "RequestId",
    "SessionKind",
    "SessionStatus",
    "Capacity",
    "TimeWindow",
]
