from tutoring.handlers.views import (
    JoinRequestAcceptView,
    JoinRequestCreateView,
    JoinRequestDenyView,
    RequestStatusView,
    SessionCreateView,
    SessionDetailView,
    SessionEnrollmentsView,
    SessionStudentView,
    SessionUnenrollView,
    StudentSessionsView,
    TutorSessionsView,
)

__all__ = [
    "SessionCreateView",
    "SessionDetailView",
    "SessionEnrollmentsView",
    "SessionStudentView",
    "SessionUnenrollView",
    "RequestStatusView",
    "JoinRequestCreateView",
    "JoinRequestAcceptView",
    "JoinRequestDenyView",
    "TutorSessionsView",
    "StudentSessionsView",
]
