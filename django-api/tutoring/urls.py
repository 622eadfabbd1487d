from django.urls import path

from tutoring.handlers import (
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

urlpatterns = [
    path("sessions", SessionCreateView.as_view(), name="session-create"),
    path("sessions/<str:session_id>", SessionDetailView.as_view(), name="session-detail"),
    path(
        "sessions/<str:session_id>/enrollments",
        SessionEnrollmentsView.as_view(),
        name="session-enrollments",
    ),
    path(
        "sessions/<str:session_id>/students/<int:student_id>",
        SessionStudentView.as_view(),
        name="session-student",
    ),
    path(
        "sessions/<str:session_id>/unenroll",
        SessionUnenrollView.as_view(),
        name="session-unenroll",
    ),
    path(
        "sessions/<str:session_id>/request-status",
        RequestStatusView.as_view(),
        name="session-request-status",
    ),
    path("session-requests", JoinRequestCreateView.as_view(), name="join-request-create"),
    path(
        "session-requests/<str:request_id>/accept",
        JoinRequestAcceptView.as_view(),
        name="join-request-accept",
    ),
    path(
        "session-requests/<str:request_id>/deny",
        JoinRequestDenyView.as_view(),
        name="join-request-deny",
    ),
    path("tutors/<int:tutor_id>/sessions", TutorSessionsView.as_view(), name="tutor-sessions"),
    path(
        "students/enrolled-sessions",
        StudentSessionsView.as_view(),
        name="student-sessions",
    ),
]
