"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call the lifecycle coordinator for business logic
- Never contain business logic
- Never expose internal error details

Domain errors are mapped to responses by tutoring.handlers.responses.exception_handler.
"""

from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from tutoring.handlers.dependencies import actor_from_user, get_coordinator
from tutoring.handlers.responses import success
from tutoring.handlers.serializers import (
    CreateSessionSerializer,
    DenyRequestSerializer,
    EnrollmentRosterSerializer,
    JoinRequestSerializer,
    SessionSerializer,
)

STATUS_MESSAGES = {
    "enrolled": "You are already enrolled in this session",
    "pending": "Your request is pending approval",
    "accepted": "Your request was accepted",
    "denied": "Your previous request was denied - you can request again",
    None: "No existing request for this session",
}


def _deleted_message(notified_count: int) -> str:
    message = "Session deleted successfully"
    if notified_count > 0:
        verb = "students have" if notified_count != 1 else "student has"
        message += f". {notified_count} {verb} been notified."
    return message


class TutoringView(APIView):
    permission_classes = [IsAuthenticated]

    def get_actor(self, request: Request):
        return actor_from_user(request.user)


class SessionCreateView(TutoringView):
    """Handler for POST /api/sessions"""

    def post(self, request: Request) -> Response:
        payload = CreateSessionSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        detail = get_coordinator().create_session(self.get_actor(request), **payload.validated_data)
        return success(
            "Session created successfully",
            SessionSerializer(detail).data,
            status_code=status.HTTP_201_CREATED,
        )


class SessionDetailView(TutoringView):
    """Handler for GET/DELETE /api/sessions/{session_id}"""

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return super().get_permissions()

    def get(self, request: Request, session_id: str) -> Response:
        detail = get_coordinator().get_session(session_id)
        return success("Session found", SessionSerializer(detail).data)

    def delete(self, request: Request, session_id: str) -> Response:
        result = get_coordinator().cancel_session(self.get_actor(request), session_id)
        return success(
            _deleted_message(result.notified_count),
            {"notifiedCount": result.notified_count},
        )


class SessionEnrollmentsView(TutoringView):
    """Handler for GET /api/sessions/{session_id}/enrollments"""

    def get(self, request: Request, session_id: str) -> Response:
        roster = get_coordinator().list_enrollments(self.get_actor(request), session_id)
        return success("Enrollments retrieved", EnrollmentRosterSerializer(roster).data)


class SessionStudentView(TutoringView):
    """Handler for DELETE /api/sessions/{session_id}/students/{student_id}"""

    def delete(self, request: Request, session_id: str, student_id: int) -> Response:
        name = get_coordinator().remove_student(self.get_actor(request), session_id, student_id)
        return success(f"{name} has been removed from the session and notified")


class SessionUnenrollView(TutoringView):
    """Handler for DELETE /api/sessions/{session_id}/unenroll"""

    def delete(self, request: Request, session_id: str) -> Response:
        get_coordinator().unenroll(self.get_actor(request), session_id)
        return success("Successfully unenrolled from the session")


class RequestStatusView(TutoringView):
    """Handler for GET /api/sessions/{session_id}/request-status"""

    def get(self, request: Request, session_id: str) -> Response:
        current = get_coordinator().request_status(self.get_actor(request), session_id)
        return success(STATUS_MESSAGES[current], {"status": current})


class JoinRequestCreateView(TutoringView):
    """Handler for POST /api/session-requests"""

    def post(self, request: Request) -> Response:
        payload = JoinRequestSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        join_request = get_coordinator().request_to_join(
            self.get_actor(request),
            payload.validated_data["session_id"],
            payload.validated_data.get("message"),
        )
        return success(
            "Your request has been sent to the tutor",
            {"requestId": str(join_request.id), "messageId": join_request.message_id},
            status_code=status.HTTP_201_CREATED,
        )


class JoinRequestAcceptView(TutoringView):
    """Handler for POST /api/session-requests/{request_id}/accept"""

    def post(self, request: Request, request_id: str) -> Response:
        accepted = get_coordinator().accept_request(self.get_actor(request), request_id)
        return success(f"{accepted.requester_name} has been enrolled in the session")


class JoinRequestDenyView(TutoringView):
    """Handler for POST /api/session-requests/{request_id}/deny"""

    def post(self, request: Request, request_id: str) -> Response:
        payload = DenyRequestSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        denied = get_coordinator().deny_request(
            self.get_actor(request), request_id, payload.validated_data.get("reason")
        )
        return success(f"Request from {denied.requester_name} has been denied")


class TutorSessionsView(TutoringView):
    """Handler for GET /api/tutors/{tutor_id}/sessions"""

    permission_classes = [AllowAny]

    def get(self, request: Request, tutor_id: int) -> Response:
        sessions = get_coordinator().list_tutor_sessions(tutor_id)
        return success("Sessions retrieved", SessionSerializer(sessions, many=True).data)


class StudentSessionsView(TutoringView):
    """Handler for GET /api/students/enrolled-sessions"""

    def get(self, request: Request) -> Response:
        sessions = get_coordinator().list_student_sessions(self.get_actor(request))
        return success("Sessions retrieved", SessionSerializer(sessions, many=True).data)
