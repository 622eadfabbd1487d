"""Serializers for request payloads and domain model responses."""

from rest_framework import serializers


class CreateSessionSerializer(serializers.Serializer):
    """Payload of POST /api/sessions. Range and ownership rules live in the service."""

    title = serializers.CharField(allow_blank=True, trim_whitespace=False)
    kind = serializers.CharField()
    courseIds = serializers.ListField(
        child=serializers.IntegerField(), source="course_ids", allow_empty=True
    )
    start = serializers.CharField(source="starts_at")
    end = serializers.CharField(source="ends_at")
    capacity = serializers.IntegerField()
    location = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class JoinRequestSerializer(serializers.Serializer):
    """Payload of POST /api/session-requests."""

    sessionId = serializers.CharField(source="session_id")
    message = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class DenyRequestSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class SessionSerializer(serializers.Serializer):
    """Serializer for the SessionDetail domain model."""

    sessionId = serializers.CharField(source="session.id")
    tutorId = serializers.IntegerField(source="session.tutor_id")
    tutorName = serializers.CharField(source="tutor_name")
    title = serializers.CharField(source="session.title")
    kind = serializers.CharField(source="session.kind.value")
    courseIds = serializers.ListField(child=serializers.IntegerField(), source="session.course_ids")
    courseNames = serializers.ListField(child=serializers.CharField(), source="course_labels")
    start = serializers.DateTimeField(source="session.window.starts_at")
    end = serializers.DateTimeField(source="session.window.ends_at")
    capacity = serializers.IntegerField(source="session.capacity.value")
    location = serializers.CharField(source="session.location", allow_null=True)
    status = serializers.CharField(source="session.status.value")
    enrolledCount = serializers.IntegerField(source="enrolled_count")


class EnrollmentSerializer(serializers.Serializer):
    """Serializer for the Enrollment domain model."""

    studentId = serializers.IntegerField(source="student_id")
    studentName = serializers.CharField(source="student_name")
    email = serializers.CharField(source="student_email")
    enrolledAt = serializers.DateTimeField(source="enrolled_at")


class JoinRequestOutputSerializer(serializers.Serializer):
    """Serializer for the JoinRequest domain model."""

    requestId = serializers.CharField(source="id")
    sessionId = serializers.CharField(source="session_id")
    studentId = serializers.IntegerField(source="requester_id")
    studentName = serializers.CharField(source="requester_name")
    email = serializers.CharField(source="requester_email")
    status = serializers.CharField(source="status.value")
    createdAt = serializers.DateTimeField(source="created_at")
    respondedAt = serializers.DateTimeField(source="responded_at", allow_null=True)


class EnrollmentRosterSerializer(serializers.Serializer):
    """Serializer for the EnrollmentRoster domain model."""

    sessionId = serializers.CharField(source="session_id")
    sessionTitle = serializers.CharField(source="session_title")
    capacity = serializers.IntegerField(source="capacity.value")
    enrolledCount = serializers.IntegerField(source="enrolled_count")
    enrollments = EnrollmentSerializer(many=True)
    pendingRequests = JoinRequestOutputSerializer(many=True, source="pending_requests")
