"""Tests for the HTTP surface: routing, permissions and the response envelope.

Run with: pytest tests/test_session_api.py -v
"""

from datetime import timedelta
from uuid import uuid4

import pytest
from django.urls import reverse
from django.utils import timezone

from tutoring.models import Enrollment, JoinRequest, Message, TutoringSession


def create_payload(course, **overrides):
    starts_at = timezone.now() + timedelta(days=5)
    payload = {
        "title": "Recursion clinic",
        "kind": "open",
        "courseIds": [course.id],
        "start": starts_at.isoformat(),
        "end": (starts_at + timedelta(hours=1)).isoformat(),
        "capacity": 4,
        "location": "Lab B",
    }
    payload.update(overrides)
    return payload


def assert_failure(response, status_code, code):
    assert response.status_code == status_code
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == code
    assert body["message"]
    return body


@pytest.mark.django_db
class TestSessionEndpoints:
    def test_tutor_creates_session(self, api_client, tutor, course):
        api_client.force_authenticate(tutor)

        response = api_client.post(reverse("session-create"), create_payload(course), format="json")

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Session created successfully"
        assert body["data"]["title"] == "Recursion clinic"
        assert body["data"]["courseNames"] == ["CSC 210"]
        assert body["data"]["enrolledCount"] == 0
        assert body["data"]["status"] == "scheduled"
        assert TutoringSession.objects.filter(pk=body["data"]["sessionId"]).exists()

    def test_invalid_session_is_rejected(self, api_client, tutor, course):
        api_client.force_authenticate(tutor)

        response = api_client.post(
            reverse("session-create"), create_payload(course, capacity=0), format="json"
        )

        body = assert_failure(response, 400, "VALIDATION_ERROR")
        assert body["message"] == "Capacity must be between 1 and 50"
        assert not TutoringSession.objects.exists()

    def test_missing_fields_are_rejected(self, api_client, tutor):
        api_client.force_authenticate(tutor)

        response = api_client.post(reverse("session-create"), {"title": "x"}, format="json")

        body = assert_failure(response, 400, "VALIDATION_ERROR")
        assert body["message"].startswith("Missing or invalid fields")

    def test_student_cannot_create(self, api_client, student, course):
        api_client.force_authenticate(student)

        response = api_client.post(reverse("session-create"), create_payload(course), format="json")

        assert_failure(response, 403, "NOT_AUTHORIZED")

    def test_anonymous_caller_gets_envelope(self, api_client, course):
        response = api_client.post(reverse("session-create"), create_payload(course), format="json")

        assert_failure(response, 403, "NOT_AUTHENTICATED")

    def test_session_detail_is_public(self, api_client, make_session):
        session = make_session()

        response = api_client.get(reverse("session-detail", args=[session.id]))

        assert response.status_code == 200
        assert response.json()["data"]["location"] == "Library 204"

    def test_unknown_and_malformed_session_ids(self, api_client):
        assert_failure(api_client.get(reverse("session-detail", args=[uuid4()])), 404, "NOT_FOUND")
        assert_failure(api_client.get(reverse("session-detail", args=["abc"])), 400, "VALIDATION_ERROR")

    def test_delete_reports_notified_count(self, api_client, make_session, tutor, student, coordinator, actor):
        session = make_session()
        coordinator.request_to_join(actor(student), str(session.id))
        api_client.force_authenticate(tutor)

        response = api_client.delete(reverse("session-detail", args=[session.id]))

        assert response.status_code == 200
        body = response.json()
        assert body["data"] == {"notifiedCount": 1}
        assert body["message"] == "Session deleted successfully. 1 student has been notified."
        assert not TutoringSession.objects.filter(pk=session.pk).exists()

    def test_tutor_sessions_listing(self, api_client, make_session, tutor):
        make_session(title="One")
        make_session(title="Two")

        response = api_client.get(reverse("tutor-sessions", args=[tutor.pk]))

        assert response.status_code == 200
        assert [s["title"] for s in response.json()["data"]] == ["One", "Two"]


@pytest.mark.django_db
class TestJoinRequestEndpoints:
    def request_join(self, api_client, user, session, message=None):
        api_client.force_authenticate(user)
        payload = {"sessionId": str(session.id)}
        if message is not None:
            payload["message"] = message
        return api_client.post(reverse("join-request-create"), payload, format="json")

    def test_request_accept_flow(self, api_client, make_session, tutor, student):
        session = make_session()

        created = self.request_join(api_client, student, session, "Hi!")
        assert created.status_code == 201
        request_id = created.json()["data"]["requestId"]
        assert Message.objects.filter(pk=created.json()["data"]["messageId"]).exists()

        status = api_client.get(reverse("session-request-status", args=[session.id]))
        assert status.json()["data"] == {"status": "pending"}

        api_client.force_authenticate(tutor)
        accepted = api_client.post(reverse("join-request-accept", args=[request_id]))
        assert accepted.status_code == 200
        assert accepted.json()["message"] == "Alice Able has been enrolled in the session"
        assert Enrollment.objects.filter(session=session, student=student).exists()

        roster = api_client.get(reverse("session-enrollments", args=[session.id]))
        assert roster.json()["data"]["enrolledCount"] == 1
        assert roster.json()["data"]["enrollments"][0]["email"] == "alice@example.edu"

    def test_deny_flow(self, api_client, make_session, tutor, student):
        session = make_session()
        request_id = self.request_join(api_client, student, session).json()["data"]["requestId"]
        api_client.force_authenticate(tutor)

        denied = api_client.post(
            reverse("join-request-deny", args=[request_id]), {"reason": "Full up"}, format="json"
        )

        assert denied.status_code == 200
        assert denied.json()["message"] == "Request from Alice Able has been denied"
        assert JoinRequest.objects.get(pk=request_id).status == "denied"
        again = api_client.post(reverse("join-request-deny", args=[request_id]))
        assert_failure(again, 409, "INVALID_STATE")

    def test_status_without_request_is_null(self, api_client, make_session, student):
        session = make_session()
        api_client.force_authenticate(student)

        response = api_client.get(reverse("session-request-status", args=[session.id]))

        assert response.status_code == 200
        assert response.json()["data"] == {"status": None}

    def test_conflicts_map_to_409(self, api_client, make_session, tutor, student, other_student):
        session = make_session(capacity=1, kind="one_on_one")
        request_id = self.request_join(api_client, student, session).json()["data"]["requestId"]
        api_client.force_authenticate(tutor)
        api_client.post(reverse("join-request-accept", args=[request_id]))

        assert_failure(self.request_join(api_client, other_student, session), 409, "CAPACITY_EXCEEDED")
        assert_failure(self.request_join(api_client, student, session), 409, "ALREADY_ENROLLED")

    def test_tutor_cannot_request_own_session(self, api_client, make_session, tutor):
        session = make_session()
        assert_failure(self.request_join(api_client, tutor, session), 400, "SELF_REQUEST")

    def test_duplicate_request(self, api_client, make_session, student):
        session = make_session()
        self.request_join(api_client, student, session)
        body = assert_failure(self.request_join(api_client, student, session), 409, "DUPLICATE_REQUEST")
        assert body["message"] == "You already have a pending request for this session"


@pytest.mark.django_db
class TestEnrollmentEndpoints:
    @pytest.fixture
    def enrolled_session(self, make_session, coordinator, actor, tutor, student):
        session = make_session()
        request = coordinator.request_to_join(actor(student), str(session.id))
        coordinator.accept_request(actor(tutor), str(request.id))
        return session

    def test_student_unenrolls(self, api_client, enrolled_session, student):
        api_client.force_authenticate(student)

        response = api_client.delete(reverse("session-unenroll", args=[enrolled_session.id]))

        assert response.status_code == 200
        assert response.json()["message"] == "Successfully unenrolled from the session"
        listing = api_client.get(reverse("student-sessions"))
        assert listing.json()["data"] == []

    def test_tutor_removes_student(self, api_client, enrolled_session, tutor, student):
        api_client.force_authenticate(tutor)

        response = api_client.delete(
            reverse("session-student", args=[enrolled_session.id, student.pk])
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Alice Able has been removed from the session and notified"

    def test_roster_forbidden_to_others(self, api_client, enrolled_session, student):
        api_client.force_authenticate(student)

        response = api_client.get(reverse("session-enrollments", args=[enrolled_session.id]))

        assert_failure(response, 403, "NOT_AUTHORIZED")

    def test_student_sessions_listing(self, api_client, enrolled_session, student):
        api_client.force_authenticate(student)

        response = api_client.get(reverse("student-sessions"))

        assert [s["sessionId"] for s in response.json()["data"]] == [str(enrolled_session.id)]
