"""Tests for Django admin registrations.

Run with: pytest tests/test_admin.py -v
"""

import pytest
from django.contrib import admin
from django.test import RequestFactory

from tutoring.admin import EnrollmentInline, JoinRequestInline
from tutoring.models import JoinRequest, TutoringSession


@pytest.fixture
def staff_request(django_user_model):
    request = RequestFactory().get("/admin/")
    request.user = django_user_model.objects.create_superuser(
        username="root", password="not-a-real-password", email="root@example.edu"
    )
    return request


@pytest.mark.django_db
class TestCoordinatorOwnedRowsAreReadOnly:
    def test_join_requests_cannot_be_edited(self, staff_request, make_session, student):
        session = make_session()
        row = JoinRequest.objects.create(session=session, requester=student, tutor=session.tutor)
        model_admin = admin.site._registry[JoinRequest]

        assert not model_admin.has_add_permission(staff_request)
        assert not model_admin.has_change_permission(staff_request, row)
        assert not model_admin.has_delete_permission(staff_request, row)
        assert "status" in model_admin.get_readonly_fields(staff_request, row)

    @pytest.mark.parametrize("inline_class", [EnrollmentInline, JoinRequestInline])
    def test_session_inlines_are_read_only(self, staff_request, make_session, inline_class):
        session = make_session()
        inline = inline_class(TutoringSession, admin.site)

        assert inline.can_delete is False
        assert not inline.has_add_permission(staff_request, session)
        assert not inline.has_change_permission(staff_request, session)
        assert not inline.has_delete_permission(staff_request, session)

    def test_existing_session_locks_seat_fields(self, staff_request, make_session):
        session = make_session()
        model_admin = admin.site._registry[TutoringSession]

        assert set(model_admin.get_readonly_fields(staff_request, session)) == {
            "tutor",
            "kind",
            "capacity",
        }
        assert model_admin.get_readonly_fields(staff_request) == []
        assert not model_admin.has_delete_permission(staff_request, session)
