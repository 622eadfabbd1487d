"""Pytest configuration and shared fixtures."""

from datetime import timedelta

import pytest
from django.conf import settings
from django.contrib.auth.models import Group
from django.utils import timezone
from rest_framework.test import APIClient

from tutoring.domain import Actor
from tutoring.handlers.dependencies import actor_from_user, get_coordinator
from tutoring.models import Course, SessionCourse, TutorCourse, TutoringSession


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def coordinator():
    return get_coordinator()


@pytest.fixture
def make_user(django_user_model):
    def _make(username: str, first_name: str = "Sam", last_name: str = "Student", tutor: bool = False):
        user = django_user_model.objects.create_user(
            username=username,
            password="not-a-real-password",
            first_name=first_name,
            last_name=last_name,
            email=f"{username}@example.edu",
        )
        if tutor:
            group, _ = Group.objects.get_or_create(name=settings.TUTORING_TUTOR_GROUP)
            user.groups.add(group)
        return user

    return _make


@pytest.fixture
def tutor(make_user):
    return make_user("tina", first_name="Tina", last_name="Tutor", tutor=True)


@pytest.fixture
def student(make_user):
    return make_user("alice", first_name="Alice", last_name="Able")


@pytest.fixture
def other_student(make_user):
    return make_user("bob", first_name="Bob", last_name="Baker")


@pytest.fixture
def course(tutor) -> Course:
    course = Course.objects.create(
        department_code="CSC", course_number="210", title="Data Structures"
    )
    TutorCourse.objects.create(tutor=tutor, course=course)
    return course


@pytest.fixture
def make_session(tutor, course):
    def _make(capacity: int = 3, kind: str = "open", title: str = "Midterm review", owner=None):
        starts_at = timezone.now() + timedelta(days=2)
        session = TutoringSession.objects.create(
            tutor=owner or tutor,
            title=title,
            kind=kind,
            starts_at=starts_at,
            ends_at=starts_at + timedelta(hours=1),
            capacity=capacity,
            location="Library 204",
        )
        SessionCourse.objects.create(session=session, course=course)
        return session

    return _make


@pytest.fixture
def actor():
    def _actor(user) -> Actor:
        return actor_from_user(user)

    return _actor
