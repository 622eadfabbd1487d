"""Wiring of services to their Django-backed stores, and caller identity."""

from django.conf import settings

from tutoring.domain import Actor, Role
from tutoring.services.enrollment_ledger import EnrollmentLedger
from tutoring.services.join_requests import JoinRequestService
from tutoring.services.lifecycle import LifecycleCoordinator
from tutoring.services.session_manager import SessionManager
from tutoring.stores.django_store import (
    DjangoEnrollmentStore,
    DjangoJoinRequestStore,
    DjangoNotificationSink,
    DjangoSessionStore,
    DjangoUnitOfWork,
    DjangoUserDirectory,
)


def get_coordinator() -> LifecycleCoordinator:
    return LifecycleCoordinator(
        sessions=SessionManager(DjangoSessionStore()),
        ledger=EnrollmentLedger(DjangoEnrollmentStore()),
        requests=JoinRequestService(DjangoJoinRequestStore()),
        sink=DjangoNotificationSink(),
        directory=DjangoUserDirectory(),
        uow=DjangoUnitOfWork(),
    )


def actor_from_user(user) -> Actor:
    """Tutors are members of the TUTORING_TUTOR_GROUP auth group."""
    is_tutor = user.groups.filter(name=settings.TUTORING_TUTOR_GROUP).exists()
    return Actor(user_id=user.pk, role=Role.TUTOR if is_tutor else Role.STUDENT)
