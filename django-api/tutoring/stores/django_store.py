"""Django ORM implementation of the tutoring stores."""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator

from django.contrib.auth import get_user_model
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Count
from django.utils import timezone

from tutoring import models
from tutoring.domain import (
    Capacity,
    Course,
    Enrollment,
    JoinRequest,
    Notification,
    RequestId,
    RequestStatus,
    Session,
    SessionDetail,
    SessionId,
    SessionKind,
    SessionStatus,
    TimeWindow,
)
from tutoring.domain.errors import (
    DuplicateEnrollmentError,
    DuplicateRequestError,
    InvalidStateError,
    PersistenceError,
    RequestNotFoundError,
)
from tutoring.domain.notifications import NotificationCommand
from tutoring.stores.interfaces import (
    EnrollmentStore,
    JoinRequestStore,
    NotificationSink,
    SessionStore,
    UnitOfWork,
    UserDirectory,
)

logger = logging.getLogger(__name__)


def _full_name(user) -> str:
    return user.get_full_name() or user.get_username()


def _to_course(row: models.Course) -> Course:
    return Course(
        id=row.id,
        department_code=row.department_code,
        course_number=row.course_number,
        title=row.title,
    )


def _to_session(row: models.TutoringSession, course_ids: tuple[int, ...]) -> Session:
    # Window times are local to TIME_ZONE; notices print them as-is.
    return Session(
        id=SessionId(row.id),
        tutor_id=row.tutor_id,
        title=row.title,
        kind=SessionKind(row.kind),
        window=TimeWindow(
            starts_at=timezone.localtime(row.starts_at),
            ends_at=timezone.localtime(row.ends_at),
        ),
        capacity=Capacity(row.capacity),
        location=row.location,
        status=SessionStatus(row.status),
        course_ids=course_ids,
        created_at=row.created_at,
    )


def _to_detail(row: models.TutoringSession) -> SessionDetail:
    courses = [_to_course(course) for course in row.courses.all()]
    return SessionDetail(
        session=_to_session(row, tuple(course.id for course in courses)),
        enrolled_count=row.enrolled_count,
        tutor_name=_full_name(row.tutor),
        course_labels=tuple(course.label for course in courses),
    )


def _to_enrollment(row: models.Enrollment) -> Enrollment:
    return Enrollment(
        session_id=SessionId(row.session_id),
        student_id=row.student_id,
        enrolled_at=row.enrolled_at,
        student_name=_full_name(row.student),
        student_email=row.student.email,
    )


def _to_request(row: models.JoinRequest) -> JoinRequest:
    return JoinRequest(
        id=RequestId(row.id),
        session_id=SessionId(row.session_id),
        requester_id=row.requester_id,
        tutor_id=row.tutor_id,
        status=RequestStatus(row.status),
        created_at=row.created_at,
        responded_at=row.responded_at,
        message_id=row.message_id,
        requester_name=_full_name(row.requester),
        requester_email=row.requester.email,
    )


class DjangoUnitOfWork(UnitOfWork):
    """transaction.atomic(), with database failures mapped to PersistenceError."""

    @contextmanager
    def atomic(self) -> Iterator[None]:
        try:
            with transaction.atomic():
                yield
        except DatabaseError as exc:
            logger.exception("Transaction rolled back: %s", exc.__class__.__name__)
            raise PersistenceError() from exc


class DjangoSessionStore(SessionStore):
    """Relational session store using Django ORM."""

    def _detail_queryset(self):
        return (
            models.TutoringSession.objects.select_related("tutor")
            .prefetch_related("courses")
            .annotate(enrolled_count=Count("enrollments", distinct=True))
        )

    def create_session(
        self,
        tutor_id: int,
        title: str,
        kind: SessionKind,
        window: TimeWindow,
        capacity: Capacity,
        location: str | None,
        course_ids: list[int],
    ) -> Session:
        with transaction.atomic():
            row = models.TutoringSession.objects.create(
                tutor_id=tutor_id,
                title=title,
                kind=kind.value,
                starts_at=window.starts_at,
                ends_at=window.ends_at,
                capacity=capacity.value,
                location=location,
            )
            models.SessionCourse.objects.bulk_create(
                models.SessionCourse(session=row, course_id=course_id) for course_id in course_ids
            )
        return _to_session(row, tuple(course_ids))

    def get_session(self, session_id: SessionId, for_update: bool = False) -> Session | None:
        queryset = models.TutoringSession.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        row = queryset.filter(pk=session_id.value).first()
        if row is None:
            return None
        course_ids = tuple(
            models.SessionCourse.objects.filter(session_id=row.id)
            .order_by("id")
            .values_list("course_id", flat=True)
        )
        return _to_session(row, course_ids)

    def get_session_detail(self, session_id: SessionId) -> SessionDetail | None:
        row = self._detail_queryset().filter(pk=session_id.value).first()
        return _to_detail(row) if row is not None else None

    def list_for_tutor(self, tutor_id: int) -> list[SessionDetail]:
        rows = self._detail_queryset().filter(tutor_id=tutor_id).order_by("starts_at")
        return [_to_detail(row) for row in rows]

    def list_for_student(self, student_id: int, ends_after: datetime) -> list[SessionDetail]:
        attended = models.Enrollment.objects.filter(student_id=student_id).values("session_id")
        rows = (
            self._detail_queryset()
            .filter(pk__in=attended, ends_at__gte=ends_after)
            .order_by("starts_at")
        )
        return [_to_detail(row) for row in rows]

    def courses_taught_by(self, tutor_id: int, course_ids: list[int]) -> list[Course]:
        rows = models.Course.objects.filter(tutors__tutor_id=tutor_id, pk__in=course_ids)
        return [_to_course(row) for row in rows]

    def delete_session(self, session_id: SessionId) -> None:
        models.SessionCourse.objects.filter(session_id=session_id.value).delete()
        models.TutoringSession.objects.filter(pk=session_id.value).delete()


class DjangoEnrollmentStore(EnrollmentStore):
    """Enrollment ledger rows using Django ORM."""

    def count(self, session_id: SessionId) -> int:
        return models.Enrollment.objects.filter(session_id=session_id.value).count()

    def exists(self, session_id: SessionId, student_id: int) -> bool:
        return models.Enrollment.objects.filter(
            session_id=session_id.value, student_id=student_id
        ).exists()

    def add(self, session_id: SessionId, student_id: int) -> Enrollment:
        try:
            with transaction.atomic():
                row = models.Enrollment.objects.create(
                    session_id=session_id.value, student_id=student_id
                )
        except IntegrityError:
            raise DuplicateEnrollmentError() from None
        return _to_enrollment(models.Enrollment.objects.select_related("student").get(pk=row.pk))

    def remove(self, session_id: SessionId, student_id: int) -> bool:
        deleted, _ = models.Enrollment.objects.filter(
            session_id=session_id.value, student_id=student_id
        ).delete()
        return deleted > 0

    def list_for_session(self, session_id: SessionId) -> list[Enrollment]:
        rows = (
            models.Enrollment.objects.select_related("student")
            .filter(session_id=session_id.value)
            .order_by("enrolled_at", "id")
        )
        return [_to_enrollment(row) for row in rows]

    def remove_all(self, session_id: SessionId) -> int:
        deleted, _ = models.Enrollment.objects.filter(session_id=session_id.value).delete()
        return deleted


class DjangoJoinRequestStore(JoinRequestStore):
    """Join request rows using Django ORM."""

    def _queryset(self):
        return models.JoinRequest.objects.select_related("requester")

    def get(self, request_id: RequestId, for_update: bool = False) -> JoinRequest | None:
        queryset = self._queryset()
        if for_update:
            queryset = queryset.select_for_update(of=("self",))
        row = queryset.filter(pk=request_id.value).first()
        return _to_request(row) if row is not None else None

    def find_for_pair(self, session_id: SessionId, student_id: int) -> JoinRequest | None:
        row = (
            self._queryset()
            .filter(session_id=session_id.value, requester_id=student_id)
            .order_by("-created_at")
            .first()
        )
        return _to_request(row) if row is not None else None

    def create(
        self, session_id: SessionId, requester_id: int, tutor_id: int, message_id: int | None
    ) -> JoinRequest:
        try:
            with transaction.atomic():
                row = models.JoinRequest.objects.create(
                    session_id=session_id.value,
                    requester_id=requester_id,
                    tutor_id=tutor_id,
                    message_id=message_id,
                )
        except IntegrityError:
            existing = self.find_for_pair(session_id, requester_id)
            status = existing.status.value if existing is not None else "pending"
            raise DuplicateRequestError(status) from None
        return _to_request(self._queryset().get(pk=row.pk))

    def delete(self, request_id: RequestId) -> None:
        models.JoinRequest.objects.filter(pk=request_id.value).delete()

    def set_status(
        self,
        request_id: RequestId,
        expected: RequestStatus,
        status: RequestStatus,
        responded_at: datetime,
    ) -> JoinRequest:
        updated = models.JoinRequest.objects.filter(
            pk=request_id.value, status=expected.value
        ).update(status=status.value, responded_at=responded_at)
        row = self._queryset().filter(pk=request_id.value).first()
        if row is None:
            raise RequestNotFoundError()
        if not updated:
            raise InvalidStateError(f"This request has already been {row.status}")
        return _to_request(row)

    def list_for_session(
        self, session_id: SessionId, status: RequestStatus | None = None
    ) -> list[JoinRequest]:
        rows = self._queryset().filter(session_id=session_id.value)
        if status is not None:
            rows = rows.filter(status=status.value)
        return [_to_request(row) for row in rows.order_by("created_at")]

    def remove_all(self, session_id: SessionId) -> int:
        deleted, _ = models.JoinRequest.objects.filter(session_id=session_id.value).delete()
        return deleted


class DjangoNotificationSink(NotificationSink):
    """Files each notification as a Message plus a sent and an inbox filing."""

    def send(self, command: NotificationCommand) -> Notification:
        message = models.Message.objects.create(
            sender_id=command.sender_id,
            receiver_id=command.recipient_id,
            subject=command.subject,
            body=command.body,
            kind=command.kind.value,
        )
        models.MessageFiling.objects.bulk_create(
            [
                models.MessageFiling(
                    user_id=command.sender_id,
                    message=message,
                    folder=models.MessageFiling.Folder.SENT,
                    is_read=True,
                ),
                models.MessageFiling(
                    user_id=command.recipient_id,
                    message=message,
                    folder=models.MessageFiling.Folder.INBOX,
                    is_read=False,
                ),
            ]
        )
        return Notification(
            id=message.id,
            sender_id=message.sender_id,
            receiver_id=message.receiver_id,
            subject=message.subject,
            body=message.body,
            kind=message.kind,
            sent_at=message.sent_at,
        )


class DjangoUserDirectory(UserDirectory):
    def display_name(self, user_id: int) -> str | None:
        user = get_user_model().objects.filter(pk=user_id).first()
        return _full_name(user) if user is not None else None
