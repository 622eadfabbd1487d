"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.conf import settings
from django.db import models


class Course(models.Model):
    """Persistence model for catalog courses."""

    department_code = models.CharField(max_length=10)
    course_number = models.CharField(max_length=10)
    title = models.CharField(max_length=255)

    class Meta:
        ordering = ["department_code", "course_number"]
        constraints = [
            models.UniqueConstraint(
                fields=["department_code", "course_number"],
                name="unique_course_number_per_department",
            )
        ]

    def __str__(self) -> str:
        return f"{self.department_code} {self.course_number}"


class TutorCourse(models.Model):
    """A course a tutor is registered to teach."""

    tutor = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="tutor_courses"
    )
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="tutors")

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["tutor", "course"], name="unique_tutor_course")
        ]

    def __str__(self) -> str:
        return f"{self.tutor} - {self.course}"


class TutoringSession(models.Model):
    """Persistence model for tutoring sessions."""

    class Kind(models.TextChoices):
        OPEN = "open", "Open"
        ONE_ON_ONE = "one_on_one", "One-on-One"

    class Status(models.TextChoices):
        SCHEDULED = "scheduled", "Scheduled"
        ACTIVE = "active", "Active"
        OVER = "over", "Over"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tutor = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="tutored_sessions"
    )
    title = models.CharField(max_length=150)
    kind = models.CharField(max_length=20, choices=Kind.choices)
    starts_at = models.DateTimeField()
    ends_at = models.DateTimeField()
    capacity = models.PositiveSmallIntegerField()
    location = models.CharField(max_length=255, blank=True, null=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.SCHEDULED)
    courses = models.ManyToManyField(Course, through="SessionCourse", related_name="sessions")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["starts_at"]
        indexes = [
            models.Index(fields=["tutor", "starts_at"], name="session_tutor_start_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(ends_at__gt=models.F("starts_at")),
                name="session_ends_after_start",
            ),
            models.CheckConstraint(
                condition=models.Q(capacity__gte=1) & models.Q(capacity__lte=50),
                name="session_capacity_in_range",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.title} - {self.starts_at}"


class SessionCourse(models.Model):
    """Association between a session and the courses it covers."""

    session = models.ForeignKey(
        TutoringSession, on_delete=models.CASCADE, related_name="course_links"
    )
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="session_links")

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["session", "course"], name="unique_session_course")
        ]


class Enrollment(models.Model):
    """A confirmed seat in a session."""

    session = models.ForeignKey(
        TutoringSession, on_delete=models.CASCADE, related_name="enrollments"
    )
    student = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="enrollments"
    )
    enrolled_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["enrolled_at", "id"]
        constraints = [
            models.UniqueConstraint(fields=["session", "student"], name="unique_enrollment")
        ]

    def __str__(self) -> str:
        return f"{self.student} -> {self.session}"


class Message(models.Model):
    """A directed message; filed per participant through MessageFiling."""

    class Kind(models.TextChoices):
        NORMAL = "normal", "Normal"
        JOIN_REQUEST = "session_join_request", "Session join request"

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="sent_messages"
    )
    receiver = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="received_messages"
    )
    subject = models.CharField(max_length=255)
    body = models.TextField()
    kind = models.CharField(max_length=30, choices=Kind.choices, default=Kind.NORMAL)
    sent_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-sent_at"]

    def __str__(self) -> str:
        return self.subject


class MessageFiling(models.Model):
    """Per-user view of a message: folder and read state."""

    class Folder(models.TextChoices):
        INBOX = "inbox", "Inbox"
        SENT = "sent", "Sent"
        DRAFTS = "drafts", "Drafts"
        TRASH = "trash", "Trash"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="message_filings"
    )
    message = models.ForeignKey(Message, on_delete=models.CASCADE, related_name="filings")
    folder = models.CharField(max_length=10, choices=Folder.choices)
    is_read = models.BooleanField(default=False)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user", "message"], name="unique_message_filing")
        ]
        indexes = [
            models.Index(fields=["user", "folder"], name="filing_user_folder_idx"),
        ]


class JoinRequest(models.Model):
    """A student's request to join a session."""

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        ACCEPTED = "accepted", "Accepted"
        DENIED = "denied", "Denied"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    session = models.ForeignKey(
        TutoringSession, on_delete=models.CASCADE, related_name="join_requests"
    )
    requester = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="join_requests"
    )
    tutor = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="received_join_requests"
    )
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    message = models.ForeignKey(
        Message, on_delete=models.SET_NULL, null=True, blank=True, related_name="join_requests"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    responded_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["session", "requester"],
                condition=models.Q(status__in=["pending", "accepted"]),
                name="unique_active_join_request",
            )
        ]
        indexes = [
            models.Index(fields=["session", "status"], name="joinreq_session_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.requester} -> {self.session} ({self.status})"
