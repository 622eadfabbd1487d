from django.contrib import admin

from tutoring.models import (
    Course,
    Enrollment,
    JoinRequest,
    Message,
    SessionCourse,
    TutorCourse,
    TutoringSession,
)


class ReadOnlyAdminMixin:
    """Enrollments and join requests change only through the API."""

    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class SessionCourseInline(admin.TabularInline):
    model = SessionCourse
    extra = 1


class EnrollmentInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = Enrollment
    extra = 0
    readonly_fields = ["student", "enrolled_at"]


class JoinRequestInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = JoinRequest
    fk_name = "session"
    extra = 0
    readonly_fields = ["requester", "status", "created_at", "responded_at"]
    exclude = ["tutor", "message"]


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ["department_code", "course_number", "title"]
    search_fields = ["department_code", "course_number", "title"]


@admin.register(TutorCourse)
class TutorCourseAdmin(admin.ModelAdmin):
    list_display = ["tutor", "course"]
    list_filter = ["course__department_code"]


@admin.register(TutoringSession)
class TutoringSessionAdmin(admin.ModelAdmin):
    list_display = ["title", "tutor", "kind", "starts_at", "ends_at", "capacity", "status"]
    list_filter = ["kind", "status"]
    search_fields = ["title", "location"]
    inlines = [SessionCourseInline, EnrollmentInline, JoinRequestInline]

    def get_readonly_fields(self, request, obj=None):
        if obj is not None:
            return ["tutor", "kind", "capacity"]
        return []

    def has_delete_permission(self, request, obj=None):
        # Cancelling goes through DELETE /api/sessions/<id> so attendees are notified.
        return False


@admin.register(JoinRequest)
class JoinRequestAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ["session", "requester", "status", "created_at", "responded_at"]
    list_filter = ["status"]
    readonly_fields = [
        "session",
        "requester",
        "tutor",
        "status",
        "message",
        "created_at",
        "responded_at",
    ]


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ["subject", "sender", "receiver", "kind", "sent_at"]
    list_filter = ["kind"]
