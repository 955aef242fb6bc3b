from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Class(models.Model):
    class Status(models.TextChoices):
        ACTIVE = "active", _("Active")
        UPCOMING = "upcoming", _("Upcoming")
        COMPLETED = "completed", _("Completed")
        CANCELLED = "cancelled", _("Cancelled")

    name = models.CharField(max_length=255)
    description = models.TextField()
    subject = models.CharField(max_length=120, db_index=True)
    grade_level = models.CharField(max_length=50)
    teacher = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="taught_classes",
    )
    start_date = models.DateField()
    end_date = models.DateField()
    # [{"day_of_week": 0..6, "start_time": "HH:MM", "end_time": "HH:MM", "location": str}]
    schedule = models.JSONField(default=list, blank=True)
    capacity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    # Number of enrollments currently in the active status
    enrollment_count = models.PositiveIntegerField(default=0)
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.UPCOMING
    )
    tags = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["start_date", "id"]
        verbose_name_plural = "classes"

    def __str__(self):
        return self.name

    @property
    def is_full(self) -> bool:
        return self.enrollment_count >= self.capacity


class Enrollment(models.Model):
    class Status(models.TextChoices):
        ACTIVE = "active", _("Active")
        DROPPED = "dropped", _("Dropped")
        COMPLETED = "completed", _("Completed")

    klass = models.ForeignKey(
        Class, on_delete=models.CASCADE, related_name="enrollments"
    )
    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="enrollments",
    )
    enrollment_date = models.DateTimeField(default=timezone.now)
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.ACTIVE
    )
    grade = models.CharField(max_length=20, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-enrollment_date", "-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["klass", "student"], name="uniq_enrollment_class_student"
            ),
        ]

    def __str__(self):
        return f"{self.student} in {self.klass}"


class AttendanceEntry(models.Model):
    class Status(models.TextChoices):
        PRESENT = "present", _("Present")
        ABSENT = "absent", _("Absent")
        LATE = "late", _("Late")
        EXCUSED = "excused", _("Excused")

    enrollment = models.ForeignKey(
        Enrollment, on_delete=models.CASCADE, related_name="attendance"
    )
    date = models.DateField()
    status = models.CharField(max_length=20, choices=Status.choices)
    notes = models.TextField(blank=True, default="")
    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["date", "id"]
        verbose_name_plural = "attendance entries"

    def __str__(self):
        return f"{self.enrollment_id} {self.date} {self.status}"
