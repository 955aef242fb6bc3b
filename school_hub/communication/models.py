from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import Case
from django.db.models import Q
from django.db.models import Value
from django.db.models import When
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from school_hub.classes.models import Enrollment
from school_hub.classes.services import class_roster_user_ids


class Message(models.Model):
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_messages",
    )
    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="received_messages",
    )
    subject = models.CharField(max_length=255)
    content = models.TextField()
    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.subject} ({self.sender_id} -> {self.recipient_id})"

    def mark_read(self) -> None:
        if self.is_read:
            return
        self.is_read = True
        self.read_at = timezone.now()
        self.save(update_fields=["is_read", "read_at"])


class AnnouncementQuerySet(models.QuerySet):
    def active(self, now=None):
        """Started and not yet ended."""
        now = now or timezone.now()
        return self.filter(start_date__lte=now).filter(
            Q(end_date__isnull=True) | Q(end_date__gte=now)
        )

    def addressed_to(self, user):
        class_ids = Enrollment.objects.filter(
            student=user, status=Enrollment.Status.ACTIVE
        ).values("klass_id")
        return self.filter(
            Q(audience_type=Announcement.AudienceType.ALL)
            | Q(audience_type=Announcement.AudienceType.ROLE, audience_role=user.role)
            | Q(
                Q(audience_class__teacher=user) | Q(audience_class_id__in=class_ids),
                audience_type=Announcement.AudienceType.CLASS,
            )
        )

    def by_priority(self):
        """High priority first, then newest."""
        rank = Case(
            When(priority=Announcement.Priority.HIGH, then=Value(0)),
            When(priority=Announcement.Priority.MEDIUM, then=Value(1)),
            default=Value(2),
            output_field=models.IntegerField(),
        )
        return self.alias(priority_rank=rank).order_by(
            "priority_rank", "-created_at", "-id"
        )


class Announcement(models.Model):
    class AudienceType(models.TextChoices):
        ALL = "all", _("Everyone")
        CLASS = "class", _("Class")
        ROLE = "role", _("Role")

    class Priority(models.TextChoices):
        LOW = "low", _("Low")
        MEDIUM = "medium", _("Medium")
        HIGH = "high", _("High")

    title = models.CharField(max_length=255)
    content = models.TextField()
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="announcements",
    )
    audience_type = models.CharField(max_length=10, choices=AudienceType.choices)
    audience_class = models.ForeignKey(
        "classes.Class",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="announcements",
    )
    audience_role = models.CharField(max_length=20, blank=True, default="")
    priority = models.CharField(
        max_length=10, choices=Priority.choices, default=Priority.MEDIUM
    )
    start_date = models.DateTimeField(default=timezone.now)
    end_date = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = AnnouncementQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return self.title

    def is_active(self, now=None) -> bool:
        now = now or timezone.now()
        return self.start_date <= now and (self.end_date is None or self.end_date >= now)

    def is_addressed_to(self, user) -> bool:
        if self.audience_type == self.AudienceType.ALL:
            return True
        if self.audience_type == self.AudienceType.ROLE:
            return self.audience_role == getattr(user, "role", None)
        if self.audience_class_id is None:
            return False
        return user.pk in class_roster_user_ids(self.audience_class_id)
