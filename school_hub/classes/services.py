"""Enrollment bookkeeping.

``Class.enrollment_count`` is only ever changed here, under a row lock on the
class, so the capacity check and the counter update cannot interleave with a
concurrent enroll or drop on the same class.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound
from rest_framework.exceptions import PermissionDenied
from rest_framework.exceptions import ValidationError

from school_hub.policies.rules import is_admin

from .models import AttendanceEntry
from .models import Class
from .models import Enrollment

if TYPE_CHECKING:  # import for type checking only
    from datetime import date

    from school_hub.users.models import User

logger = logging.getLogger(__name__)

CLASS_FULL = "Class is full"
ALREADY_ENROLLED = "Student is already enrolled in this class"
STUDENTS_CAN_ONLY_DROP = "Students can only drop classes"


def _locked_class(class_id: int) -> Class:
    klass = Class.objects.select_for_update().filter(pk=class_id).first()
    if klass is None:
        msg = "Class not found"
        raise NotFound(msg)
    return klass


def _increment(klass: Class) -> None:
    if klass.is_full:
        raise ValidationError(CLASS_FULL)
    klass.enrollment_count += 1
    klass.save(update_fields=["enrollment_count", "updated_at"])


def _decrement(klass: Class) -> None:
    klass.enrollment_count = max(klass.enrollment_count - 1, 0)
    klass.save(update_fields=["enrollment_count", "updated_at"])


def enroll(student: User, class_id: int) -> Enrollment:
    """Enroll ``student`` in a class, reactivating a dropped enrollment.

    Raises ``NotFound`` for an unknown class and ``ValidationError`` when the
    class is full or the student already holds an active or completed
    enrollment.
    """

    with transaction.atomic():
        klass = _locked_class(class_id)
        if klass.is_full:
            raise ValidationError(CLASS_FULL)

        existing = Enrollment.objects.filter(klass=klass, student=student).first()
        if existing is not None and existing.status != Enrollment.Status.DROPPED:
            raise ValidationError(ALREADY_ENROLLED)

        if existing is None:
            enrollment = Enrollment.objects.create(klass=klass, student=student)
        else:
            enrollment = existing
            enrollment.status = Enrollment.Status.ACTIVE
            enrollment.enrollment_date = timezone.now()
            enrollment.save(update_fields=["status", "enrollment_date", "updated_at"])
        _increment(klass)

    logger.info("Student %s enrolled in class %s", student.pk, klass.pk)
    return enrollment


def change_enrollment_status(
    actor: User,
    enrollment: Enrollment,
    new_status: str,
) -> Enrollment:
    """Move an enrollment between statuses, keeping the class counter in step.

    A student acting on their own enrollment may only drop it. Leaving
    ``active`` frees a seat; returning to ``active`` takes one and fails when
    the class is full.
    """

    acts_as_student = (
        enrollment.student_id == actor.pk
        and not is_admin(actor)
        and enrollment.klass.teacher_id != actor.pk
    )
    if acts_as_student and new_status != Enrollment.Status.DROPPED:
        raise PermissionDenied(STUDENTS_CAN_ONLY_DROP)

    with transaction.atomic():
        klass = _locked_class(enrollment.klass_id)
        # Re-read under the lock so a concurrent change is not double counted
        enrollment = Enrollment.objects.select_for_update().get(pk=enrollment.pk)
        old_status = enrollment.status
        if old_status == new_status:
            return enrollment

        if old_status == Enrollment.Status.ACTIVE:
            _decrement(klass)
        elif new_status == Enrollment.Status.ACTIVE:
            _increment(klass)

        enrollment.status = new_status
        enrollment.save(update_fields=["status", "updated_at"])

    logger.info(
        "Enrollment %s moved %s -> %s by user %s",
        enrollment.pk,
        old_status,
        new_status,
        actor.pk,
    )
    return enrollment


def record_attendance(
    enrollment: Enrollment,
    *,
    date: date,
    status: str,
    notes: str = "",
    recorded_by: User | None = None,
) -> AttendanceEntry:
    return AttendanceEntry.objects.create(
        enrollment=enrollment,
        date=date,
        status=status,
        notes=notes,
        recorded_by=recorded_by,
    )


def class_roster_user_ids(class_id: int) -> list[int]:
    """The teacher plus every actively enrolled student, teacher first.

    An unknown class has an empty roster.
    """

    teacher_id = Class.objects.filter(pk=class_id).values_list(
        "teacher_id", flat=True
    ).first()
    if teacher_id is None:
        return []
    student_ids = Enrollment.objects.filter(
        klass_id=class_id, status=Enrollment.Status.ACTIVE
    ).values_list("student_id", flat=True)
    roster = [teacher_id]
    roster.extend(sid for sid in student_ids.order_by("student_id") if sid != teacher_id)
    return roster
