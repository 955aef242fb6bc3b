"""Role and ownership rules, one function per (resource, action) group.

Model attributes are read by name (``teacher_id``, ``author_id`` ...) so this
module does not import any app models.
"""

from __future__ import annotations

from typing import Any

from django.utils import timezone

from .registry import rule

ROLE_ADMIN = "admin"
ROLE_TEACHER = "teacher"
ROLE_STUDENT = "student"


def is_admin(user: Any) -> bool:
    return bool(
        getattr(user, "is_superuser", False)
        or getattr(user, "role", None) == ROLE_ADMIN
    )


def is_staff_role(user: Any) -> bool:
    """Teachers and admins author classes, content and announcements."""

    return is_admin(user) or getattr(user, "role", None) == ROLE_TEACHER


def is_student(user: Any) -> bool:
    return getattr(user, "role", None) == ROLE_STUDENT


def _owns(user: Any, resource: Any, field: str) -> bool:
    return getattr(resource, field, None) == getattr(user, "id", None)


# Users
# ------------------------------------------------------------------------------


@rule("users.user", "list", "manage")
def _admin_only(user, resource) -> bool:
    return is_admin(user)


@rule("users.user", "view", "update")
def _self_or_admin(user, resource) -> bool:
    return is_admin(user) or _owns(user, resource, "id")


@rule("users.user", "change_password")
def _self_only(user, resource) -> bool:
    return _owns(user, resource, "id")


# Classes and enrollments
# ------------------------------------------------------------------------------


@rule("classes.class", "list", "view")
def _any_user(user, resource) -> bool:
    return True


@rule("classes.class", "create")
def _teacher_or_admin(user, resource) -> bool:
    return is_staff_role(user)


@rule("classes.class", "update", "view_enrollments", "announce")
def _class_teacher_or_admin(user, klass) -> bool:
    return is_admin(user) or _owns(user, klass, "teacher_id")


@rule("classes.class", "delete")
def _class_admin_only(user, klass) -> bool:
    return is_admin(user)


@rule("classes.enrollment", "create")
def _students_enroll(user, resource) -> bool:
    return is_student(user)


@rule("classes.enrollment", "view", "update")
def _enrollment_party(user, enrollment) -> bool:
    if is_admin(user) or _owns(user, enrollment, "student_id"):
        return True
    return _owns(user, enrollment.klass, "teacher_id")


@rule("classes.enrollment", "record_attendance")
def _enrollment_teacher(user, enrollment) -> bool:
    return is_admin(user) or _owns(user, enrollment.klass, "teacher_id")


# Content
# ------------------------------------------------------------------------------


def content_item_visible_to_students(item: Any) -> bool:
    publish_date = getattr(item, "publish_date", None)
    return item.status == "published" and (
        publish_date is None or publish_date <= timezone.now()
    )


@rule("content.contentitem", "create")
@rule("content.contentmodule", "create")
def _content_authors(user, resource) -> bool:
    return is_staff_role(user)


@rule("content.contentitem", "list")
@rule("content.contentmodule", "list")
def _content_readers(user, resource) -> bool:
    return True


@rule("content.contentitem", "view")
def _view_content_item(user, item) -> bool:
    if not is_student(user):
        return True
    return content_item_visible_to_students(item)


@rule("content.contentitem", "update", "delete")
def _content_author_or_admin(user, item) -> bool:
    return is_admin(user) or _owns(user, item, "author_id")


@rule("content.contentmodule", "view")
def _view_content_module(user, module) -> bool:
    return not is_student(user) or module.status == "published"


@rule("content.contentmodule", "update", "delete")
def _module_creator_or_admin(user, module) -> bool:
    return is_admin(user) or _owns(user, module, "created_by_id")


# Communication
# ------------------------------------------------------------------------------


@rule("communication.message", "create", "list")
def _any_sender(user, resource) -> bool:
    return True


@rule("communication.message", "view", "delete")
def _message_party(user, message) -> bool:
    return _owns(user, message, "sender_id") or _owns(user, message, "recipient_id")


@rule("communication.announcement", "create")
def _announcers(user, resource) -> bool:
    return is_staff_role(user)


@rule("communication.announcement", "list")
def _announcement_readers(user, resource) -> bool:
    return True


@rule("communication.announcement", "view")
def _view_announcement(user, announcement) -> bool:
    if is_admin(user) or _owns(user, announcement, "author_id"):
        return True
    return announcement.is_active() and announcement.is_addressed_to(user)


@rule("communication.announcement", "update", "delete")
def _announcement_author_or_admin(user, announcement) -> bool:
    return is_admin(user) or _owns(user, announcement, "author_id")


@rule("notifications.notification", "list")
def _notification_readers(user, resource) -> bool:
    return True


@rule("notifications.notification", "view", "update", "delete")
def _notification_recipient(user, notification) -> bool:
    return _owns(user, notification, "recipient_id")
