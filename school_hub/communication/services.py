"""Messages and announcements.

Every event is stored first, as a Message/Announcement plus Notification
rows, and only then relayed live. Live delivery is scheduled with
``transaction.on_commit`` so nothing is published for a rolled back write.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import TYPE_CHECKING
from typing import Any

from django.db import transaction
from rest_framework.exceptions import NotFound

from school_hub.classes.services import class_roster_user_ids
from school_hub.notifications.models import Notification
from school_hub.notifications.services import notify
from school_hub.notifications.services import notify_many
from school_hub.realtime.events import communication as events
from school_hub.users.models import User

from .models import Announcement
from .models import Message

if TYPE_CHECKING:  # import for type checking only
    from school_hub.realtime.events.communication import Audience

logger = logging.getLogger(__name__)


def send_message(
    sender: User,
    recipient_id: int,
    subject: str,
    content: str,
    *,
    publish: bool = True,
) -> tuple[Message, Notification]:
    """Store a direct message and the recipient's notification.

    With ``publish`` the ``new-message`` event is emitted after commit; the
    socket handler passes ``publish=False`` and emits itself.
    """

    recipient = User.objects.filter(pk=recipient_id).first()
    if recipient is None:
        msg = "Recipient not found"
        raise NotFound(msg)

    with transaction.atomic():
        message = Message.objects.create(
            sender=sender,
            recipient=recipient,
            subject=subject,
            content=content,
        )
        notification = notify(
            recipient.pk,
            "New Message",
            f"You have a new message from {sender.full_name or sender.username}: {subject}",
            related_type=Notification.RelatedType.MESSAGE,
            related_id=message.pk,
        )

    logger.info("User %s sent message %s to user %s", sender.pk, message.pk, recipient.pk)
    if publish:
        transaction.on_commit(
            partial(events.publish_message_created, message, notification)
        )
    return message, notification


def announcement_recipient_ids(announcement: Announcement) -> list[int]:
    """Users an announcement is meant for, sorted."""

    kind = announcement.audience_type
    if kind == Announcement.AudienceType.ALL:
        ids = User.objects.filter(is_active=True).values_list("pk", flat=True)
    elif kind == Announcement.AudienceType.ROLE:
        ids = User.objects.filter(
            is_active=True, role=announcement.audience_role
        ).values_list("pk", flat=True)
    elif announcement.audience_class_id is not None:
        ids = class_roster_user_ids(announcement.audience_class_id)
    else:
        ids = []
    return sorted(set(ids))


def create_announcement(author: User, data: dict[str, Any]) -> Announcement:
    with transaction.atomic():
        announcement = Announcement.objects.create(author=author, **data)
        recipients = [
            uid for uid in announcement_recipient_ids(announcement) if uid != author.pk
        ]
        notify_many(
            recipients,
            "New Announcement",
            announcement.title,
            notification_type=(
                Notification.Type.WARNING
                if announcement.priority == Announcement.Priority.HIGH
                else Notification.Type.INFO
            ),
            related_type=Notification.RelatedType.ANNOUNCEMENT,
            related_id=announcement.pk,
        )

    logger.info(
        "Announcement %s (%s) created by user %s for %d recipients",
        announcement.pk,
        announcement.audience_type,
        author.pk,
        len(recipients),
    )
    transaction.on_commit(
        partial(events.publish_announcement, events.NEW_ANNOUNCEMENT, announcement)
    )
    return announcement


def update_announcement(announcement: Announcement, data: dict[str, Any]) -> Announcement:
    for field, value in data.items():
        setattr(announcement, field, value)
    announcement.save()
    transaction.on_commit(
        partial(events.publish_announcement, events.ANNOUNCEMENT_UPDATED, announcement)
    )
    return announcement


def delete_announcement(announcement: Announcement) -> None:
    audience: Audience = events.resolve_audience(announcement)
    announcement_id = announcement.pk
    announcement.delete()
    logger.info("Announcement %s deleted", announcement_id)
    transaction.on_commit(
        partial(events.publish_announcement_deleted, announcement_id, audience)
    )


def discard_class_announcements(class_id: int) -> None:
    """Schedule ``announcement-deleted`` for announcements addressed to a class.

    Call inside the transaction that deletes the class, before the delete;
    the announcements are removed with it and the roster is gone afterwards.
    """

    for announcement in Announcement.objects.filter(audience_class_id=class_id):
        audience: Audience = events.resolve_audience(announcement)
        logger.info(
            "Announcement %s goes with class %s", announcement.pk, class_id
        )
        transaction.on_commit(
            partial(events.publish_announcement_deleted, announcement.pk, audience)
        )
