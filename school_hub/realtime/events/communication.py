from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING
from typing import Any

from school_hub.classes.services import class_roster_user_ids
from school_hub.realtime.socketio import emit_event_to_all
from school_hub.realtime.socketio import emit_event_to_role
from school_hub.realtime.socketio import emit_event_to_user

if TYPE_CHECKING:  # import for type checking only
    from datetime import datetime

    from school_hub.communication.models import Announcement
    from school_hub.communication.models import Message
    from school_hub.notifications.models import Notification

logger = logging.getLogger(__name__)

NEW_MESSAGE = "new-message"
NEW_ANNOUNCEMENT = "new-announcement"
ANNOUNCEMENT_UPDATED = "announcement-updated"
ANNOUNCEMENT_DELETED = "announcement-deleted"


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def build_message_payload(message: Message) -> dict[str, Any]:
    return {
        "id": message.id,
        "senderId": message.sender_id,
        "recipientId": message.recipient_id,
        "subject": message.subject,
        "content": message.content,
        "read": message.is_read,
        "createdAt": _iso(message.created_at),
    }


def build_notification_payload(notification: Notification) -> dict[str, Any]:
    return {
        "id": notification.id,
        "title": notification.title,
        "message": notification.message,
        "type": notification.notification_type,
        "relatedTo": {
            "type": notification.related_type,
            "id": notification.related_id,
        },
        "read": notification.is_read,
        "createdAt": _iso(notification.created_at),
    }


def build_new_message_payload(
    message: Message, notification: Notification
) -> dict[str, Any]:
    return {
        "message": build_message_payload(message),
        "notification": build_notification_payload(notification),
    }


def build_announcement_payload(announcement: Announcement) -> dict[str, Any]:
    return {
        "id": announcement.id,
        "title": announcement.title,
        "content": announcement.content,
        "authorId": announcement.author_id,
        "targetAudience": {
            "type": announcement.audience_type,
            "classId": announcement.audience_class_id,
            "role": announcement.audience_role or None,
        },
        "priority": announcement.priority,
        "startDate": _iso(announcement.start_date),
        "endDate": _iso(announcement.end_date),
        "createdAt": _iso(announcement.created_at),
    }


@dataclass(frozen=True)
class Audience:
    """Where an announcement event goes.

    ``everyone`` reaches every connection. Otherwise the event goes to the
    role room, when set, and to each user room in ``user_ids``. An audience
    with none of these reaches nobody.
    """

    everyone: bool = False
    role: str | None = None
    user_ids: tuple[int, ...] = ()


def resolve_audience(announcement: Announcement) -> Audience:
    kind = announcement.audience_type
    if kind == "all":
        return Audience(everyone=True)
    if kind == "role":
        return Audience(role=announcement.audience_role or None)
    if kind == "class" and announcement.audience_class_id is not None:
        return Audience(
            user_ids=tuple(class_roster_user_ids(announcement.audience_class_id))
        )
    return Audience()


def emit_to_audience(audience: Audience, event: str, payload: dict[str, Any]) -> None:
    if audience.everyone:
        emit_event_to_all(event, payload)
        return
    if audience.role:
        emit_event_to_role(audience.role, event, payload)
    for user_id in audience.user_ids:
        emit_event_to_user(user_id, event, payload)


def publish_message_created(message: Message, notification: Notification) -> None:
    """Publish a new Message to the recipient's room in realtime."""

    payload = build_new_message_payload(message, notification)
    emit_event_to_user(message.recipient_id, NEW_MESSAGE, payload)
    logger.info("Published message %s to user %s", message.id, message.recipient_id)


def publish_announcement(event: str, announcement: Announcement) -> None:
    """Publish ``new-announcement`` or ``announcement-updated``."""

    audience = resolve_audience(announcement)
    emit_to_audience(
        audience,
        event,
        {"announcement": build_announcement_payload(announcement)},
    )
    logger.info("Published %s for announcement %s", event, announcement.id)


def publish_announcement_deleted(announcement_id: int, audience: Audience) -> None:
    """The audience is resolved by the caller before the row is gone."""

    emit_to_audience(
        audience, ANNOUNCEMENT_DELETED, {"announcementId": announcement_id}
    )
    logger.info("Published %s for announcement %s", ANNOUNCEMENT_DELETED, announcement_id)
