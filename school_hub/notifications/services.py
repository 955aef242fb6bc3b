"""Creating notifications on behalf of other apps.

Notifications are the durable copy of every realtime event: a user who was
offline when a message or announcement went out finds it here.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .models import Notification

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


def notify(
    recipient_id: int,
    title: str,
    message: str,
    *,
    notification_type: str = Notification.Type.INFO,
    related_type: str = "",
    related_id: int | None = None,
) -> Notification:
    return Notification.objects.create(
        recipient_id=recipient_id,
        title=title,
        message=message,
        notification_type=notification_type,
        related_type=related_type,
        related_id=related_id,
    )


def notify_many(
    recipient_ids: Iterable[int],
    title: str,
    message: str,
    *,
    notification_type: str = Notification.Type.INFO,
    related_type: str = "",
    related_id: int | None = None,
) -> list[Notification]:
    """One notification per distinct recipient, created in a single query."""

    rows = [
        Notification(
            recipient_id=rid,
            title=title,
            message=message,
            notification_type=notification_type,
            related_type=related_type,
            related_id=related_id,
        )
        for rid in sorted(set(recipient_ids))
    ]
    created = Notification.objects.bulk_create(rows)
    logger.debug(
        "Created %d %s notifications for %s %s",
        len(created),
        notification_type,
        related_type or "-",
        related_id,
    )
    return created
