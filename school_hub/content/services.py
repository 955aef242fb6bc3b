"""Content item versioning and module ordering."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

from django.db import transaction
from django.utils import timezone

from .models import ContentItem
from .models import ContentModuleItem

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Sequence

    from school_hub.users.models import User

    from .models import ContentModule

logger = logging.getLogger(__name__)


def update_content_item(
    item: ContentItem,
    changes: dict[str, Any],
    actor: User,
) -> ContentItem:
    """Apply ``changes`` to ``item`` and return the saved row.

    When the new ``content`` differs from the stored one, exactly one entry
    holding the old content is appended to ``previous_versions`` and
    ``version`` goes up by one. Other edits never create a version.

    The comparison runs against the locked database row, not ``item``, so
    concurrent or stale edits each add their own history entry.
    """

    with transaction.atomic():
        locked = ContentItem.objects.select_for_update().get(pk=item.pk)

        new_content = changes.get("content")
        if new_content is not None and new_content != locked.content:
            locked.previous_versions = [
                *(locked.previous_versions or []),
                {
                    "content": locked.content,
                    "updated_at": (locked.updated_at or timezone.now()).isoformat(),
                    "updated_by": actor.pk,
                },
            ]
            locked.version += 1
            logger.info(
                "Content item %s moved to version %s by user %s",
                locked.pk,
                locked.version,
                actor.pk,
            )

        for field, value in changes.items():
            setattr(locked, field, value)
        locked.save()
    return locked


def set_module_items(module: ContentModule, item_ids: Sequence[int]) -> None:
    """Replace the module's item list, keeping the given order.

    Duplicate ids keep their first position.
    """

    unique_ids = list(dict.fromkeys(item_ids))
    with transaction.atomic():
        module.item_links.all().delete()
        ContentModuleItem.objects.bulk_create(
            ContentModuleItem(module=module, item_id=item_id, position=position)
            for position, item_id in enumerate(unique_ids)
        )
