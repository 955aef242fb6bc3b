"""drf-spectacular post-processing.

Every operation is tagged with the service it belongs to, so the Swagger UI
is partitioned the same way the gateway mounts the services.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

OPERATION_METHODS = frozenset({"get", "post", "put", "patch", "delete"})

# Longest prefixes first: the first match wins
SERVICE_TAGS = (
    ("/api/auth/jwt/", "JWT Authentication"),
    ("/api/auth/", "Authentication"),
    ("/api/users/", "Users"),
    ("/api/classes/enrollments/", "Enrollments"),
    ("/api/classes/", "Classes"),
    ("/api/content/content-modules/", "Content Modules"),
    ("/api/content/", "Content Items"),
    ("/api/communications/messages/", "Messages"),
    ("/api/communications/announcements/", "Announcements"),
    ("/api/communications/notifications/", "Notifications"),
)


def service_tag(path: str) -> str | None:
    return next((tag for prefix, tag in SERVICE_TAGS if path.startswith(prefix)), None)


def _operations(path_item: dict[str, Any]) -> Iterator[dict[str, Any]]:
    for method, operation in path_item.items():
        if method.lower() in OPERATION_METHODS and isinstance(operation, dict):
            yield operation


def group_tags(result: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
    """Give each operation exactly one service tag and declare the tags used."""

    used: list[str] = []
    for path, path_item in result.get("paths", {}).items():
        tag = service_tag(path)
        if tag is None:
            continue
        for operation in _operations(path_item):
            operation["tags"] = [tag]
        if tag not in used:
            used.append(tag)

    declared = result.setdefault("tags", [])
    known = {entry.get("name") for entry in declared}
    declared.extend({"name": tag} for tag in used if tag not in known)
    return result
