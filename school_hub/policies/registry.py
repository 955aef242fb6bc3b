from __future__ import annotations

from collections.abc import Callable
from typing import Any

from rest_framework.exceptions import PermissionDenied

Rule = Callable[[Any, Any], bool]

_RULES: dict[tuple[str, str], Rule] = {}

DEFAULT_DENIED_MESSAGE = "Access denied"


def _resource_label(resource: Any) -> str:
    """``app_label.modelname`` for a model instance or a model class."""

    meta = getattr(resource, "_meta", None)
    if meta is None:
        msg = f"Not a model resource: {resource!r}"
        raise TypeError(msg)
    return meta.label_lower


def rule(label: str, *actions: str) -> Callable[[Rule], Rule]:
    """Register ``fn`` as the check for each of ``actions`` on ``label``."""

    def decorator(fn: Rule) -> Rule:
        for action in actions:
            _RULES[(label, action)] = fn
        return fn

    return decorator


def is_allowed(actor: Any, resource: Any, action: str) -> bool:
    """Return True when ``actor`` may perform ``action`` on ``resource``.

    ``resource`` is a model instance, or the model class itself for
    collection-level actions such as ``create`` and ``list``. Unknown
    (resource, action) pairs are denied.
    """

    if not (actor and getattr(actor, "is_authenticated", False)):
        return False
    check = _RULES.get((_resource_label(resource), action))
    if check is None:
        return False
    return bool(check(actor, resource))


def ensure_allowed(
    actor: Any,
    resource: Any,
    action: str,
    message: str | None = None,
) -> None:
    if not is_allowed(actor, resource, action):
        raise PermissionDenied(message or DEFAULT_DENIED_MESSAGE)
