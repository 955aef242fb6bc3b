"""DRF glue for the policy table."""

from __future__ import annotations

from rest_framework.permissions import BasePermission

from .registry import DEFAULT_DENIED_MESSAGE
from .registry import is_allowed

DEFAULT_POLICY_ACTIONS = {
    "list": "list",
    "create": "create",
    "retrieve": "view",
    "update": "update",
    "partial_update": "update",
    "destroy": "delete",
}


class PolicyPermission(BasePermission):
    """Consult ``is_allowed`` for viewset actions.

    Views set ``policy_model`` and may extend or override the action mapping
    with ``policy_actions``. Collection actions are checked against the model
    class, detail actions against the object. Actions missing from the map
    are left to the view.
    """

    message = DEFAULT_DENIED_MESSAGE

    def _policy_action(self, view) -> str | None:
        actions = {**DEFAULT_POLICY_ACTIONS, **getattr(view, "policy_actions", {})}
        return actions.get(getattr(view, "action", None))

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        if not (user and getattr(user, "is_authenticated", False)):
            return False
        if getattr(view, "detail", False):
            return True
        action = self._policy_action(view)
        if action is None:
            return True
        return is_allowed(user, view.policy_model, action)

    def has_object_permission(self, request, view, obj) -> bool:
        action = self._policy_action(view)
        if action is None:
            return True
        return is_allowed(request.user, obj, action)
