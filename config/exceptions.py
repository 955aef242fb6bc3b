"""DRF exception handler shared by every service.

Validation errors map to 400, missing or bad credentials to 401, role and
ownership failures to 403, unknown ids to 404. Anything the framework does
not recognise becomes a logged 500 with a generic message.
"""

from __future__ import annotations

import logging
from typing import Any

from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler
from rest_framework.views import set_rollback

logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = "Server error"


def _first_message(detail: Any) -> str:
    """Flatten DRF error detail into one human-readable line."""

    if isinstance(detail, dict):
        for key, value in detail.items():
            inner = _first_message(value)
            if key in ("detail", "non_field_errors"):
                return inner
            return f"{key}: {inner}"
        return ""
    if isinstance(detail, list):
        return _first_message(detail[0]) if detail else ""
    return str(detail)


def api_exception_handler(exc: Exception, context: dict[str, Any]) -> Response:
    response = exception_handler(exc, context)
    request = context.get("request")

    if response is None:
        user = getattr(request, "user", None)
        logger.exception(
            "Unhandled API error: %s %s user=%s",
            getattr(request, "method", "?"),
            getattr(request, "path", "?"),
            getattr(user, "pk", None),
        )
        set_rollback()
        return Response(
            {"message": SERVER_ERROR_MESSAGE},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    data = response.data
    message = _first_message(data)
    if isinstance(exc, ValidationError) and not isinstance(data, dict):
        data = {"non_field_errors": data}
    if isinstance(data, dict):
        data.setdefault("message", message)
    response.data = data
    return response
