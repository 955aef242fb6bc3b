"""Liveness check for the API and the relay's message queue."""

from __future__ import annotations

from typing import Any

import redis
from django.conf import settings
from django.db import connection
from django.http import JsonResponse

QUEUE_PING_TIMEOUT = 0.5


def check_db() -> dict[str, Any]:
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1;")
            cursor.fetchone()
    except Exception as exc:  # noqa: BLE001 - a health check reports, it never raises
        return {"ok": False, "error": str(exc)}
    return {"ok": True}


def check_message_queue() -> dict[str, Any]:
    """Ping the Redis queue the relay processes share, if one is configured."""

    url = settings.SOCKETIO_MESSAGE_QUEUE
    if not url:
        return {"ok": True, "skipped": True}
    try:
        redis.Redis.from_url(
            url,
            socket_timeout=QUEUE_PING_TIMEOUT,
            socket_connect_timeout=QUEUE_PING_TIMEOUT,
        ).ping()
    except Exception as exc:  # noqa: BLE001 - a health check reports, it never raises
        return {"ok": False, "error": str(exc)}
    return {"ok": True}


def overall_status(components: dict[str, dict[str, Any]]) -> str:
    healthy = [part.get("ok", False) for part in components.values()]
    if all(healthy):
        return "ok"
    return "degraded" if any(healthy) else "down"


def health(request):
    components = {"db": check_db(), "redis": check_message_queue()}
    status = overall_status(components)
    return JsonResponse(
        {"status": status, "components": components},
        status=200 if status == "ok" else 503,
    )
