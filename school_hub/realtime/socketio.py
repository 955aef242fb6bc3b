"""Global Socket.IO server for the frontend.

Mounted on the ASGI application at ``settings.SOCKETIO_PATH``
(``/ws/communications/`` by default).

Protocol:
- Connections are accepted without credentials. A token in ``query.token``
  or ``auth.token`` is tried straight away; otherwise the client emits
  ``authenticate`` with its access token, and may retry after a failure.
- Authenticated connections join ``user_<id>`` and ``role_<role>``.
- ``private-message`` persists a Message plus a Notification for the
  recipient and relays it to the recipient's room.

When ``settings.SOCKETIO_MESSAGE_QUEUE`` names a Redis URL, rooms and emits
are shared by every relay process through ``AsyncRedisManager``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qs

import socketio
from asgiref.sync import async_to_sync
from channels.db import database_sync_to_async
from django.conf import settings
from rest_framework.exceptions import APIException
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken
from rest_framework_simplejwt.exceptions import TokenError

logger = logging.getLogger(__name__)

AUTHENTICATION_FAILED = "Authentication failed"
NOT_AUTHENTICATED = "Not authenticated"
SEND_FAILED = "Failed to send message"


def _client_manager() -> socketio.AsyncManager | None:
    url = getattr(settings, "SOCKETIO_MESSAGE_QUEUE", "")
    if not url:
        return None
    return socketio.AsyncRedisManager(url)


sio = socketio.AsyncServer(
    async_mode="asgi",
    client_manager=_client_manager(),
    cors_allowed_origins=settings.SOCKETIO_CORS_ALLOWED_ORIGINS,
    logger=False,
    engineio_logger=False,
)


@dataclass(frozen=True)
class UserRealtimeContext:
    user_id: int
    role: str


def room_for_user(user_id: int) -> str:
    return f"user_{int(user_id)}"


def room_for_role(role: str) -> str:
    return f"role_{role.strip().lower()}"


@database_sync_to_async
def _get_user_context_from_access_token(token: str) -> UserRealtimeContext:
    jwt_auth = JWTAuthentication()
    validated = jwt_auth.get_validated_token(token)
    user = jwt_auth.get_user(validated)
    return UserRealtimeContext(user_id=int(user.id), role=str(user.role))


def _extract_token(environ: dict[str, Any], auth: Any | None) -> str | None:
    """Extract JWT token from Socket.IO environ/auth.

    Handles python-socketio environ shapes across ASGI/WSGI servers.
    """

    scope: Any = environ
    if isinstance(environ, dict) and "asgi.scope" in environ:
        inner = environ.get("asgi.scope")
        if isinstance(inner, dict):
            scope = inner

    query_string: str | bytes = ""
    if isinstance(scope, dict) and "query_string" in scope:
        query_string = scope.get("query_string", b"")
    elif isinstance(scope, dict) and "QUERY_STRING" in scope:
        query_string = scope.get("QUERY_STRING", "")

    if isinstance(query_string, (bytes, bytearray)):
        query_string = query_string.decode(errors="ignore")

    token = parse_qs(str(query_string)).get("token", [None])[0]
    if isinstance(token, str) and token:
        return token

    # Allow `auth: { token }` as fallback.
    if isinstance(auth, dict):
        auth_token = auth.get("token")
        if isinstance(auth_token, str) and auth_token:
            return auth_token

    return None


async def _unbind(sid: str) -> None:
    """Drop any identity previously bound to ``sid`` and leave its rooms."""

    session = await sio.get_session(sid)
    if not isinstance(session, dict) or session.get("user_id") is None:
        return
    await sio.leave_room(sid, room_for_user(session["user_id"]))
    await sio.leave_room(sid, room_for_role(session.get("role") or ""))
    await sio.save_session(sid, {})


async def _reject(sid: str) -> dict[str, Any]:
    await _unbind(sid)
    result = {"success": False, "message": AUTHENTICATION_FAILED}
    await sio.emit("authenticated", result, to=sid)
    return result


async def _authenticate(sid: str, token: Any) -> dict[str, Any]:
    """Bind ``sid`` to the token's user, or leave it unauthenticated.

    A socket holds at most one identity: authenticating again replaces the
    previous binding and a failed attempt clears it.
    """

    if isinstance(token, dict):
        token = token.get("token")
    if not isinstance(token, str) or not token:
        return await _reject(sid)

    try:
        ctx = await _get_user_context_from_access_token(token)
    except (TokenError, InvalidToken, AuthenticationFailed) as exc:
        logger.info("Socket authentication failed for %s: %s", sid, exc)
        return await _reject(sid)

    await _unbind(sid)
    await sio.save_session(sid, {"user_id": ctx.user_id, "role": ctx.role})
    await sio.enter_room(sid, room_for_user(ctx.user_id))
    await sio.enter_room(sid, room_for_role(ctx.role))
    logger.info("Socket %s authenticated as user %s (%s)", sid, ctx.user_id, ctx.role)

    result = {"success": True, "userId": ctx.user_id, "role": ctx.role}
    await sio.emit("authenticated", result, to=sid)
    return result


@sio.event
async def connect(sid: str, environ: dict[str, Any], auth: Any | None = None):
    logger.info("Socket connected: %s", sid)
    token = _extract_token(environ, auth)
    if token:
        await _authenticate(sid, token)


@sio.event
async def authenticate(sid: str, token: Any = None):
    return await _authenticate(sid, token)


def _first_error(exc: APIException) -> str:
    detail = exc.detail
    while isinstance(detail, (list, dict)):
        if not detail:
            return SEND_FAILED
        detail = next(iter(detail.values())) if isinstance(detail, dict) else detail[0]
    return str(detail)


@database_sync_to_async
def _send_message(sender_id: int, data: dict[str, Any]):
    # Imported here: the communication app publishes through this module
    from school_hub.communication.api.serializers import MessageCreateSerializer  # noqa: PLC0415
    from school_hub.communication.services import send_message  # noqa: PLC0415
    from school_hub.users.models import User  # noqa: PLC0415

    serializer = MessageCreateSerializer(
        data={
            "recipient_id": data.get("recipientId"),
            "subject": data.get("subject"),
            "content": data.get("content"),
        }
    )
    serializer.is_valid(raise_exception=True)
    sender = User.objects.get(pk=sender_id)
    return send_message(sender, publish=False, **serializer.validated_data)


@sio.on("private-message")
async def private_message(sid: str, data: Any = None):
    from school_hub.realtime.events.communication import (  # noqa: PLC0415
        build_new_message_payload,
    )

    session = await sio.get_session(sid)
    user_id = session.get("user_id") if isinstance(session, dict) else None
    if user_id is None:
        await sio.emit("error", {"message": NOT_AUTHENTICATED}, to=sid)
        return {"success": False, "message": NOT_AUTHENTICATED}

    if not isinstance(data, dict):
        data = {}
    try:
        message, notification = await _send_message(user_id, data)
    except APIException as exc:
        reason = _first_error(exc)
        await sio.emit("error", {"message": reason}, to=sid)
        return {"success": False, "message": reason}
    except Exception:
        logger.exception("Private message from user %s failed", user_id)
        await sio.emit("error", {"message": SEND_FAILED}, to=sid)
        return {"success": False, "message": SEND_FAILED}

    payload = build_new_message_payload(message, notification)
    await sio.emit("new-message", payload, room=room_for_user(message.recipient_id))
    await sio.emit("message-sent", {"success": True, "messageId": message.id}, to=sid)
    logger.info(
        "Relayed message %s from user %s to user %s",
        message.id,
        user_id,
        message.recipient_id,
    )
    return {"success": True, "messageId": message.id}


@sio.event
async def disconnect(sid: str):
    logger.info("Socket disconnected: %s", sid)


def emit_event_to_room(room: str, event: str, payload: dict[str, Any]) -> None:
    """Emit an event to a room from sync Django code."""

    async_to_sync(sio.emit)(event, payload, room=room)


def emit_event_to_user(user_id: int, event: str, payload: dict[str, Any]) -> None:
    emit_event_to_room(room_for_user(user_id), event, payload)


def emit_event_to_role(role: str, event: str, payload: dict[str, Any]) -> None:
    emit_event_to_room(room_for_role(role), event, payload)


def emit_event_to_all(event: str, payload: dict[str, Any]) -> None:
    """Emit to every connected client, authenticated or not."""

    async_to_sync(sio.emit)(event, payload)
