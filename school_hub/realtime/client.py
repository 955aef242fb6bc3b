"""Async client for the realtime relay.

Used by scripts and other services that talk to the relay the same way the
browser does.
"""

from __future__ import annotations

import logging
from typing import Any

import socketio
from django.conf import settings

logger = logging.getLogger(__name__)

# Seconds to wait for the relay to acknowledge a private message
PRIVATE_MESSAGE_ACK_TIMEOUT = 5


class RelaySendError(Exception):
    """The relay did not confirm a send.

    The message may still have been stored: delivery is at-least-once, so a
    caller that retries can create a duplicate.
    """


class RelayClient:
    def __init__(
        self,
        url: str,
        token: str,
        *,
        socketio_path: str | None = None,
        ack_timeout: float = PRIVATE_MESSAGE_ACK_TIMEOUT,
        client: socketio.AsyncClient | None = None,
    ):
        self.url = url
        self.token = token
        self.socketio_path = socketio_path or settings.SOCKETIO_PATH
        self.ack_timeout = ack_timeout
        self.sio = client or socketio.AsyncClient(logger=False, engineio_logger=False)

    async def connect(self) -> None:
        await self.sio.connect(
            self.url,
            auth={"token": self.token},
            socketio_path=self.socketio_path,
        )

    async def disconnect(self) -> None:
        await self.sio.disconnect()

    async def authenticate(self) -> dict[str, Any]:
        """Explicitly (re)authenticate the connection with ``self.token``."""

        try:
            result = await self.sio.call(
                "authenticate", self.token, timeout=self.ack_timeout
            )
        except socketio.exceptions.TimeoutError as exc:
            msg = "Relay did not answer the authentication request"
            raise RelaySendError(msg) from exc
        if not isinstance(result, dict) or not result.get("success"):
            msg = "Authentication failed"
            raise RelaySendError(msg)
        return result

    async def send_private_message(
        self,
        recipient_id: int,
        subject: str,
        content: str,
    ) -> int:
        """Send through the relay and return the stored message id.

        Raises ``RelaySendError`` when no acknowledgement arrives within
        ``ack_timeout`` seconds or the relay reports a failure.
        """

        payload = {"recipientId": recipient_id, "subject": subject, "content": content}
        try:
            ack = await self.sio.call(
                "private-message", payload, timeout=self.ack_timeout
            )
        except socketio.exceptions.TimeoutError as exc:
            logger.warning(
                "No ack for private message to user %s within %ss",
                recipient_id,
                self.ack_timeout,
            )
            msg = f"No acknowledgement within {self.ack_timeout} seconds"
            raise RelaySendError(msg) from exc

        if not isinstance(ack, dict) or not ack.get("success"):
            reason = ack.get("message") if isinstance(ack, dict) else None
            raise RelaySendError(reason or "Failed to send message")
        return ack["messageId"]
