"""Push notification delivery through an ntfy server."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Protocol

import aiohttp

from spotwatch.config import MonitorConfig
from spotwatch.exceptions import NotificationError, SpotwatchError
from spotwatch.models.notification import NtfyMessage

_logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Structural interface for sending a structured message."""

    async def send(self, message: NtfyMessage) -> None:
        ...


class NtfyNotifier:
    """Publishes :class:`NtfyMessage` objects to ``<server>/<topic>``.

    Delivery is attempted exactly once. Every failure surfaces as
    :class:`NotificationError`; deciding whether to log or stop is left to
    the caller.
    """

    def __init__(
        self,
        config: MonitorConfig,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._server = config.ntfy_server
        self._external_session = session is not None
        self._http_session = session
        self._timeout = aiohttp.ClientTimeout(total=config.notify_timeout)

    async def __aenter__(self) -> NtfyNotifier:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    def topic_url(self, topic: str) -> str:
        return f"{self._server}/{topic}"

    async def send(self, message: NtfyMessage) -> None:
        """Publish *message*.

        Raises
        ------
        NotificationError
            If the topic is empty (before any request is made), the server
            answers with status >= 400, or the request fails in transit.
        """
        topic = message.topic.strip()
        if not topic:
            raise NotificationError("topic cannot be empty")

        if self._http_session is None:
            raise SpotwatchError("Notifier not initialized. Use 'async with NtfyNotifier(...) as notifier:'")

        url = self.topic_url(topic)
        body = json.dumps(message.to_payload())
        headers = {"Content-Type": "application/json"}

        _logger.debug("POST %s title=%r", url, message.title)

        try:
            async with self._http_session.post(url, data=body, headers=headers, timeout=self._timeout) as resp:
                if resp.status >= 400:
                    text = await resp.text(errors="replace")
                    raise NotificationError(
                        f"error response from ntfy: {text}, status code: {resp.status}",
                        status_code=resp.status,
                        body=text,
                    )
        except NotificationError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise NotificationError(f"error sending notification: {exc!r}") from exc

        _logger.debug("Notification delivered to topic %s", topic)
