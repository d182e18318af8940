"""ntfy message model."""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class NtfyPriority(enum.IntEnum):
    """ntfy message priority (1 = min, 5 = max)."""

    MIN = 1
    LOW = 2
    DEFAULT = 3
    HIGH = 4
    MAX = 5


class NtfyMessage(BaseModel):
    """A push notification addressed to an ntfy topic.

    The topic is part of the request path, so it never appears in the
    JSON body produced by :meth:`to_payload`. Optional fields left at
    their empty default are omitted from the body.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    topic: str = ""
    message: str
    title: str = ""
    priority: NtfyPriority | None = None
    tags: str = ""
    click: str = ""
    actions: str = ""
    email: str = ""
    delay: str = ""
    icon: str = ""
    markdown: bool = False

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body sent to ``POST /<topic>``."""
        body: dict[str, Any] = {"message": self.message}
        for name in ("title", "tags", "click", "actions", "email", "delay", "icon"):
            value = getattr(self, name)
            if value:
                body[name] = value
        if self.priority is not None:
            body["priority"] = int(self.priority)
        if self.markdown:
            body["markdown"] = True
        return body
