"""Metadata endpoint checks.

Both IMDS events are handled by the same sequence: read the endpoint,
decode the record, log the detection and publish a notification. An
:class:`EndpointCheck` holds everything that differs between the two
(path, record type, message template), and :func:`run_check` is the single
implementation of the sequence.
"""

from __future__ import annotations

import enum
import json
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ValidationError

from spotwatch._constants import DEFAULT_TAGS, INTERRUPTION_PATH, REBALANCE_PATH
from spotwatch.exceptions import (
    MetadataDecodeError,
    MetadataTokenError,
    NotificationError,
    SpotwatchTransportError,
)
from spotwatch.imds import MetadataReader, TokenProvider
from spotwatch.models.metadata import InterruptionNotice, RebalanceRecommendation
from spotwatch.models.notification import NtfyMessage, NtfyPriority
from spotwatch.notifier import Notifier

_logger = logging.getLogger(__name__)


class CheckOutcome(enum.StrEnum):
    DETECTED = "detected"
    ABSENT = "absent"
    MALFORMED = "malformed"
    UNREACHABLE = "unreachable"


@dataclass(frozen=True)
class EndpointCheck:
    """Description of one metadata endpoint to watch."""

    name: str
    path: str
    model: type[BaseModel]
    title: str
    message: str
    describe: Callable[[Any], str]
    """Renders the detection details for the log line and message body."""
    priority: NtfyPriority | None = None
    tags: str = DEFAULT_TAGS

    def build_message(self, record: Any, topic: str) -> NtfyMessage:
        return NtfyMessage(
            topic=topic,
            title=self.title,
            message=f"{self.message} ({self.describe(record)})",
            priority=self.priority,
            tags=self.tags,
        )


@dataclass(frozen=True)
class CheckResult:
    check: EndpointCheck
    outcome: CheckOutcome
    record: Any = None
    notified: bool = False
    error: Exception | None = None

    @property
    def detected(self) -> bool:
        return self.outcome is CheckOutcome.DETECTED


def _format_time(value: datetime | None) -> str:
    return value.isoformat() if value is not None else "unknown"


def _describe_interruption(notice: InterruptionNotice) -> str:
    return f"action={notice.action or 'unknown'}, time={_format_time(notice.time)}"


def _describe_rebalance(recommendation: RebalanceRecommendation) -> str:
    return f"notice_time={_format_time(recommendation.notice_time)}"


INTERRUPTION_CHECK = EndpointCheck(
    name="SPOT INTERRUPTION NOTICE",
    path=INTERRUPTION_PATH,
    model=InterruptionNotice,
    title="EC2 Spot Instance Interruption",
    message="Spot instance interruption notice received",
    describe=_describe_interruption,
    priority=NtfyPriority.HIGH,
)

REBALANCE_CHECK = EndpointCheck(
    name="REBALANCE RECOMMENDATION",
    path=REBALANCE_PATH,
    model=RebalanceRecommendation,
    title="EC2 Rebalance Recommendation",
    message="Instance received rebalance recommendation",
    describe=_describe_rebalance,
)

DEFAULT_CHECKS: tuple[EndpointCheck, ...] = (INTERRUPTION_CHECK, REBALANCE_CHECK)


def decode_record(check: EndpointCheck, body: str) -> Any:
    """Decode a 200 response *body* into ``check.model``.

    Raises
    ------
    MetadataDecodeError
        If the body is not JSON or does not match the record type.
    """
    try:
        data = json.loads(body)
    except json.JSONDecodeError as exc:
        raise MetadataDecodeError(
            f"Invalid JSON from {check.path}: {body[:200]!r}",
            endpoint=check.path,
        ) from exc

    if not isinstance(data, dict):
        raise MetadataDecodeError(
            f"Expected a JSON object from {check.path}, got {type(data).__name__}",
            endpoint=check.path,
        )

    try:
        return check.model.model_validate(data)
    except ValidationError as exc:
        raise MetadataDecodeError(
            f"Unexpected payload from {check.path}: {exc.error_count()} validation error(s)",
            endpoint=check.path,
        ) from exc


async def run_check(
    check: EndpointCheck,
    token: str,
    reader: MetadataReader,
    notifier: Notifier,
    topic: str,
) -> CheckResult:
    """Read one endpoint and notify on a detection.

    Never raises for metadata or delivery problems: the outcome is returned
    and logged so the caller can move on to the next endpoint.
    """
    try:
        response = await reader.read(check.path, token)
    except SpotwatchTransportError as exc:
        _logger.debug("No %s found or error: %s", check.name.lower(), exc)
        return CheckResult(check, CheckOutcome.UNREACHABLE, error=exc)

    if not response.ok:
        _logger.debug("No %s found (HTTP %s)", check.name.lower(), response.status)
        return CheckResult(check, CheckOutcome.ABSENT)

    try:
        record = decode_record(check, response.body)
    except MetadataDecodeError as exc:
        _logger.warning("Ignoring malformed %s: %s", check.name.lower(), exc)
        return CheckResult(check, CheckOutcome.MALFORMED, error=exc)

    _logger.warning("%s: %s", check.name, check.describe(record))

    try:
        await notifier.send(check.build_message(record, topic))
    except NotificationError as exc:
        _logger.error("Failed to send ntfy notification: %s", exc)
        return CheckResult(check, CheckOutcome.DETECTED, record=record, error=exc)

    return CheckResult(check, CheckOutcome.DETECTED, record=record, notified=True)


async def poll_once(
    token_provider: TokenProvider,
    reader: MetadataReader,
    notifier: Notifier,
    topic: str,
    checks: Sequence[EndpointCheck] = DEFAULT_CHECKS,
) -> list[CheckResult]:
    """Run one poll cycle: fetch a token, then run every check in order.

    Returns an empty list when the token could not be obtained; the cycle
    is skipped in that case.
    """
    try:
        token = await token_provider.fetch_token()
    except MetadataTokenError as exc:
        _logger.error("Error getting IMDSv2 token: %s", exc)
        return []

    return [await run_check(check, token, reader, notifier, topic) for check in checks]
