"""Records published by the instance metadata service.

A 200 answer from either endpoint means the event exists, so fields that
are missing from the body decode to empty values instead of rejecting the
record. Only bodies that cannot be read as the record at all (wrong JSON
type, unparseable timestamp) fail validation.
"""

from __future__ import annotations

from pydantic import field_validator

from spotwatch.models._base import ImdsBaseModel, UtcTimestamp

#: Actions the spot service announces in ``spot/instance-action``.
KNOWN_ACTIONS: frozenset[str] = frozenset({"terminate", "stop", "hibernate"})


class InterruptionNotice(ImdsBaseModel):
    """Spot instance interruption notice.

    Parameters
    ----------
    action : str
        What will happen to the instance (``terminate``, ``stop`` or
        ``hibernate``). Unknown actions are kept verbatim; ``""`` when the
        notice does not say.
    time : datetime or None
        When the action takes place (UTC).
    """

    action: str = ""
    time: UtcTimestamp | None = None

    @field_validator("action")
    @classmethod
    def _normalize_action(cls, value: str) -> str:
        return value.strip().lower()

    @property
    def is_known_action(self) -> bool:
        return self.action in KNOWN_ACTIONS


class RebalanceRecommendation(ImdsBaseModel):
    """Rebalance recommendation for the instance."""

    notice_time: UtcTimestamp | None = None
    """When the recommendation was emitted (UTC)."""
