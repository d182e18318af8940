"""Data models for metadata records and notifications."""

from spotwatch.models._base import ImdsBaseModel, UtcTimestamp, ensure_utc
from spotwatch.models.metadata import KNOWN_ACTIONS, InterruptionNotice, RebalanceRecommendation
from spotwatch.models.notification import NtfyMessage, NtfyPriority

__all__ = [
    "ImdsBaseModel",
    "InterruptionNotice",
    "KNOWN_ACTIONS",
    "NtfyMessage",
    "NtfyPriority",
    "RebalanceRecommendation",
    "UtcTimestamp",
    "ensure_utc",
]
