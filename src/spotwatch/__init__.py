"""spotwatch - EC2 spot interruption and rebalance alerts over ntfy."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("spotwatch")
except PackageNotFoundError:
    __version__ = "0+local"
from spotwatch.checks import (
    DEFAULT_CHECKS,
    INTERRUPTION_CHECK,
    REBALANCE_CHECK,
    CheckOutcome,
    CheckResult,
    EndpointCheck,
    poll_once,
    run_check,
)
from spotwatch.config import MonitorConfig
from spotwatch.exceptions import (
    MetadataDecodeError,
    MetadataTokenError,
    NotificationError,
    SpotwatchConfigError,
    SpotwatchError,
    SpotwatchTransportError,
)
from spotwatch.imds import ImdsClient, MetadataReader, MetadataResponse, TokenProvider
from spotwatch.models import InterruptionNotice, NtfyMessage, NtfyPriority, RebalanceRecommendation
from spotwatch.monitor import IntervalTicker, Monitor, MonitorState, ShutdownSignal, Ticker, run_monitor
from spotwatch.notifier import Notifier, NtfyNotifier

__all__ = [
    "__version__",
    "CheckOutcome",
    "CheckResult",
    "DEFAULT_CHECKS",
    "EndpointCheck",
    "INTERRUPTION_CHECK",
    "ImdsClient",
    "IntervalTicker",
    "InterruptionNotice",
    "MetadataDecodeError",
    "MetadataReader",
    "MetadataResponse",
    "MetadataTokenError",
    "Monitor",
    "MonitorConfig",
    "MonitorState",
    "NotificationError",
    "Notifier",
    "NtfyMessage",
    "NtfyNotifier",
    "NtfyPriority",
    "REBALANCE_CHECK",
    "RebalanceRecommendation",
    "ShutdownSignal",
    "SpotwatchConfigError",
    "SpotwatchError",
    "SpotwatchTransportError",
    "Ticker",
    "TokenProvider",
    "poll_once",
    "run_check",
    "run_monitor",
]
