"""The polling run loop.

The loop waits on two things at once: the next timer tick and a shutdown
request. Both are passed in (:class:`Ticker`, :class:`ShutdownSignal`) so
tests can drive the loop deterministically with fakes.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import signal
from collections.abc import Sequence
from typing import Protocol

from spotwatch.checks import DEFAULT_CHECKS, CheckResult, EndpointCheck, poll_once
from spotwatch.config import MonitorConfig
from spotwatch.exceptions import SpotwatchError
from spotwatch.imds import ImdsClient, MetadataReader, TokenProvider
from spotwatch.notifier import Notifier, NtfyNotifier

_logger = logging.getLogger(__name__)

SHUTDOWN_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM)


class MonitorState(enum.StrEnum):
    WAITING_FOR_TICK = "waiting_for_tick"
    POLLING = "polling"
    SHUTTING_DOWN = "shutting_down"


class Ticker(Protocol):
    """Source of timer fires for the run loop."""

    async def tick(self) -> None:
        """Return at the next timer fire."""
        ...


class IntervalTicker:
    """Fires every *interval* seconds, measured from the first call.

    Ticks missed while the caller was busy are dropped instead of being
    delivered in a burst.
    """

    def __init__(self, interval: float) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._interval = interval
        self._next: float | None = None

    @property
    def interval(self) -> float:
        return self._interval

    async def tick(self) -> None:
        loop = asyncio.get_running_loop()
        now = loop.time()
        if self._next is None:
            self._next = now + self._interval
        elif self._next <= now:
            missed = int((now - self._next) // self._interval) + 1
            self._next += missed * self._interval
        await asyncio.sleep(self._next - now)
        self._next += self._interval


class ShutdownSignal:
    """Shutdown request shared between signal handlers and the run loop."""

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._signum: int | None = None

    @property
    def is_set(self) -> bool:
        return self._event.is_set()

    @property
    def signum(self) -> int | None:
        return self._signum

    @property
    def name(self) -> str:
        if self._signum is None:
            return "none"
        try:
            return signal.Signals(self._signum).name
        except ValueError:
            return str(self._signum)

    def trigger(self, signum: int = signal.SIGTERM) -> None:
        # First signal wins; later ones only repeat the request.
        if self._signum is None:
            self._signum = int(signum)
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()

    def install(self, loop: asyncio.AbstractEventLoop) -> None:
        """Route SIGINT and SIGTERM to :meth:`trigger`."""
        for sig in SHUTDOWN_SIGNALS:
            loop.add_signal_handler(sig, self.trigger, sig)

    def uninstall(self, loop: asyncio.AbstractEventLoop) -> None:
        for sig in SHUTDOWN_SIGNALS:
            loop.remove_signal_handler(sig)


class Monitor:
    """Runs poll cycles on each tick until shutdown is requested."""

    def __init__(
        self,
        topic: str,
        *,
        token_provider: TokenProvider,
        reader: MetadataReader,
        notifier: Notifier,
        ticker: Ticker,
        shutdown: ShutdownSignal,
        checks: Sequence[EndpointCheck] = DEFAULT_CHECKS,
    ) -> None:
        self._topic = topic
        self._token_provider = token_provider
        self._reader = reader
        self._notifier = notifier
        self._ticker = ticker
        self._shutdown = shutdown
        self._checks = tuple(checks)
        self._state = MonitorState.WAITING_FOR_TICK
        self._cycles = 0
        self.last_results: list[CheckResult] = []

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def cycles(self) -> int:
        """Number of poll cycles started so far."""
        return self._cycles

    async def poll(self) -> list[CheckResult]:
        """Run a single poll cycle."""
        self._state = MonitorState.POLLING
        self._cycles += 1
        try:
            self.last_results = await poll_once(
                self._token_provider,
                self._reader,
                self._notifier,
                self._topic,
                self._checks,
            )
        except SpotwatchError as exc:
            _logger.error("Poll cycle %d failed: %s", self._cycles, exc)
            self.last_results = []
        finally:
            if self._state is MonitorState.POLLING:
                self._state = MonitorState.WAITING_FOR_TICK
        return self.last_results

    async def _wait_for_tick(self) -> bool:
        """Wait for the next tick or shutdown; return ``True`` on a tick."""
        if self._shutdown.is_set:
            return False

        tick_task = asyncio.ensure_future(self._ticker.tick())
        stop_task = asyncio.ensure_future(self._shutdown.wait())
        try:
            await asyncio.wait({tick_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (tick_task, stop_task):
                if not task.done():
                    task.cancel()
            await asyncio.gather(tick_task, stop_task, return_exceptions=True)

        # Shutdown wins when both arms are ready.
        if self._shutdown.is_set:
            return False
        # Surface ticker failures instead of spinning.
        tick_task.result()
        return True

    async def run(self) -> None:
        """Poll on every tick until a shutdown is requested."""
        self._state = MonitorState.WAITING_FOR_TICK
        while await self._wait_for_tick():
            await self.poll()

        self._state = MonitorState.SHUTTING_DOWN
        _logger.info("Received signal %s, shutting down", self._shutdown.name)


async def run_monitor(
    config: MonitorConfig,
    *,
    shutdown: ShutdownSignal | None = None,
    ticker: Ticker | None = None,
    once: bool = False,
) -> list[CheckResult]:
    """Build the aiohttp clients from *config* and run the monitor.

    When no *shutdown* source is given, SIGINT and SIGTERM handlers are
    installed on the running loop for the lifetime of the call. With
    *once*, a single poll cycle runs immediately and its results are
    returned.
    """
    owns_signals = shutdown is None
    if shutdown is None:
        shutdown = ShutdownSignal()
    if ticker is None:
        ticker = IntervalTicker(config.check_interval)

    loop = asyncio.get_running_loop()
    if owns_signals:
        shutdown.install(loop)

    try:
        async with ImdsClient(config) as imds, NtfyNotifier(config) as notifier:
            monitor = Monitor(
                config.topic,
                token_provider=imds,
                reader=imds,
                notifier=notifier,
                ticker=ticker,
                shutdown=shutdown,
            )
            if once:
                return await monitor.poll()
            await monitor.run()
            return monitor.last_results
    finally:
        if owns_signals:
            shutdown.uninstall(loop)
