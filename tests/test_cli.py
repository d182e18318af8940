"""Tests for the command line entry point and its exit codes."""

from __future__ import annotations

from typing import Any

import pytest

from spotwatch import cli
from spotwatch.config import MonitorConfig


class _RecordingRun:
    def __init__(self) -> None:
        self.calls: list[tuple[MonitorConfig, dict[str, Any]]] = []

    async def __call__(self, config: MonitorConfig, **kwargs: Any) -> list[object]:
        self.calls.append((config, kwargs))
        return []


@pytest.fixture
def fake_run(monkeypatch: pytest.MonkeyPatch) -> _RecordingRun:
    recorder = _RecordingRun()
    monkeypatch.setattr("spotwatch.cli.run_monitor", recorder)
    for key in ("NTFY_TOPIC", "SPOTWATCH_CHECK_INTERVAL", "SPOTWATCH_TOKEN_TTL"):
        monkeypatch.delenv(key, raising=False)
    return recorder


def test_missing_topic_never_starts_run_loop(fake_run: _RecordingRun, caplog: pytest.LogCaptureFixture) -> None:
    assert cli.main([]) == 1
    assert fake_run.calls == []
    assert "NTFY_TOPIC environment variable is not set" in caplog.text


def test_graceful_run_exits_zero(fake_run: _RecordingRun, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NTFY_TOPIC", "alerts")

    assert cli.main([]) == 0

    config, kwargs = fake_run.calls[0]
    assert config.topic == "alerts"
    assert kwargs == {"once": False}


def test_once_and_interval_flags(fake_run: _RecordingRun, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NTFY_TOPIC", "alerts")

    assert cli.main(["--once", "--interval", "1.5"]) == 0

    config, kwargs = fake_run.calls[0]
    assert config.check_interval == 1.5
    assert kwargs == {"once": True}


def test_startup_logs_topic(
    fake_run: _RecordingRun, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setenv("NTFY_TOPIC", "alerts")

    with caplog.at_level("INFO"):
        cli.main([])

    assert "EC2 Interruption Monitor starting..." in caplog.text
    assert "Using ntfy topic: alerts" in caplog.text
