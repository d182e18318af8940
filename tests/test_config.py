from __future__ import annotations

import pytest

from spotwatch.config import MonitorConfig
from spotwatch.exceptions import SpotwatchConfigError

_ENV_KEYS = (
    "NTFY_TOPIC",
    "NTFY_SERVER",
    "SPOTWATCH_IMDS_URL",
    "SPOTWATCH_CHECK_INTERVAL",
    "SPOTWATCH_TOKEN_TTL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_from_topic_only(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NTFY_TOPIC", "my-spot-alerts")

    config = MonitorConfig.from_env()

    assert config.topic == "my-spot-alerts"
    assert config.ntfy_server == "https://ntfy.sh"
    assert config.imds_base_url == "http://169.254.169.254"
    assert config.check_interval == 5.0
    assert config.token_ttl == 21600
    assert config.imds_timeout == 5.0
    assert config.notify_timeout == 10.0


def test_missing_topic_is_fatal() -> None:
    with pytest.raises(SpotwatchConfigError, match="NTFY_TOPIC"):
        MonitorConfig.from_env()


def test_blank_topic_is_fatal(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NTFY_TOPIC", "   ")
    with pytest.raises(SpotwatchConfigError):
        MonitorConfig.from_env()


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NTFY_TOPIC", "t")
    monkeypatch.setenv("NTFY_SERVER", "https://ntfy.example.com/")
    monkeypatch.setenv("SPOTWATCH_IMDS_URL", "http://127.0.0.1:1338/")
    monkeypatch.setenv("SPOTWATCH_CHECK_INTERVAL", "2.5")
    monkeypatch.setenv("SPOTWATCH_TOKEN_TTL", "60")

    config = MonitorConfig.from_env()

    assert config.ntfy_server == "https://ntfy.example.com"
    assert config.imds_base_url == "http://127.0.0.1:1338"
    assert config.check_interval == 2.5
    assert config.token_ttl == 60


def test_keyword_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NTFY_TOPIC", "from-env")
    monkeypatch.setenv("SPOTWATCH_CHECK_INTERVAL", "not-a-number")

    config = MonitorConfig.from_env(topic="explicit", check_interval=1.0)

    assert config.topic == "explicit"
    assert config.check_interval == 1.0


def test_malformed_number_is_config_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NTFY_TOPIC", "t")
    monkeypatch.setenv("SPOTWATCH_TOKEN_TTL", "six hours")
    with pytest.raises(SpotwatchConfigError, match="SPOTWATCH_TOKEN_TTL"):
        MonitorConfig.from_env()


def test_non_positive_interval_rejected() -> None:
    with pytest.raises(SpotwatchConfigError, match="check_interval"):
        MonitorConfig(topic="t", check_interval=0)
