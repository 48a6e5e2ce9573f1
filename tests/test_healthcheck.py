from unittest.mock import MagicMock

import pytest
import redis

from nvidia_stock_watcher import healthcheck
from nvidia_stock_watcher.config import Config


def test_missing_timestamp_is_healthy(config):
    assert healthcheck.check_last_fetch_time(config) is True


def test_recent_fetch_is_healthy(config, tmp_path):
    (tmp_path / ".last_fetch_timestamp").write_text("1000.0", encoding="utf-8")
    assert healthcheck.check_last_fetch_time(config, now=1100.0) is True


def test_stale_fetch_is_unhealthy(config, tmp_path):
    (tmp_path / ".last_fetch_timestamp").write_text("1000.0", encoding="utf-8")
    assert healthcheck.check_last_fetch_time(config, now=1000.0 + 901) is False


def test_garbled_timestamp_is_unhealthy(config, tmp_path):
    (tmp_path / ".last_fetch_timestamp").write_text("yesterday", encoding="utf-8")
    assert healthcheck.check_last_fetch_time(config) is False


def test_redis_only_checked_for_redis_backend(config, monkeypatch):
    check = MagicMock(return_value=True)
    monkeypatch.setattr(healthcheck, "check_redis_connection", check)
    assert [name for name, _ in healthcheck.run_checks(config)] == ["last_fetch_time"]
    check.assert_not_called()


def test_redis_ping_failure(monkeypatch):
    client = MagicMock()
    client.ping.side_effect = redis.ConnectionError("refused")
    monkeypatch.setattr(healthcheck.redis, "Redis", MagicMock(return_value=client))
    assert healthcheck.check_redis_connection(Config()) is False


def test_main_exit_codes(config, monkeypatch):
    monkeypatch.setattr(healthcheck.Config, "from_env", classmethod(lambda cls: config))
    with pytest.raises(SystemExit) as exc_info:
        healthcheck.main()
    assert exc_info.value.code == 0

    monkeypatch.setattr(healthcheck, "check_last_fetch_time", lambda cfg: False)
    with pytest.raises(SystemExit) as exc_info:
        healthcheck.main()
    assert exc_info.value.code == 1
