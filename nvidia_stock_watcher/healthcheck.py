"""Health checks for the NVIDIA stock watcher container."""

from __future__ import annotations

import os
import sys
import time
from typing import List, Optional, Tuple

import redis

from .config import Config


def check_redis_connection(config: Config) -> bool:
    """Check if Redis connection is working."""
    try:
        r = redis.Redis(
            host=config.redis_host,
            port=config.redis_port,
            db=config.redis_db,
            ssl=config.redis_ssl,
            password=config.redis_password,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        r.ping()
        return True
    except redis.RedisError as e:
        print(f"Redis health check failed: {e}", file=sys.stderr)
        return False


def check_last_fetch_time(config: Config, now: Optional[float] = None) -> bool:
    """Check if products were fetched within ``healthcheck_interval`` seconds."""
    timestamp_file = config.last_fetch_file

    # The watcher creates the file after its first successful fetch
    if not os.path.exists(timestamp_file):
        print("No previous fetch timestamp found (first run), considering healthy", file=sys.stderr)
        return True

    try:
        with open(timestamp_file, "r", encoding="utf-8") as f:
            last_fetch_time = float(f.read().strip())
    except (OSError, ValueError) as e:
        print(f"Error checking last fetch time: {e}", file=sys.stderr)
        return False

    current_time = time.time() if now is None else now
    time_diff = current_time - last_fetch_time
    max_age = config.healthcheck_interval

    if time_diff > max_age:
        print(f"❌ Last product fetch was {time_diff:.0f} seconds ago (> {max_age} seconds)", file=sys.stderr)
        return False

    print(f"✅ Last product fetch was {time_diff:.0f} seconds ago", file=sys.stderr)
    return True


def run_checks(config: Config) -> List[Tuple[str, bool]]:
    checks = [("last_fetch_time", check_last_fetch_time(config))]
    if config.state_backend == "redis":
        checks.append(("redis", check_redis_connection(config)))
    return checks


def main() -> None:
    """Run health checks."""
    try:
        config = Config.from_env()
    except ValueError as e:
        print(f"❌ Health check failed: invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    checks = run_checks(config)
    if all(result for _, result in checks):
        print("✅ Health check passed")
        sys.exit(0)

    failed_checks = [name for name, result in checks if not result]
    print(f"❌ Health check failed: {', '.join(failed_checks)}", file=sys.stderr)
    sys.exit(1)
