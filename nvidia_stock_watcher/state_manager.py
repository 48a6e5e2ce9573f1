"""Persistence of the last observed status of every product."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from typing import Any, Optional, Union

import redis

from .config import Config
from .models import StatusMap

logger = logging.getLogger(__name__)


def _validate(data: Any) -> StatusMap:
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    for key, value in data.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise ValueError(f"invalid entry {key!r}: {value!r}")
    return dict(data)


class JsonFileStateStore:
    """Keep the status map in a human-readable JSON file, overwritten on every save."""

    def __init__(self, path: str) -> None:
        self.path = path

    def load(self) -> StatusMap:
        if not os.path.exists(self.path):
            logger.info("No product state found at %s, starting empty", self.path)
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return _validate(json.load(f))
        except (OSError, ValueError) as exc:
            logger.error("Error loading product state from %s: %s", self.path, exc)
            return {}

    def save(self, status_map: StatusMap) -> bool:
        directory = os.path.dirname(os.path.abspath(self.path))
        tmp_path: Optional[str] = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".state-", suffix=".tmp", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(status_map, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Error saving product state to %s: %s", self.path, exc)
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            return False
        logger.info("Product state saved successfully (%s products).", len(status_map))
        return True


class RedisStateStore:
    """Keep the status map in a Redis hash."""

    def __init__(self, config: Config, client: Optional[redis.Redis] = None) -> None:
        self.key = f"{config.redis_key_prefix}status"
        if client is not None:
            self.redis_client = client
            return
        try:
            self.redis_client = redis.Redis(
                host=config.redis_host,
                port=config.redis_port,
                db=config.redis_db,
                password=config.redis_password,
                decode_responses=True,
                ssl=config.redis_ssl,
                socket_connect_timeout=3,
                socket_timeout=3,
            )
            self.redis_client.ping()
            logger.info("Connected to Redis successfully")
        except redis.RedisError as exc:
            logger.error("Failed to connect to Redis: %s", exc)
            raise

    def load(self) -> StatusMap:
        try:
            return _validate(self.redis_client.hgetall(self.key))
        except (redis.RedisError, ValueError) as exc:
            logger.error("Failed to get previous state from Redis: %s", exc)
            return {}

    def save(self, status_map: StatusMap) -> bool:
        try:
            pipe = self.redis_client.pipeline(transaction=True)
            pipe.delete(self.key)
            if status_map:
                pipe.hset(self.key, mapping=status_map)
            pipe.execute()
        except redis.RedisError as exc:
            logger.error("Failed to update state in Redis: %s", exc)
            return False
        logger.info("Product state saved to Redis (%s products).", len(status_map))
        return True


StateStore = Union[JsonFileStateStore, RedisStateStore]


def build_state_store(config: Config) -> StateStore:
    if config.state_backend == "redis":
        try:
            return RedisStateStore(config)
        except redis.RedisError as exc:
            logger.warning("Redis not available, falling back to %s: %s", config.state_file, exc)
    return JsonFileStateStore(config.state_file)
