"""Application configuration and logging setup."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

CATALOG_URL = "https://api.nvidia.partners/edge/product/search"
TELEGRAM_API_URL = "https://api.telegram.org/bot{token}/sendMessage"

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

HEADERS: Dict[str, str] = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/132.0.0.0 Safari/537.36"
    ),
    "Accept": "application/json, text/plain, */*",
    "Referer": "https://marketplace.nvidia.com/",
    "Origin": "https://marketplace.nvidia.com",
}


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes")


def _non_negative(env: Mapping[str, str], name: str, default: str) -> float:
    value = float(env.get(name, default))
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}")
    return value


@dataclass(frozen=True)
class Config:
    """Configuration values, built once at startup and handed to each component."""

    telegram_bot_token: Optional[str] = None
    telegram_chat_id: Optional[str] = None
    catalog_url: str = CATALOG_URL
    locale: str = "fr-fr"
    page_limit: int = 12
    request_timeout: float = 10.0
    check_interval: float = 30.0
    message_interval: float = 2.0
    state_backend: str = "file"
    state_file: str = "product_state.json"
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: Optional[str] = None
    redis_ssl: bool = False
    redis_key_prefix: str = "nvidia:"
    last_fetch_file: str = ".last_fetch_timestamp"
    healthcheck_interval: int = 900
    log_level: str = "INFO"
    log_dir: str = "."

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        """Build a config from the process environment (after loading ``.env``)."""
        if environ is None:
            load_dotenv()
            environ = os.environ
        env = environ

        backend = env.get("STATE_BACKEND", "file").strip().lower()
        if backend not in ("file", "redis"):
            raise ValueError(f"STATE_BACKEND must be 'file' or 'redis', got {backend!r}")

        request_timeout = float(env.get("REQUEST_TIMEOUT", "10"))
        if request_timeout <= 0:
            raise ValueError(f"REQUEST_TIMEOUT must be greater than 0, got {request_timeout}")
        check_interval = _non_negative(env, "CHECK_INTERVAL", "30")
        message_interval = _non_negative(env, "MESSAGE_INTERVAL", "2")

        return cls(
            telegram_bot_token=env.get("TELEGRAM_BOT_TOKEN") or None,
            telegram_chat_id=(
                env.get("TELEGRAM_CHAT_ID") or env.get("TELEGRAM_CHANNEL_ID") or None
            ),
            locale=env.get("CATALOG_LOCALE", "fr-fr"),
            page_limit=int(env.get("CATALOG_PAGE_LIMIT", "12")),
            request_timeout=request_timeout,
            check_interval=check_interval,
            message_interval=message_interval,
            state_backend=backend,
            state_file=env.get("STATE_FILE", "product_state.json"),
            redis_host=env.get("REDIS_HOST", "localhost"),
            redis_port=int(env.get("REDIS_PORT", "6379")),
            redis_db=int(env.get("REDIS_DB", "0")),
            redis_password=env.get("REDIS_PASSWORD") or None,
            redis_ssl=_as_bool(env.get("REDIS_SSL", "false")),
            redis_key_prefix=env.get("REDIS_KEY_PREFIX", "nvidia:"),
            last_fetch_file=env.get("LAST_FETCH_FILE", ".last_fetch_timestamp"),
            healthcheck_interval=int(env.get("HEALTHCHECK_INTERVAL", "900")),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            log_dir=env.get("LOG_DIR", "."),
        )

    @property
    def catalog_params(self) -> Dict[str, str]:
        return {"locale": self.locale, "page": "1", "limit": str(self.page_limit)}

    @property
    def telegram_configured(self) -> bool:
        return bool(self.telegram_bot_token and self.telegram_chat_id)


def configure_logging(config: Config) -> None:
    """Log to the console plus ``error.log`` (errors only) and ``combined.log``."""
    level = getattr(logging, config.log_level, logging.INFO)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    file_error: Optional[OSError] = None
    try:
        os.makedirs(config.log_dir, exist_ok=True)
        error_handler = logging.FileHandler(os.path.join(config.log_dir, "error.log"))
        error_handler.setLevel(logging.ERROR)
        handlers.append(error_handler)
        handlers.append(logging.FileHandler(os.path.join(config.log_dir, "combined.log")))
    except OSError as exc:
        file_error = exc
        for handler in handlers[1:]:
            handler.close()
        del handlers[1:]

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)
    if file_error is not None:
        logger.warning("File logging disabled, could not open %s: %s", config.log_dir, file_error)
