"""Command-line interface for the NVIDIA stock watcher."""

from __future__ import annotations

import logging
import signal
import threading
from types import FrameType
from typing import Optional

import click

from .api_client import NvidiaAPIClient
from .checker import StockMonitor
from .config import Config, configure_logging
from .dispatch import DispatchQueue, Pacer
from .notifier import TelegramNotifier
from .scheduler import Scheduler
from .state_manager import build_state_store

logger = logging.getLogger(__name__)


def build_scheduler(config: Config, dry_run: bool = False) -> Scheduler:
    stop_event = threading.Event()
    notifier = TelegramNotifier(config, dry_run=dry_run)
    dispatcher = DispatchQueue(notifier, Pacer(config.message_interval, stop_event))
    monitor = StockMonitor(
        NvidiaAPIClient(config),
        build_state_store(config),
        dispatcher,
        last_fetch_file=config.last_fetch_file,
    )
    return Scheduler(monitor, config.check_interval, stop_event)


def _install_signal_handlers(scheduler: Scheduler) -> None:
    def _handle(signum: int, _: Optional[FrameType]) -> None:
        logger.info("Received signal %s, shutting down", signum)
        scheduler.stop()

    signal.signal(signal.SIGINT, _handle)
    signal.signal(signal.SIGTERM, _handle)


@click.command()
@click.option("--once", is_flag=True, help="Run a single stock check and exit.")
@click.option(
    "--no-announce",
    is_flag=True,
    help="Skip sending the status of every product at startup.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Print notifications to terminal instead of sending to Telegram.",
)
@click.option(
    "--interval",
    type=click.FloatRange(min=0),
    default=None,
    help="Seconds to wait between checks (overrides CHECK_INTERVAL).",
)
def main(once: bool, no_announce: bool, dry_run: bool, interval: Optional[float]) -> None:
    try:
        config = Config.from_env()
    except ValueError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}") from exc
    configure_logging(config)

    if dry_run:
        logger.info("DRY RUN mode enabled - notifications will be printed to terminal")
    scheduler = build_scheduler(config, dry_run=dry_run)
    if interval is not None:
        scheduler.interval = interval

    try:
        if once:
            scheduler.run_once()
            return

        logger.info("🔍 Starting NVIDIA stock checker...")
        _install_signal_handlers(scheduler)
        scheduler.run(announce=not no_announce)
    finally:
        scheduler.close()
