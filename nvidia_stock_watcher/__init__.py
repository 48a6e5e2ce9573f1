"""Core package for the NVIDIA stock watcher application."""

__all__ = [
    "config",
    "models",
    "api_client",
    "state_manager",
    "notifier",
    "dispatch",
    "checker",
    "scheduler",
    "healthcheck",
    "cli",
]
