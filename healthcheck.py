#!/usr/bin/env python3
"""Health check script for the NVIDIA stock watcher container."""

from __future__ import annotations

from nvidia_stock_watcher.healthcheck import main

if __name__ == "__main__":
    main()
