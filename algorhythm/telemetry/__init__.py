"""Telemetry package: structured logging and request correlation."""

from __future__ import annotations

from algorhythm.telemetry.logging import (
    RequestIdMiddleware,
    UnhandledErrorMiddleware,
    configure_logging,
)

__all__ = [
    "RequestIdMiddleware",
    "UnhandledErrorMiddleware",
    "configure_logging",
]
