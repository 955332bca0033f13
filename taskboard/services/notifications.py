from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)

DESTRUCTIVE = "destructive"


class Notifier(Protocol):
    def notify(self, title: str, description: str, variant: str = "default") -> None:
        ...


class LoggingNotifier:
    """Fire-and-forget toast surface that writes to the log."""

    def notify(self, title: str, description: str, variant: str = "default") -> None:
        level = logging.WARNING if variant == DESTRUCTIVE else logging.INFO
        logger.log(level, "%s: %s", title, description)
