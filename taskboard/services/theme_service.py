from __future__ import annotations

import logging

from taskboard.domain.enums import Theme
from taskboard.infra.storage import THEME_KEY, KeyValueStore

from .notifications import LoggingNotifier, Notifier

logger = logging.getLogger(__name__)


class ThemeService:
    def __init__(self, storage: KeyValueStore, notifier: Notifier | None = None) -> None:
        self._storage = storage
        self._notifier = notifier or LoggingNotifier()
        self.theme = Theme.LIGHT

    def load(self, prefers_dark: bool = False) -> Theme:
        stored = self._storage.get(THEME_KEY)
        theme = None
        if stored is not None:
            try:
                theme = Theme(stored)
            except ValueError:
                logger.warning("Ignoring unknown stored theme %r", stored)
        self.theme = theme or (Theme.DARK if prefers_dark else Theme.LIGHT)
        return self.theme

    def toggle(self) -> Theme:
        self.theme = Theme.LIGHT if self.theme == Theme.DARK else Theme.DARK
        self._storage.set(THEME_KEY, self.theme.value)
        label = self.theme.value.capitalize()
        self._notifier.notify(f"{label} mode activated", f"You've switched to {self.theme.value} mode")
        return self.theme
