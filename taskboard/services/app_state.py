from __future__ import annotations

import logging

from taskboard.domain.entities import UserEntity
from taskboard.infra.storage import KeyValueStore

from .auth_service import AuthService
from .notifications import LoggingNotifier, Notifier
from .task_service import TaskService
from .theme_service import ThemeService

logger = logging.getLogger(__name__)


class AppState:
    """Holds the services of one running client and keeps them in step.

    The task store always shows the list of whichever user the identity
    store has signed in, so every session change goes through here.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        notifier: Notifier | None = None,
        auth_delay: float = 1.0,
        auth: AuthService | None = None,
        tasks: TaskService | None = None,
    ) -> None:
        notifier = notifier or LoggingNotifier()
        self.auth = auth or AuthService(storage, notifier, delay=auth_delay)
        self.tasks = tasks or TaskService(storage, notifier)
        self.theme = ThemeService(storage, notifier)

    def start(self, prefers_dark: bool = False) -> None:
        self.theme.load(prefers_dark)
        state = self.auth.restore_session()
        self.tasks.switch_user(state.user)

    async def login(self, email: str, password: str) -> UserEntity:
        user = await self.auth.login(email, password)
        self.tasks.switch_user(user)
        return user

    async def register(self, name: str, email: str, password: str) -> UserEntity:
        user = await self.auth.register(name, email, password)
        self.tasks.switch_user(user)
        return user

    def logout(self) -> None:
        self.auth.logout()
        self.tasks.switch_user(None)
