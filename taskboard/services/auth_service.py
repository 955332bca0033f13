from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass, replace
from typing import Callable, Optional
from urllib.parse import quote_plus

from taskboard.domain.entities import UserEntity
from taskboard.domain.errors import AuthError, EmailAlreadyExists, InvalidCredentials, StorageCorrupt
from taskboard.infra.codec import decode_user, encode_user
from taskboard.infra.storage import SESSION_KEY, KeyValueStore

from .notifications import DESTRUCTIVE, LoggingNotifier, Notifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credential:
    user: UserEntity
    password: str


MOCK_USERS: tuple[Credential, ...] = (
    Credential(
        user=UserEntity(
            id="1",
            name="Demo User",
            email="demo@example.com",
            avatar="https://ui-avatars.com/api/?name=Demo+User&background=0D8ABC&color=fff",
        ),
        password="password123",
    ),
    Credential(
        user=UserEntity(
            id="2",
            name="Admin User",
            email="admin@example.com",
            avatar="https://ui-avatars.com/api/?name=Admin+User&background=FF5733&color=fff",
        ),
        password="admin123",
    ),
)


@dataclass(frozen=True)
class AuthState:
    is_authenticated: bool = False
    user: Optional[UserEntity] = None
    loading: bool = True
    error: str | None = None


def _new_user_id() -> str:
    return uuid.uuid4().hex


class AuthService:
    """Mocked identity store.

    Credentials are checked against a fixed allow-list and the signed-in user
    (without password) is kept under the session key of the key-value store.
    The login and register calls wait ``delay`` seconds to stand in for a
    network round trip.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        notifier: Notifier | None = None,
        delay: float = 1.0,
        allow_list: tuple[Credential, ...] = MOCK_USERS,
        id_factory: Callable[[], str] = _new_user_id,
    ) -> None:
        self._storage = storage
        self._notifier = notifier or LoggingNotifier()
        self._delay = delay
        self._allow_list = allow_list
        self._id_factory = id_factory
        self.state = AuthState()

    @property
    def user(self) -> Optional[UserEntity]:
        return self.state.user

    def restore_session(self) -> AuthState:
        raw = self._storage.get(SESSION_KEY)
        if raw is None:
            self.state = AuthState(loading=False)
            return self.state
        try:
            user = decode_user(SESSION_KEY, raw)
        except StorageCorrupt as exc:
            logger.warning("Discarding stored session: %s", exc)
            self._storage.remove(SESSION_KEY)
            self.state = AuthState(loading=False)
            return self.state
        logger.info("Restored session for %s", user.email)
        self.state = AuthState(is_authenticated=True, user=user, loading=False)
        return self.state

    async def login(self, email: str, password: str) -> UserEntity:
        previous = self.state
        self.state = replace(previous, loading=True, error=None)
        try:
            await asyncio.sleep(self._delay)
            credential = next((c for c in self._allow_list if c.user.email == email), None)
            if not credential or credential.password != password:
                raise InvalidCredentials()
        except AuthError as exc:
            self._fail(previous, "Login failed", exc)
            raise

        user = credential.user
        self._authenticate(user)
        logger.info("User %s logged in", user.email)
        self._notifier.notify("Login successful", f"Welcome back, {user.name}!")
        return user

    async def register(self, name: str, email: str, password: str) -> UserEntity:
        previous = self.state
        self.state = replace(previous, loading=True, error=None)
        try:
            await asyncio.sleep(self._delay)
            if any(c.user.email == email for c in self._allow_list):
                raise EmailAlreadyExists(email)
        except AuthError as exc:
            self._fail(previous, "Registration failed", exc)
            raise

        user = UserEntity(
            id=self._id_factory(),
            name=name,
            email=email,
            avatar=f"https://ui-avatars.com/api/?name={quote_plus(name)}&background=random",
        )
        self._authenticate(user)
        logger.info("Registered user %s (%s)", user.email, user.id)
        self._notifier.notify("Registration successful", f"Welcome, {name}!")
        return user

    def logout(self) -> None:
        self._storage.remove(SESSION_KEY)
        self.state = AuthState(loading=False)
        logger.info("Logged out")
        self._notifier.notify("Logged out", "You have been logged out successfully")

    def _authenticate(self, user: UserEntity) -> None:
        self._storage.set(SESSION_KEY, encode_user(user))
        self.state = AuthState(is_authenticated=True, user=user, loading=False)

    def _fail(self, previous: AuthState, title: str, exc: AuthError) -> None:
        logger.warning("%s: %s", title, exc)
        self.state = replace(previous, loading=False, error=str(exc))
        self._notifier.notify(title, str(exc), variant=DESTRUCTIVE)
