from __future__ import annotations


class TaskboardError(Exception):
    pass


class AuthError(TaskboardError):
    pass


class InvalidCredentials(AuthError):
    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class EmailAlreadyExists(AuthError):
    def __init__(self, email: str) -> None:
        super().__init__("Email already exists")
        self.email = email


class StorageCorrupt(TaskboardError):
    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Stored value for {key!r} is malformed: {reason}")
        self.key = key


class NotAuthenticated(TaskboardError):
    def __init__(self) -> None:
        super().__init__("No authenticated user")
