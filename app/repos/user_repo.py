from __future__ import annotations

from typing import Protocol

from app.models.user import User
from app.repos.errors import DuplicateKeyError


class UserRepo(Protocol):
    async def get_by_email(self, email: str) -> User | None: ...
    async def add(self, user: User) -> None: ...


class InMemoryUserRepo:
    def __init__(self) -> None:
        self._by_email: dict[str, User] = {}

    async def get_by_email(self, email: str) -> User | None:
        return self._by_email.get(email)

    async def add(self, user: User) -> None:
        # Check and insert run without yielding, so this is atomic on the loop.
        if user.email in self._by_email:
            raise DuplicateKeyError("users.email")
        self._by_email[user.email] = user
