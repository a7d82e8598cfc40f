from __future__ import annotations

import datetime
from dataclasses import dataclass
from uuid import UUID, uuid4

DEFAULT_ROLE = "student"


@dataclass(frozen=True, slots=True)
class User:
    id: UUID
    name: str
    email: str
    password_hash: str
    role: str
    registered_at: datetime.datetime

    @staticmethod
    def new(*, name: str, email: str, password_hash: str) -> User:
        # Self-registration always yields a student; registered_at never changes.
        return User(
            id=uuid4(),
            name=name,
            email=email,
            password_hash=password_hash,
            role=DEFAULT_ROLE,
            registered_at=datetime.datetime.now(datetime.UTC),
        )
