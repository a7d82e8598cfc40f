from __future__ import annotations

import logging
import re

from app.models.user import User
from app.repos.errors import DuplicateKeyError
from app.repos.user_repo import UserRepo
from app.services import password_service
from app.services.errors import ConflictError, InvalidInputError

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def register_user(repo: UserRepo, name: str, email: str, password: str) -> User:
    email = normalize_email(email)
    name = name.strip()

    if not name:
        raise InvalidInputError("name is required")
    if not _EMAIL_RE.match(email):
        raise InvalidInputError("invalid email address")
    if not password:
        raise InvalidInputError("password is required")

    if await repo.get_by_email(email) is not None:
        logger.warning("Rejected duplicate registration email=%s", email)
        raise ConflictError("User already exists")

    user = User.new(
        name=name,
        email=email,
        password_hash=password_service.hash_password(password),
    )

    try:
        await repo.add(user)
    except DuplicateKeyError:
        # Lost the race to a concurrent registration for the same email.
        logger.warning("Duplicate registration caught by store email=%s", email)
        raise ConflictError("User already exists") from None

    logger.info("User registered user_id=%s email=%s", user.id, email)
    return user
