"""Store wiring for the routers.

``get_repos`` is the single place that decides which repositories a
request talks to:

- DATABASE_URL set: PostgreSQL repos sharing one request-scoped session,
  so everything a handler writes commits or rolls back together.
- otherwise: the process-wide in-memory repos below.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from dataclasses import dataclass
from uuid import UUID

from fastapi import HTTPException, status

from app.db import engine as db_engine
from app.repos.course_repo import CourseRepo, InMemoryCourseRepo
from app.repos.enrollment_repo import EnrollmentRepo, InMemoryEnrollmentRepo
from app.repos.pg_course_repo import PgCourseRepo
from app.repos.pg_enrollment_repo import PgEnrollmentRepo
from app.repos.pg_submission_repo import PgSubmissionRepo
from app.repos.pg_user_repo import PgUserRepo
from app.repos.submission_repo import InMemorySubmissionRepo, SubmissionRepo
from app.repos.user_repo import InMemoryUserRepo, UserRepo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Repos:
    courses: CourseRepo
    users: UserRepo
    enrollments: EnrollmentRepo
    submissions: SubmissionRepo


def new_in_memory_repos() -> Repos:
    return Repos(
        courses=InMemoryCourseRepo(),
        users=InMemoryUserRepo(),
        enrollments=InMemoryEnrollmentRepo(),
        submissions=InMemorySubmissionRepo(),
    )


# Module-level singleton used when no database is configured.
in_memory_repos = new_in_memory_repos()


async def get_repos() -> AsyncGenerator[Repos, None]:
    if db_engine.async_session_factory is None:
        yield in_memory_repos
        return

    async with db_engine.session_scope() as session:
        yield Repos(
            courses=PgCourseRepo(session),
            users=PgUserRepo(session),
            enrollments=PgEnrollmentRepo(session),
            submissions=PgSubmissionRepo(session),
        )


def parse_id(raw: str, entity: str) -> UUID:
    """Path ids that are not UUIDs cannot name a stored record: 404."""
    try:
        return UUID(raw)
    except ValueError:
        logger.debug("Malformed %s id=%r", entity, raw)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": f"{entity} not found"},
        ) from None
