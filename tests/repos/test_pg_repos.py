"""PostgreSQL repositories against a live database.

The rest of the suite runs on the in-memory repos.  These tests exercise
the SQLAlchemy implementations, including the unique constraints that
keep concurrent registrations and enrollments from producing duplicates.

Prerequisites:
  1. Start a throwaway PostgreSQL:
       docker run --rm --name coursemaster-pg -p 5432:5432 \
         -e POSTGRES_USER=cm -e POSTGRES_PASSWORD=cm -e POSTGRES_DB=cm postgres:16

  2. Run only these tests:
       TEST_DATABASE_URL=postgresql+asyncpg://cm:cm@localhost:5432/cm \
         pytest -m postgres -v

The tables are dropped and recreated for every test.
"""

from __future__ import annotations

import asyncio
import os
import uuid
from collections.abc import Awaitable, Callable

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import app.db.tables  # noqa: F401  (registers tables on Base.metadata)
from app.db.engine import Base
from app.models.course import Course, CourseAssignment
from app.models.enrollment import CompletionStatus, Enrollment
from app.models.user import User
from app.repos.errors import DuplicateKeyError
from app.repos.pg_course_repo import PgCourseRepo
from app.repos.pg_enrollment_repo import PgEnrollmentRepo
from app.repos.pg_submission_repo import PgSubmissionRepo
from app.repos.pg_user_repo import PgUserRepo
from app.services import enrollment_service, submission_service
from app.services.errors import ConflictError

DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "")

pytestmark = [
    pytest.mark.postgres,
    pytest.mark.skipif(not DATABASE_URL, reason="TEST_DATABASE_URL is not set"),
]


def _run(scenario: Callable[[AsyncSession], Awaitable[None]]) -> None:
    async def _main() -> None:
        engine = create_async_engine(DATABASE_URL)
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.drop_all)
                await conn.run_sync(Base.metadata.create_all)
            factory = async_sessionmaker(engine, expire_on_commit=False)
            async with factory() as session:
                await scenario(session)
        finally:
            await engine.dispose()

    asyncio.run(_main())


def _user(email: str) -> User:
    return User.new(name="Student", email=email, password_hash="argon2-hash")


# ---- users ----


def test_duplicate_email_raises_and_keeps_transaction_usable() -> None:
    async def scenario(session: AsyncSession) -> None:
        repo = PgUserRepo(session)
        first = _user("dup@example.com")
        await repo.add(first)

        with pytest.raises(DuplicateKeyError):
            await repo.add(_user("dup@example.com"))

        # Only the savepoint rolled back; the first insert survives.
        await repo.add(_user("other@example.com"))
        await session.commit()

        found = await repo.get_by_email("dup@example.com")
        assert found is not None
        assert found.id == first.id

    _run(scenario)


# ---- enrollments ----


def test_duplicate_enrollment_raises_duplicate_key() -> None:
    async def scenario(session: AsyncSession) -> None:
        repo = PgEnrollmentRepo(session)
        course_id = uuid.uuid4()
        await repo.add(Enrollment.new(email="s@example.com", course_id=course_id))

        with pytest.raises(DuplicateKeyError):
            await repo.add(Enrollment.new(email="s@example.com", course_id=course_id))

        await repo.add(Enrollment.new(email="s@example.com", course_id=uuid.uuid4()))
        await session.commit()
        assert len(await repo.list_by_email("s@example.com")) == 2

    _run(scenario)


def test_enroll_service_conflict_on_postgres() -> None:
    async def scenario(session: AsyncSession) -> None:
        enrollments = PgEnrollmentRepo(session)
        courses = PgCourseRepo(session)
        course = Course.new(title="SQL Basics")
        await courses.add(course)

        created = await enrollment_service.enroll(
            enrollments, courses, email="S@Example.com", course_id=course.id
        )
        assert created.course_title == "SQL Basics"

        with pytest.raises(ConflictError):
            await enrollment_service.enroll(
                enrollments, courses, email="s@example.com", course_id=course.id
            )
        assert await enrollment_service.check_enrollment(
            enrollments, "s@example.com", course.id
        )

    _run(scenario)


def test_status_update_persists() -> None:
    async def scenario(session: AsyncSession) -> None:
        repo = PgEnrollmentRepo(session)
        e = Enrollment.new(
            email="s@example.com", course_id=uuid.uuid4(), transaction_id="TX"
        )
        await repo.add(e)

        approved = await enrollment_service.approve(repo, e.id, "TX")
        await session.commit()

        stored = await repo.get_by_id(e.id)
        assert stored is not None
        assert stored.status == approved.status
        ghost = Enrollment.new(email="x@example.com", course_id=uuid.uuid4())
        assert await repo.update(ghost) is False

    _run(scenario)


# ---- courses ----


def test_course_roundtrip_update_and_delete() -> None:
    async def scenario(session: AsyncSession) -> None:
        repo = PgCourseRepo(session)
        course = Course.new(
            title="Go",
            lessons=("https://v/1", "https://v/2"),
            assignments=(CourseAssignment("Week 1", "Build a CLI"),),
        )
        await repo.add(course)

        loaded = await repo.get_by_id(course.id)
        assert loaded is not None
        assert loaded.lessons == ("https://v/1", "https://v/2")
        assert loaded.assignments[0].link is None

        updated = await repo.update(
            course.id,
            {
                "price": 15.0,
                "assignments": (CourseAssignment("W2", "Tests", "https://x"),),
            },
        )
        assert updated is not None
        assert updated.price == 15.0
        assert updated.title == "Go"
        assert updated.assignments[0].link == "https://x"

        missing = uuid.uuid4()
        assert [c.id for c in await repo.get_many([missing, course.id])] == [course.id]

        deleted = await repo.delete(course.id)
        assert deleted is not None
        assert await repo.get_by_id(course.id) is None
        assert await repo.delete(course.id) is None

    _run(scenario)


# ---- submissions ----


def test_mark_complete_updates_both_rows() -> None:
    async def scenario(session: AsyncSession) -> None:
        enrollments = PgEnrollmentRepo(session)
        submissions = PgSubmissionRepo(session)
        e = Enrollment.new(email="s@example.com", course_id=uuid.uuid4())
        await enrollments.add(e)
        sub = await submission_service.submit(
            submissions,
            enrollment_id=e.id,
            assignment_title="Week 1",
            assignment_details="Repo link inside",
        )

        result = await submission_service.mark_complete(
            submissions, enrollments, sub.id
        )
        await session.commit()

        assert result.enrollment_updated is True
        stored_sub = await submissions.get_by_id(sub.id)
        stored_enrollment = await enrollments.get_by_id(e.id)
        assert stored_sub is not None and stored_sub.status == CompletionStatus.COMPLETE
        assert stored_enrollment is not None
        assert stored_enrollment.assignment_status == CompletionStatus.COMPLETE

    _run(scenario)
