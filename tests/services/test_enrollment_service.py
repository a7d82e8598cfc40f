from __future__ import annotations

import asyncio
import uuid

import pytest

from app.api.dependencies import Repos
from app.models.enrollment import (
    CompletionStatus,
    Enrollment,
    EnrollmentStatus,
    can_transition,
)
from app.repos.enrollment_repo import InMemoryEnrollmentRepo
from app.services import course_service, enrollment_service
from app.services.errors import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    StateMismatchError,
)


def _enroll(repos: Repos, email: str = "s@example.com", course_id=None, **kw):
    return enrollment_service.enroll(
        repos.enrollments,
        repos.courses,
        email=email,
        course_id=course_id or uuid.uuid4(),
        transaction_id=kw.pop("transaction_id", "TX-1"),
        **kw,
    )


# ---- transition table ----


@pytest.mark.parametrize(
    ("current", "target", "allowed"),
    [
        (EnrollmentStatus.PENDING, EnrollmentStatus.APPROVED, True),
        (EnrollmentStatus.PENDING, EnrollmentStatus.BLOCKED, True),
        (EnrollmentStatus.BLOCKED, EnrollmentStatus.PENDING, True),
        (EnrollmentStatus.APPROVED, EnrollmentStatus.APPROVED, True),
        (EnrollmentStatus.APPROVED, EnrollmentStatus.PENDING, False),
        (EnrollmentStatus.APPROVED, EnrollmentStatus.BLOCKED, False),
        (EnrollmentStatus.BLOCKED, EnrollmentStatus.APPROVED, False),
    ],
)
def test_status_transition_table(current, target, allowed) -> None:
    assert can_transition(current, target) is allowed


# ---- enroll / dedup ----


def test_enroll_normalizes_email(repos: Repos) -> None:
    e = asyncio.run(_enroll(repos, email="  Student@Example.COM "))
    assert e.email == "student@example.com"
    assert e.status == EnrollmentStatus.PENDING
    assert e.course_status == CompletionStatus.PENDING
    assert e.assignment_status == CompletionStatus.PENDING


def test_sequential_duplicate_enroll_conflicts(repos: Repos) -> None:
    course_id = uuid.uuid4()
    asyncio.run(_enroll(repos, course_id=course_id))
    with pytest.raises(ConflictError):
        asyncio.run(_enroll(repos, course_id=course_id))
    assert len(asyncio.run(repos.enrollments.list_all())) == 1


def test_concurrent_enroll_creates_exactly_one(repos: Repos) -> None:
    course_id = uuid.uuid4()

    async def run():
        return await asyncio.gather(
            _enroll(repos, course_id=course_id),
            _enroll(repos, course_id=course_id),
            return_exceptions=True,
        )

    results = asyncio.run(run())
    created = [r for r in results if isinstance(r, Enrollment)]
    conflicts = [r for r in results if isinstance(r, ConflictError)]
    assert len(created) == 1
    assert len(conflicts) == 1
    assert len(asyncio.run(repos.enrollments.list_all())) == 1


class _StaleReadRepo(InMemoryEnrollmentRepo):
    """Pre-check always misses, as if a concurrent insert had not landed yet."""

    async def find(self, email, course_id):
        return None


def test_store_constraint_catches_check_then_insert_race() -> None:
    repo = _StaleReadRepo()
    from app.repos.course_repo import InMemoryCourseRepo

    courses = InMemoryCourseRepo()
    course_id = uuid.uuid4()

    asyncio.run(
        enrollment_service.enroll(repo, courses, email="s@example.com", course_id=course_id)
    )
    with pytest.raises(ConflictError):
        asyncio.run(
            enrollment_service.enroll(
                repo, courses, email="s@example.com", course_id=course_id
            )
        )
    assert len(repo._by_id) == 1


def test_check_enrollment(repos: Repos) -> None:
    course_id = uuid.uuid4()
    assert not asyncio.run(
        enrollment_service.check_enrollment(repos.enrollments, "s@example.com", course_id)
    )
    asyncio.run(_enroll(repos, course_id=course_id))
    assert asyncio.run(
        enrollment_service.check_enrollment(repos.enrollments, "S@example.com", course_id)
    )


# ---- approve / block / unblock ----


def test_approve_mismatch_keeps_status(repos: Repos) -> None:
    e = asyncio.run(_enroll(repos, transaction_id="TX-1"))
    with pytest.raises(StateMismatchError):
        asyncio.run(enrollment_service.approve(repos.enrollments, e.id, "TX-1 "))
    stored = asyncio.run(repos.enrollments.get_by_id(e.id))
    assert stored is not None
    assert stored.status == EnrollmentStatus.PENDING


def test_approve_then_reapprove(repos: Repos) -> None:
    e = asyncio.run(_enroll(repos, transaction_id="TX-1"))
    first = asyncio.run(enrollment_service.approve(repos.enrollments, e.id, "TX-1"))
    second = asyncio.run(enrollment_service.approve(repos.enrollments, e.id, "TX-1"))
    assert first.status == second.status == EnrollmentStatus.APPROVED


def test_approve_missing_is_not_found(repos: Repos) -> None:
    with pytest.raises(NotFoundError):
        asyncio.run(enrollment_service.approve(repos.enrollments, uuid.uuid4(), "x"))


def test_block_unblock_round_trip(repos: Repos) -> None:
    e = asyncio.run(_enroll(repos))
    blocked = asyncio.run(enrollment_service.block(repos.enrollments, e.id))
    assert blocked.status == EnrollmentStatus.BLOCKED
    restored = asyncio.run(enrollment_service.unblock(repos.enrollments, e.id))
    assert restored.status == EnrollmentStatus.PENDING


def test_unblock_after_approval_is_rejected(repos: Repos) -> None:
    e = asyncio.run(_enroll(repos, transaction_id="TX-1"))
    asyncio.run(enrollment_service.approve(repos.enrollments, e.id, "TX-1"))
    with pytest.raises(InvalidTransitionError):
        asyncio.run(enrollment_service.unblock(repos.enrollments, e.id))


# ---- course completion ----


def test_complete_course_does_not_require_approval(repos: Repos) -> None:
    e = asyncio.run(_enroll(repos))
    asyncio.run(enrollment_service.block(repos.enrollments, e.id))
    done = asyncio.run(enrollment_service.complete_course(repos.enrollments, e.id))
    assert done.course_status == CompletionStatus.COMPLETE
    assert done.status == EnrollmentStatus.BLOCKED


def test_complete_course_again_is_a_no_op(repos: Repos) -> None:
    e = asyncio.run(_enroll(repos))
    first = asyncio.run(enrollment_service.complete_course(repos.enrollments, e.id))
    second = asyncio.run(enrollment_service.complete_course(repos.enrollments, e.id))
    assert first.course_status == CompletionStatus.COMPLETE
    assert second == first


def test_complete_course_missing(repos: Repos) -> None:
    with pytest.raises(NotFoundError):
        asyncio.run(enrollment_service.complete_course(repos.enrollments, uuid.uuid4()))


# ---- read models ----


def test_summary_counts_sum_to_total(repos: Repos) -> None:
    ids = [asyncio.run(_enroll(repos, transaction_id="T")).id for _ in range(5)]
    asyncio.run(enrollment_service.approve(repos.enrollments, ids[0], "T"))
    asyncio.run(enrollment_service.approve(repos.enrollments, ids[1], "T"))
    asyncio.run(enrollment_service.block(repos.enrollments, ids[2]))

    s = asyncio.run(enrollment_service.summarize_for_user(repos.enrollments, "s@example.com"))
    assert (s.total, s.pending, s.approved, s.blocked) == (5, 2, 2, 1)
    assert s.pending + s.approved + s.blocked == s.total


def test_enrolled_courses_skips_deleted(repos: Repos) -> None:
    kept = asyncio.run(course_service.create_course(repos.courses, {"title": "Kept"}))
    gone = asyncio.run(course_service.create_course(repos.courses, {"title": "Gone"}))
    asyncio.run(_enroll(repos, course_id=kept.id))
    asyncio.run(_enroll(repos, course_id=gone.id))
    asyncio.run(course_service.delete_course(repos.courses, gone.id))

    courses = asyncio.run(
        enrollment_service.enrolled_courses(repos.enrollments, repos.courses, "s@example.com")
    )
    assert [c.title for c in courses] == ["Kept"]


def test_approved_with_detail_pairs_dangling_with_none(repos: Repos) -> None:
    course = asyncio.run(course_service.create_course(repos.courses, {"title": "C"}))
    e = asyncio.run(_enroll(repos, course_id=course.id, transaction_id="T"))
    asyncio.run(enrollment_service.approve(repos.enrollments, e.id, "T"))
    asyncio.run(course_service.delete_course(repos.courses, course.id))

    pairs = asyncio.run(
        enrollment_service.approved_courses_with_detail(
            repos.enrollments, repos.courses, "s@example.com"
        )
    )
    assert len(pairs) == 1
    assert pairs[0][0].id == e.id
    assert pairs[0][1] is None
