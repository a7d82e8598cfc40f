"""Enrollment lifecycle: creation, admin status gate, course completion
and the per-student read models.

Transitions are checked against the table in app.models.enrollment;
anything it does not list raises InvalidTransitionError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from uuid import UUID

from app.core.metrics import (
    ENROLLMENT_CONFLICTS,
    ENROLLMENT_TRANSITIONS,
    ENROLLMENTS_CREATED,
)
from app.models.course import Course
from app.models.enrollment import (
    CompletionStatus,
    Enrollment,
    EnrollmentStatus,
    can_transition,
)
from app.repos.course_repo import CourseRepo
from app.repos.enrollment_repo import EnrollmentRepo
from app.repos.errors import DuplicateKeyError
from app.services.errors import (
    ConflictError,
    InvalidInputError,
    InvalidTransitionError,
    NotFoundError,
    StateMismatchError,
)
from app.services.users_service import normalize_email

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EnrollmentSummary:
    total: int
    pending: int
    approved: int
    blocked: int


async def enroll(
    enrollments: EnrollmentRepo,
    courses: CourseRepo,
    *,
    email: str,
    course_id: UUID,
    course_title: str = "",
    user_id: str | None = None,
    name: str = "",
    phone: str = "",
    amount: float = 0.0,
    payment_method: str = "",
    transaction_id: str = "",
) -> Enrollment:
    email = normalize_email(email)
    if not email:
        raise InvalidInputError("email is required")

    if await enrollments.find(email, course_id) is not None:
        ENROLLMENT_CONFLICTS.inc()
        logger.warning(
            "Rejected duplicate enrollment email=%s course_id=%s", email, course_id
        )
        raise ConflictError("Already enrolled in this course")

    if not course_title:
        course = await courses.get_by_id(course_id)
        if course is not None:
            course_title = course.title

    enrollment = Enrollment.new(
        email=email,
        course_id=course_id,
        course_title=course_title,
        user_id=user_id,
        name=name,
        phone=phone,
        amount=amount,
        payment_method=payment_method,
        transaction_id=transaction_id,
    )

    try:
        await enrollments.add(enrollment)
    except DuplicateKeyError:
        ENROLLMENT_CONFLICTS.inc()
        logger.warning(
            "Duplicate enrollment caught by store email=%s course_id=%s",
            email,
            course_id,
        )
        raise ConflictError("Already enrolled in this course") from None

    ENROLLMENTS_CREATED.inc()
    logger.info(
        "Enrollment created email=%s course_id=%s",
        email,
        course_id,
        extra={"enrollment_id": str(enrollment.id)},
    )
    return enrollment


async def check_enrollment(repo: EnrollmentRepo, email: str, course_id: UUID) -> bool:
    return await repo.find(normalize_email(email), course_id) is not None


async def list_enrollments(repo: EnrollmentRepo) -> list[Enrollment]:
    return await repo.list_all()


async def _get(repo: EnrollmentRepo, enrollment_id: UUID) -> Enrollment:
    enrollment = await repo.get_by_id(enrollment_id)
    if enrollment is None:
        raise NotFoundError("Enrollment", enrollment_id)
    return enrollment


async def _set_status(
    repo: EnrollmentRepo, enrollment: Enrollment, target: EnrollmentStatus
) -> Enrollment:
    if not can_transition(enrollment.status, target):
        logger.warning(
            "Rejected status change %s -> %s",
            enrollment.status,
            target,
            extra={"enrollment_id": str(enrollment.id)},
        )
        raise InvalidTransitionError("status", enrollment.status, target)

    if enrollment.status == target:
        return enrollment

    updated = replace(enrollment, status=target)
    if not await repo.update(updated):
        raise NotFoundError("Enrollment", enrollment.id)

    ENROLLMENT_TRANSITIONS.labels(field="status", to_status=target.value).inc()
    logger.info(
        "Enrollment status %s -> %s",
        enrollment.status,
        target,
        extra={"enrollment_id": str(enrollment.id)},
    )
    return updated


async def approve(
    repo: EnrollmentRepo, enrollment_id: UUID, admin_transaction_id: str
) -> Enrollment:
    """Approve when the admin-entered transaction id matches the stored one.

    Exact string comparison, no trimming or case folding.
    """
    enrollment = await _get(repo, enrollment_id)
    if admin_transaction_id != enrollment.transaction_id:
        logger.warning(
            "Transaction id mismatch on approve",
            extra={"enrollment_id": str(enrollment_id)},
        )
        raise StateMismatchError("Transaction ID does not match")
    return await _set_status(repo, enrollment, EnrollmentStatus.APPROVED)


async def block(repo: EnrollmentRepo, enrollment_id: UUID) -> Enrollment:
    enrollment = await _get(repo, enrollment_id)
    return await _set_status(repo, enrollment, EnrollmentStatus.BLOCKED)


async def unblock(repo: EnrollmentRepo, enrollment_id: UUID) -> Enrollment:
    enrollment = await _get(repo, enrollment_id)
    return await _set_status(repo, enrollment, EnrollmentStatus.PENDING)


async def complete_course(repo: EnrollmentRepo, enrollment_id: UUID) -> Enrollment:
    # Any enrollment may be marked complete, whatever its admin status.
    enrollment = await _get(repo, enrollment_id)
    target = CompletionStatus.COMPLETE
    if enrollment.course_status == target:
        return enrollment

    updated = replace(enrollment, course_status=target)
    if not await repo.update(updated):
        raise NotFoundError("Enrollment", enrollment_id)

    ENROLLMENT_TRANSITIONS.labels(field="course_status", to_status=target.value).inc()
    logger.info("Course marked complete", extra={"enrollment_id": str(enrollment_id)})
    return updated


async def summarize_for_user(repo: EnrollmentRepo, email: str) -> EnrollmentSummary:
    enrollments = await repo.list_by_email(normalize_email(email))
    counts = {status: 0 for status in EnrollmentStatus}
    for e in enrollments:
        counts[e.status] += 1
    return EnrollmentSummary(
        total=len(enrollments),
        pending=counts[EnrollmentStatus.PENDING],
        approved=counts[EnrollmentStatus.APPROVED],
        blocked=counts[EnrollmentStatus.BLOCKED],
    )


async def enrolled_courses(
    enrollments: EnrollmentRepo, courses: CourseRepo, email: str
) -> list[Course]:
    """Distinct courses behind any of the user's enrollments, any status.

    Courses deleted since enrolling are left out.
    """
    rows = await enrollments.list_by_email(normalize_email(email))
    course_ids = list(dict.fromkeys(e.course_id for e in rows))
    return await courses.get_many(course_ids)


async def approved_courses_with_detail(
    enrollments: EnrollmentRepo, courses: CourseRepo, email: str
) -> list[tuple[Enrollment, Course | None]]:
    """Approved enrollments, newest first, each with its course or None."""
    rows = [
        e
        for e in await enrollments.list_by_email(normalize_email(email))
        if e.status == EnrollmentStatus.APPROVED
    ]
    found = {
        c.id: c for c in await courses.get_many(dict.fromkeys(e.course_id for e in rows))
    }
    return [(e, found.get(e.course_id)) for e in rows]
