from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from uuid import UUID

from app.core.metrics import ENROLLMENT_TRANSITIONS, SUBMISSIONS_COMPLETED
from app.models.enrollment import CompletionStatus
from app.models.submission import Submission
from app.repos.enrollment_repo import EnrollmentRepo
from app.repos.submission_repo import SubmissionRepo
from app.services.errors import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CompletionResult:
    submission: Submission
    # False when the parent enrollment no longer exists.
    enrollment_updated: bool


async def submit(
    repo: SubmissionRepo,
    *,
    enrollment_id: UUID,
    assignment_title: str,
    assignment_details: str,
    assignment_link: str | None = None,
    student_submit_link: str = "",
) -> Submission:
    if not assignment_title.strip():
        raise InvalidInputError("assignmentTitle is required")
    if not assignment_details.strip():
        raise InvalidInputError("assignmentDetails is required")

    submission = Submission.new(
        enrollment_id=enrollment_id,
        assignment_title=assignment_title,
        assignment_details=assignment_details,
        assignment_link=assignment_link,
        student_submit_link=student_submit_link,
    )
    await repo.add(submission)
    logger.info(
        "Assignment submitted",
        extra={
            "submission_id": str(submission.id),
            "enrollment_id": str(enrollment_id),
        },
    )
    return submission


async def list_submissions(repo: SubmissionRepo) -> list[Submission]:
    return await repo.list_all()


async def mark_complete(
    submissions: SubmissionRepo,
    enrollments: EnrollmentRepo,
    submission_id: UUID,
) -> CompletionResult:
    """Complete a submission and its enrollment's assignment status.

    Both writes go through the same unit of work; with PostgreSQL they
    commit or roll back together.  A missing parent enrollment does not
    fail the call, it is reported through ``enrollment_updated``.
    """
    submission = await submissions.get_by_id(submission_id)
    if submission is None:
        raise NotFoundError("Submission", submission_id)

    completed = replace(submission, status=CompletionStatus.COMPLETE)
    if submission.status != CompletionStatus.COMPLETE:
        if not await submissions.update(completed):
            raise NotFoundError("Submission", submission_id)

    enrollment_updated = False
    enrollment = await enrollments.get_by_id(submission.enrollment_id)
    if enrollment is None:
        logger.warning(
            "Submission completed but parent enrollment is missing",
            extra={
                "submission_id": str(submission_id),
                "enrollment_id": str(submission.enrollment_id),
            },
        )
    elif enrollment.assignment_status == CompletionStatus.COMPLETE:
        enrollment_updated = True
    else:
        enrollment_updated = await enrollments.update(
            replace(enrollment, assignment_status=CompletionStatus.COMPLETE)
        )
        if enrollment_updated:
            ENROLLMENT_TRANSITIONS.labels(
                field="assignment_status", to_status=CompletionStatus.COMPLETE.value
            ).inc()

    SUBMISSIONS_COMPLETED.labels(
        enrollment_updated=str(enrollment_updated).lower()
    ).inc()
    logger.info(
        "Submission completed enrollment_updated=%s",
        enrollment_updated,
        extra={"submission_id": str(submission_id)},
    )
    return CompletionResult(submission=completed, enrollment_updated=enrollment_updated)
