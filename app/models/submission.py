from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from uuid import UUID, uuid4

from app.models.enrollment import CompletionStatus


@dataclass(frozen=True, slots=True)
class Submission:
    """A student's answer to a course assignment, tied to one enrollment.

    Several submissions may reference the same enrollment.
    """

    id: UUID
    enrollment_id: UUID
    assignment_title: str
    assignment_details: str
    assignment_link: str | None = None  # instructor-provided
    student_submit_link: str = ""
    status: CompletionStatus = CompletionStatus.PENDING
    submitted_at: datetime.datetime = field(
        default_factory=lambda: datetime.datetime.now(datetime.UTC)
    )

    @staticmethod
    def new(
        *,
        enrollment_id: UUID,
        assignment_title: str,
        assignment_details: str,
        assignment_link: str | None = None,
        student_submit_link: str = "",
    ) -> Submission:
        return Submission(
            id=uuid4(),
            enrollment_id=enrollment_id,
            assignment_title=assignment_title,
            assignment_details=assignment_details,
            assignment_link=assignment_link,
            student_submit_link=student_submit_link,
        )
