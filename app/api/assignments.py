"""Assignment submission endpoints."""

from __future__ import annotations

import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from app.api.dependencies import Repos, get_repos, parse_id
from app.api.errors import http_error
from app.models.submission import Submission
from app.services import submission_service
from app.services.errors import ServiceError

router = APIRouter(prefix="/assignment", tags=["assignments"])


class SubmissionIn(BaseModel):
    enrollmentId: UUID
    assignmentTitle: str
    assignmentDetails: str
    assignmentLink: str | None = None
    studentSubmitLink: str = ""


class SubmissionOut(BaseModel):
    id: str
    enrollmentId: str
    assignmentTitle: str
    assignmentDetails: str
    assignmentLink: str | None
    studentSubmitLink: str
    status: str
    submittedAt: datetime.datetime


class SubmitOut(BaseModel):
    message: str
    submission: SubmissionOut


class SubmissionListOut(BaseModel):
    total: int
    submissions: list[SubmissionOut]


class CompleteOut(BaseModel):
    message: str
    submission: SubmissionOut
    enrollmentUpdated: bool


def submission_out(s: Submission) -> SubmissionOut:
    return SubmissionOut(
        id=str(s.id),
        enrollmentId=str(s.enrollment_id),
        assignmentTitle=s.assignment_title,
        assignmentDetails=s.assignment_details,
        assignmentLink=s.assignment_link,
        studentSubmitLink=s.student_submit_link,
        status=s.status.value,
        submittedAt=s.submitted_at,
    )


@router.post("/submit", response_model=SubmitOut, status_code=status.HTTP_201_CREATED)
async def submit_assignment(
    body: SubmissionIn,
    repos: Annotated[Repos, Depends(get_repos)],
) -> SubmitOut:
    try:
        submission = await submission_service.submit(
            repos.submissions,
            enrollment_id=body.enrollmentId,
            assignment_title=body.assignmentTitle,
            assignment_details=body.assignmentDetails,
            assignment_link=body.assignmentLink,
            student_submit_link=body.studentSubmitLink,
        )
    except ServiceError as e:
        raise http_error(e) from None
    return SubmitOut(
        message="Assignment submitted successfully",
        submission=submission_out(submission),
    )


@router.get("/submissions", response_model=SubmissionListOut)
async def list_submissions(
    repos: Annotated[Repos, Depends(get_repos)],
) -> SubmissionListOut:
    rows = await submission_service.list_submissions(repos.submissions)
    return SubmissionListOut(
        total=len(rows), submissions=[submission_out(s) for s in rows]
    )


@router.put("/complete/{submission_id}", response_model=CompleteOut)
async def complete_submission(
    submission_id: str,
    repos: Annotated[Repos, Depends(get_repos)],
) -> CompleteOut:
    try:
        result = await submission_service.mark_complete(
            repos.submissions,
            repos.enrollments,
            parse_id(submission_id, "Submission"),
        )
    except ServiceError as e:
        raise http_error(e) from None

    message = (
        "Assignment marked complete"
        if result.enrollment_updated
        else "Assignment marked complete; parent enrollment not found"
    )
    return CompleteOut(
        message=message,
        submission=submission_out(result.submission),
        enrollmentUpdated=result.enrollment_updated,
    )
