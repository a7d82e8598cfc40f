"""Enrollment endpoints: manual enrollment, the admin approval gate,
course completion and the per-student views.
"""

from __future__ import annotations

import datetime
import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from app.api.courses import CourseOut, course_out
from app.api.dependencies import Repos, get_repos, parse_id
from app.api.errors import http_error
from app.models.enrollment import Enrollment
from app.services import enrollment_service
from app.services.errors import ServiceError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["enrollments"])


class EnrollmentIn(BaseModel):
    email: str
    courseId: UUID
    userId: str | None = None
    courseTitle: str = ""
    name: str = ""
    phone: str = ""
    amount: float = 0.0
    paymentMethod: str = ""
    transactionId: str = ""


class ApproveIn(BaseModel):
    adminTransactionId: str


class EnrollmentOut(BaseModel):
    id: str
    userId: str | None
    email: str
    courseId: str
    courseTitle: str
    name: str
    phone: str
    amount: float
    paymentMethod: str
    transactionId: str
    status: str
    courseStatus: str
    assignmentStatus: str
    createdAt: datetime.datetime


class EnrollmentChangeOut(BaseModel):
    message: str
    enrollment: EnrollmentOut


class EnrollmentListOut(BaseModel):
    total: int
    enrollments: list[EnrollmentOut]


class ExistsOut(BaseModel):
    exists: bool


class EnrollmentCountsOut(BaseModel):
    total: int
    pending: int
    approved: int
    blocked: int


class EnrolledCoursesOut(BaseModel):
    total: int
    courses: list[CourseOut]


class EnrollmentWithCourseOut(BaseModel):
    enrollment: EnrollmentOut
    course: CourseOut | None


class EnrollmentsWithCoursesOut(BaseModel):
    total: int
    combined: list[EnrollmentWithCourseOut]


def enrollment_out(e: Enrollment) -> EnrollmentOut:
    return EnrollmentOut(
        id=str(e.id),
        userId=e.user_id,
        email=e.email,
        courseId=str(e.course_id),
        courseTitle=e.course_title,
        name=e.name,
        phone=e.phone,
        amount=e.amount,
        paymentMethod=e.payment_method,
        transactionId=e.transaction_id,
        status=e.status.value,
        courseStatus=e.course_status.value,
        assignmentStatus=e.assignment_status.value,
        createdAt=e.created_at,
    )


# --- POST /enroll/manual --------------------------------------------------


@router.post(
    "/enroll/manual",
    response_model=EnrollmentChangeOut,
    status_code=status.HTTP_201_CREATED,
)
async def enroll_manual(
    body: EnrollmentIn,
    repos: Annotated[Repos, Depends(get_repos)],
) -> EnrollmentChangeOut:
    try:
        enrollment = await enrollment_service.enroll(
            repos.enrollments,
            repos.courses,
            email=body.email,
            course_id=body.courseId,
            course_title=body.courseTitle,
            user_id=body.userId,
            name=body.name,
            phone=body.phone,
            amount=body.amount,
            payment_method=body.paymentMethod,
            transaction_id=body.transactionId,
        )
    except ServiceError as e:
        raise http_error(e) from None
    return EnrollmentChangeOut(
        message="Enrollment submitted, waiting for approval",
        enrollment=enrollment_out(enrollment),
    )


@router.get("/check-enrollment", response_model=ExistsOut)
async def check_enrollment(
    repos: Annotated[Repos, Depends(get_repos)],
    email: str,
    course_id: Annotated[str, Query(alias="courseId")],
) -> ExistsOut:
    try:
        cid = UUID(course_id)
    except ValueError:
        # Not a valid id, so nothing can be enrolled under it.
        return ExistsOut(exists=False)
    return ExistsOut(
        exists=await enrollment_service.check_enrollment(repos.enrollments, email, cid)
    )


@router.get("/enrollments", response_model=EnrollmentListOut)
async def list_enrollments(
    repos: Annotated[Repos, Depends(get_repos)],
) -> EnrollmentListOut:
    rows = await enrollment_service.list_enrollments(repos.enrollments)
    return EnrollmentListOut(
        total=len(rows), enrollments=[enrollment_out(e) for e in rows]
    )


# --- Admin status gate ----------------------------------------------------


@router.put("/enrollment/approve/{enrollment_id}", response_model=EnrollmentChangeOut)
async def approve_enrollment(
    enrollment_id: str,
    body: ApproveIn,
    repos: Annotated[Repos, Depends(get_repos)],
) -> EnrollmentChangeOut:
    try:
        enrollment = await enrollment_service.approve(
            repos.enrollments,
            parse_id(enrollment_id, "Enrollment"),
            body.adminTransactionId,
        )
    except ServiceError as e:
        raise http_error(e) from None
    return EnrollmentChangeOut(
        message="Enrollment approved", enrollment=enrollment_out(enrollment)
    )


@router.put("/enrollment/block/{enrollment_id}", response_model=EnrollmentChangeOut)
async def block_enrollment(
    enrollment_id: str,
    repos: Annotated[Repos, Depends(get_repos)],
) -> EnrollmentChangeOut:
    try:
        enrollment = await enrollment_service.block(
            repos.enrollments, parse_id(enrollment_id, "Enrollment")
        )
    except ServiceError as e:
        raise http_error(e) from None
    return EnrollmentChangeOut(
        message="Enrollment blocked", enrollment=enrollment_out(enrollment)
    )


@router.put("/enrollment/unblock/{enrollment_id}", response_model=EnrollmentChangeOut)
async def unblock_enrollment(
    enrollment_id: str,
    repos: Annotated[Repos, Depends(get_repos)],
) -> EnrollmentChangeOut:
    try:
        enrollment = await enrollment_service.unblock(
            repos.enrollments, parse_id(enrollment_id, "Enrollment")
        )
    except ServiceError as e:
        raise http_error(e) from None
    return EnrollmentChangeOut(
        message="Enrollment unblocked", enrollment=enrollment_out(enrollment)
    )


@router.put("/course/complete/{enroll_id}", response_model=EnrollmentChangeOut)
async def complete_course(
    enroll_id: str,
    repos: Annotated[Repos, Depends(get_repos)],
) -> EnrollmentChangeOut:
    try:
        enrollment = await enrollment_service.complete_course(
            repos.enrollments, parse_id(enroll_id, "Enrollment")
        )
    except ServiceError as e:
        raise http_error(e) from None
    return EnrollmentChangeOut(
        message="Course marked as complete", enrollment=enrollment_out(enrollment)
    )


# --- Per-student views ----------------------------------------------------


@router.get("/enrollments/user/{email}", response_model=EnrollmentCountsOut)
async def enrollment_counts(
    email: str,
    repos: Annotated[Repos, Depends(get_repos)],
) -> EnrollmentCountsOut:
    summary = await enrollment_service.summarize_for_user(repos.enrollments, email)
    return EnrollmentCountsOut(
        total=summary.total,
        pending=summary.pending,
        approved=summary.approved,
        blocked=summary.blocked,
    )


@router.get("/user/enrolled-courses/{email}", response_model=EnrolledCoursesOut)
async def enrolled_courses(
    email: str,
    repos: Annotated[Repos, Depends(get_repos)],
) -> EnrolledCoursesOut:
    courses = await enrollment_service.enrolled_courses(
        repos.enrollments, repos.courses, email
    )
    return EnrolledCoursesOut(
        total=len(courses), courses=[course_out(c) for c in courses]
    )


@router.get(
    "/user/enrollments-with-courses/{email}",
    response_model=EnrollmentsWithCoursesOut,
)
async def enrollments_with_courses(
    email: str,
    repos: Annotated[Repos, Depends(get_repos)],
) -> EnrollmentsWithCoursesOut:
    pairs = await enrollment_service.approved_courses_with_detail(
        repos.enrollments, repos.courses, email
    )
    combined = [
        EnrollmentWithCourseOut(
            enrollment=enrollment_out(e),
            course=course_out(c) if c is not None else None,
        )
        for e, c in pairs
    ]
    dangling = sum(1 for _, c in pairs if c is None)
    if dangling:
        logger.info("%d approved enrollment(s) reference deleted courses", dangling)
    return EnrollmentsWithCoursesOut(total=len(combined), combined=combined)
