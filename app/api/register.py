"""POST /register: create a student account.

The response never contains the password or its hash.
"""

from __future__ import annotations

import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from app.api.dependencies import Repos, get_repos
from app.api.errors import http_error
from app.services import users_service
from app.services.errors import ServiceError

router = APIRouter(tags=["users"])


class RegisterIn(BaseModel):
    name: str
    email: str
    password: str


class UserOut(BaseModel):
    id: str
    name: str
    email: str
    role: str
    registeredAt: datetime.datetime


class RegisterOut(BaseModel):
    success: bool
    message: str
    user: UserOut


@router.post(
    "/register",
    response_model=RegisterOut,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    payload: RegisterIn,
    repos: Annotated[Repos, Depends(get_repos)],
) -> RegisterOut:
    try:
        user = await users_service.register_user(
            repos.users, payload.name, payload.email, payload.password
        )
    except ServiceError as e:
        raise http_error(e) from None

    return RegisterOut(
        success=True,
        message="User registered successfully",
        user=UserOut(
            id=str(user.id),
            name=user.name,
            email=user.email,
            role=user.role,
            registeredAt=user.registered_at,
        ),
    )
