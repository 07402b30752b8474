"""Authentication router."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from employee_api.dependencies import get_employee_directory
from employee_api.models.dto.auth import LoginRequest, LoginResponse
from employee_api.security.rate_limit import LOGIN_LIMIT, limiter
from employee_api.services.employee_directory import EmployeeDirectory

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/login", response_model=LoginResponse)
@limiter.limit(LOGIN_LIMIT)
async def login(
    request: Request,
    body: LoginRequest,
    directory: Annotated[EmployeeDirectory, Depends(get_employee_directory)],
) -> LoginResponse:
    """Authenticate with email and password and get a session token.

    Unknown email and wrong password return the same message.
    """
    return await directory.login(str(body.email), body.password)
