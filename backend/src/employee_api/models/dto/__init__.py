"""Data Transfer Objects package."""

from employee_api.models.dto.auth import LoginRequest, LoginResponse, PasswordChangeRequest
from employee_api.models.dto.employee import (
    EmployeeCreate,
    EmployeeResponse,
    EmployeeUpdate,
    PhoneDto,
)

__all__ = [
    "LoginRequest",
    "LoginResponse",
    "PasswordChangeRequest",
    "EmployeeCreate",
    "EmployeeUpdate",
    "EmployeeResponse",
    "PhoneDto",
]
