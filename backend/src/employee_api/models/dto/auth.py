"""Authentication DTOs."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from employee_api.models.dto.employee import EmployeeResponse
from employee_api.security.password import get_password_service


class LoginRequest(BaseModel):
    """Login request."""

    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class LoginResponse(BaseModel):
    """Login response with the signed session token."""

    token: str
    token_type: str = "bearer"
    expires_at: datetime
    employee: EmployeeResponse


class PasswordChangeRequest(BaseModel):
    """Password change request for the authenticated employee."""

    current_password: str = Field(min_length=1, max_length=128)
    new_password: str = Field(max_length=128)

    @field_validator("new_password")
    @classmethod
    def new_password_strength(cls, v: str) -> str:
        is_valid, errors = get_password_service().validate_password_strength(v)
        if not is_valid:
            raise ValueError("; ".join(errors))
        return v
