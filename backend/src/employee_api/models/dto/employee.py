"""Employee DTOs."""

from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from employee_api.models.domain.employee import (
    DOCUMENT_MAX_LENGTH,
    EMAIL_MAX_LENGTH,
    MINIMUM_AGE,
    NAME_MAX_LENGTH,
    PHONE_NUMBER_MAX_LENGTH,
    PHONE_TYPE_MAX_LENGTH,
    Employee,
    calculate_age,
)
from employee_api.models.domain.role import Role
from employee_api.security.password import get_password_service


class PhoneDto(BaseModel):
    """Phone entry as sent and returned by the API."""

    id: UUID | None = None
    number: str = Field(min_length=1, max_length=PHONE_NUMBER_MAX_LENGTH)
    type: str | None = Field(default=None, max_length=PHONE_TYPE_MAX_LENGTH)

    @field_validator("number")
    @classmethod
    def number_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Phone number is required")
        return v


def _check_adult(v: date) -> date:
    if calculate_age(v) < MINIMUM_AGE:
        raise ValueError(f"Employee must be at least {MINIMUM_AGE} years old")
    return v


def _check_password(v: str) -> str:
    is_valid, errors = get_password_service().validate_password_strength(v)
    if not is_valid:
        raise ValueError("; ".join(errors))
    return v


class EmployeeCreate(BaseModel):
    """DTO for creating an employee."""

    first_name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    last_name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    email: EmailStr = Field(max_length=EMAIL_MAX_LENGTH)
    document_number: str = Field(min_length=1, max_length=DOCUMENT_MAX_LENGTH)
    password: str = Field(max_length=128)
    birth_date: date
    role: Role
    manager_id: UUID | None = None
    phones: list[PhoneDto] = Field(min_length=1, description="At least one phone is required")

    @field_validator("birth_date")
    @classmethod
    def birth_date_adult(cls, v: date) -> date:
        return _check_adult(v)

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        return _check_password(v)


class EmployeeUpdate(BaseModel):
    """DTO for updating an employee.

    The document number is fixed at creation and cannot be changed.
    """

    first_name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    last_name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    email: EmailStr = Field(max_length=EMAIL_MAX_LENGTH)
    birth_date: date
    role: Role
    manager_id: UUID | None = None
    phones: list[PhoneDto] = Field(min_length=1, description="At least one phone is required")

    @field_validator("birth_date")
    @classmethod
    def birth_date_adult(cls, v: date) -> date:
        return _check_adult(v)


class EmployeeResponse(BaseModel):
    """Employee response DTO. Never carries the password hash."""

    id: UUID
    first_name: str
    last_name: str
    full_name: str
    email: EmailStr
    document_number: str
    birth_date: date
    role: Role
    role_name: str
    is_active: bool
    manager_id: UUID | None = None
    manager_name: str | None = None
    phones: list[PhoneDto] = []
    created_at: datetime
    updated_at: datetime | None = None

    @classmethod
    def from_employee(cls, employee: Employee, manager_name: str | None = None) -> EmployeeResponse:
        """Build the public projection of an employee aggregate."""
        return cls(
            id=employee.id,
            first_name=employee.first_name,
            last_name=employee.last_name,
            full_name=employee.full_name,
            email=employee.email,
            document_number=employee.document_number,
            birth_date=employee.birth_date,
            role=employee.role,
            role_name=employee.role.name,
            is_active=employee.is_active,
            manager_id=employee.manager_id,
            manager_name=manager_name,
            phones=[PhoneDto(id=p.id, number=p.number, type=p.type) for p in employee.phones],
            created_at=employee.created_at,
            updated_at=employee.updated_at,
        )
