"""Employees router."""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from employee_api.dependencies import get_employee_directory
from employee_api.models.dto.auth import PasswordChangeRequest
from employee_api.models.dto.employee import EmployeeCreate, EmployeeResponse, EmployeeUpdate
from employee_api.security.auth import AuthenticatedEmployee, get_current_employee
from employee_api.services.employee_directory import EmployeeDirectory

logger = logging.getLogger(__name__)
router = APIRouter()

CurrentEmployee = Annotated[AuthenticatedEmployee, Depends(get_current_employee)]
Directory = Annotated[EmployeeDirectory, Depends(get_employee_directory)]


@router.get("", response_model=list[EmployeeResponse])
async def list_employees(
    current_employee: CurrentEmployee,
    directory: Directory,
) -> list[EmployeeResponse]:
    """List active employees ordered by name."""
    return await directory.list_employees()


@router.get("/me", response_model=EmployeeResponse)
async def get_me(
    current_employee: CurrentEmployee,
    directory: Directory,
) -> EmployeeResponse:
    """Get the authenticated employee."""
    return await directory.get_employee(current_employee.id)


@router.get("/manager/{manager_id}/subordinates", response_model=list[EmployeeResponse])
async def get_subordinates(
    manager_id: UUID,
    current_employee: CurrentEmployee,
    directory: Directory,
) -> list[EmployeeResponse]:
    """List active direct reports of a manager."""
    return await directory.get_subordinates(manager_id)


@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: UUID,
    current_employee: CurrentEmployee,
    directory: Directory,
) -> EmployeeResponse:
    """Get a single employee."""
    return await directory.get_employee(employee_id)


@router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    body: EmployeeCreate,
    response: Response,
    current_employee: CurrentEmployee,
    directory: Directory,
) -> EmployeeResponse:
    """Create an employee. The caller's role must be at least the new role."""
    employee = await directory.create_employee(current_employee.id, body)
    response.headers["Location"] = f"/api/v1/employees/{employee.id}"
    return employee


@router.put("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: UUID,
    body: EmployeeUpdate,
    current_employee: CurrentEmployee,
    directory: Directory,
) -> EmployeeResponse:
    """Update an employee. The caller's role must be at least the requested role."""
    return await directory.update_employee(employee_id, current_employee.id, body)


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee(
    employee_id: UUID,
    current_employee: CurrentEmployee,
    directory: Directory,
) -> Response:
    """Deactivate an employee."""
    await directory.delete_employee(employee_id, requester_id=current_employee.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/change-password", status_code=status.HTTP_204_NO_CONTENT)
async def change_password(
    body: PasswordChangeRequest,
    current_employee: CurrentEmployee,
    directory: Directory,
) -> Response:
    """Change the authenticated employee's password."""
    await directory.change_password(current_employee.id, body.current_password, body.new_password)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
