"""Domain models package."""

from employee_api.models.domain.employee import Employee, Phone
from employee_api.models.domain.role import Role, can_assign_role

__all__ = [
    "Employee",
    "Phone",
    "Role",
    "can_assign_role",
]
