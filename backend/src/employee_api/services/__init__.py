"""Business logic services."""

from employee_api.services.employee_directory import EmployeeDirectory

__all__ = ["EmployeeDirectory"]
