"""Repository layer for data access."""

from employee_api.repositories.base import BaseRepository
from employee_api.repositories.employee_repository import EmployeeRepository
from employee_api.repositories.protocols import EmployeeStore, UnitOfWork
from employee_api.repositories.unit_of_work import SqlAlchemyUnitOfWork

__all__ = [
    "BaseRepository",
    "EmployeeRepository",
    "EmployeeStore",
    "SqlAlchemyUnitOfWork",
    "UnitOfWork",
]
