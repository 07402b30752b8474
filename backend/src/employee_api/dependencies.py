"""Dependency injection factories for FastAPI."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from employee_api.database import get_db
from employee_api.repositories.employee_repository import EmployeeRepository
from employee_api.repositories.unit_of_work import SqlAlchemyUnitOfWork
from employee_api.services.employee_directory import EmployeeDirectory


def get_employee_directory(db: AsyncSession = Depends(get_db)) -> EmployeeDirectory:
    """Get EmployeeDirectory bound to the request's session."""
    return EmployeeDirectory(EmployeeRepository(db), SqlAlchemyUnitOfWork(db))
