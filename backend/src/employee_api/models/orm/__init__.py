"""SQLAlchemy ORM models package."""

from employee_api.models.orm.base import Base
from employee_api.models.orm.employee import EmployeeORM, PhoneORM

__all__ = [
    "Base",
    "EmployeeORM",
    "PhoneORM",
]
