#!/usr/bin/env python
"""Create the default director account on an empty database."""

import asyncio
import sys

from employee_api.config import get_settings
from employee_api.database import async_session_maker, create_schema, engine
from employee_api.repositories.employee_repository import EmployeeRepository
from employee_api.repositories.unit_of_work import SqlAlchemyUnitOfWork
from employee_api.security.password import get_password_service
from employee_api.services.employee_directory import EmployeeDirectory


async def seed_director(email: str, password: str, document_number: str) -> bool:
    """Create the director if no employee exists yet."""
    is_valid, errors = get_password_service().validate_password_strength(password)
    if not is_valid:
        print(f"Password validation failed: {errors}")
        return False

    await create_schema()
    try:
        async with async_session_maker() as session:
            directory = EmployeeDirectory(EmployeeRepository(session), SqlAlchemyUnitOfWork(session))
            employee = await directory.seed_default_director(email, password, document_number)
    finally:
        await engine.dispose()

    if employee is None:
        print("Employees already exist, nothing to do")
        return False

    print(f"Director created: {employee.email}")
    return True


if __name__ == "__main__":
    import argparse

    settings = get_settings()
    parser = argparse.ArgumentParser(description="Create the default director account")
    parser.add_argument("--email", default=settings.seed_admin_email, help="Email address")
    parser.add_argument("--password", default=settings.seed_admin_password, help="Password")
    parser.add_argument("--document", default=settings.seed_admin_document, help="Document number")
    args = parser.parse_args()

    sys.exit(0 if asyncio.run(seed_director(args.email, args.password, args.document)) else 1)
