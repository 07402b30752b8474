"""Employee repository."""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import select

from employee_api.exceptions import EmployeeNotFoundError
from employee_api.models.domain.employee import Employee, Phone
from employee_api.models.domain.role import Role
from employee_api.models.orm.employee import EmployeeORM, PhoneORM
from employee_api.repositories.base import BaseRepository


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def to_domain(row: EmployeeORM) -> Employee:
    """Map a stored employee row to the domain aggregate."""
    phones = []
    for phone_row in row.phones:
        phone = Phone(phone_row.number, phone_row.type, phone_id=phone_row.id)
        phone.created_at = phone_row.created_at
        phone.updated_at = phone_row.updated_at
        phones.append(phone)

    return Employee.restore(
        id=row.id,
        first_name=row.first_name,
        last_name=row.last_name,
        email=row.email,
        document_number=row.document_number,
        password_hash=row.password_hash,
        birth_date=row.birth_date,
        role=Role(row.role),
        is_active=row.is_active,
        manager_id=row.manager_id,
        phones=phones,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _phone_row(phone: Phone) -> PhoneORM:
    return PhoneORM(
        id=phone.id,
        number=phone.number,
        type=phone.type,
        created_at=phone.created_at,
        updated_at=phone.updated_at,
    )


class EmployeeRepository(BaseRepository[EmployeeORM]):
    """Repository for employee operations.

    Reads return domain aggregates. Writes are staged on the session and
    only reach the database when the unit of work commits.
    """

    model = EmployeeORM

    async def find_by_id(self, employee_id: UUID) -> Employee | None:
        """Get employee by ID.

        Args:
            employee_id: Employee UUID

        Returns:
            Employee or None if not found
        """
        row = await self.get(employee_id)
        return to_domain(row) if row is not None else None

    async def find_by_ids(self, employee_ids: Iterable[UUID]) -> dict[UUID, Employee]:
        """Get multiple employees by their IDs in a single query.

        Args:
            employee_ids: Employee UUIDs

        Returns:
            Dict mapping employee ID to Employee
        """
        ids = list(set(employee_ids))
        if not ids:
            return {}
        result = await self.session.execute(
            select(EmployeeORM).where(EmployeeORM.id.in_(ids))
        )
        return {row.id: to_domain(row) for row in result.scalars().all()}

    async def find_by_email(self, email: str) -> Employee | None:
        """Get employee by email (case-insensitive).

        Args:
            email: Employee email address

        Returns:
            Employee or None if not found
        """
        result = await self.session.execute(
            select(EmployeeORM).where(EmployeeORM.email == _normalize_email(email))
        )
        row = result.scalar_one_or_none()
        return to_domain(row) if row is not None else None

    async def find_by_document_number(self, document_number: str) -> Employee | None:
        """Get employee by document number."""
        result = await self.session.execute(
            select(EmployeeORM).where(EmployeeORM.document_number == document_number.strip())
        )
        row = result.scalar_one_or_none()
        return to_domain(row) if row is not None else None

    async def list_active(self) -> list[Employee]:
        """List active employees ordered by first and last name."""
        result = await self.session.execute(
            select(EmployeeORM)
            .where(EmployeeORM.is_active.is_(True))
            .order_by(EmployeeORM.first_name, EmployeeORM.last_name)
        )
        return [to_domain(row) for row in result.scalars().all()]

    async def list_by_manager(self, manager_id: UUID) -> list[Employee]:
        """List active direct reports of a manager.

        Args:
            manager_id: Manager UUID

        Returns:
            Active employees whose manager is ``manager_id``
        """
        result = await self.session.execute(
            select(EmployeeORM)
            .where(
                EmployeeORM.manager_id == manager_id,
                EmployeeORM.is_active.is_(True),
            )
            .order_by(EmployeeORM.first_name, EmployeeORM.last_name)
        )
        return [to_domain(row) for row in result.scalars().all()]

    async def exists_by_email(self, email: str) -> bool:
        """Check whether any employee, active or not, uses this email."""
        result = await self.session.execute(
            select(EmployeeORM.id).where(EmployeeORM.email == _normalize_email(email)).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def exists_by_document_number(self, document_number: str) -> bool:
        """Check whether any employee, active or not, uses this document number."""
        result = await self.session.execute(
            select(EmployeeORM.id)
            .where(EmployeeORM.document_number == document_number.strip())
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def insert(self, employee: Employee) -> None:
        """Stage a new employee and its phones for insertion."""
        row = EmployeeORM(
            id=employee.id,
            first_name=employee.first_name,
            last_name=employee.last_name,
            email=employee.email,
            document_number=employee.document_number,
            password_hash=employee.password_hash,
            birth_date=employee.birth_date,
            role=int(employee.role),
            is_active=employee.is_active,
            manager_id=employee.manager_id,
            created_at=employee.created_at,
            updated_at=employee.updated_at,
            phones=[_phone_row(phone) for phone in employee.phones],
        )
        self.session.add(row)

    async def mark_dirty(self, employee: Employee) -> None:
        """Copy the aggregate state onto its stored row.

        Phones are matched by id: unknown ids are added, missing ones are
        removed, and the rest are updated in place.

        Raises:
            EmployeeNotFoundError: If the employee has no stored row
        """
        row = await self.get(employee.id)
        if row is None:
            raise EmployeeNotFoundError(employee.id)

        row.first_name = employee.first_name
        row.last_name = employee.last_name
        row.email = employee.email
        row.password_hash = employee.password_hash
        row.birth_date = employee.birth_date
        row.role = int(employee.role)
        row.is_active = employee.is_active
        row.manager_id = employee.manager_id
        row.updated_at = employee.updated_at

        wanted = {phone.id: phone for phone in employee.phones}
        for phone_row in list(row.phones):
            if phone_row.id not in wanted:
                row.phones.remove(phone_row)

        existing = {phone_row.id: phone_row for phone_row in row.phones}
        for phone_id, phone in wanted.items():
            phone_row = existing.get(phone_id)
            if phone_row is None:
                row.phones.append(_phone_row(phone))
            elif phone_row.number != phone.number or phone_row.type != phone.type:
                phone_row.number = phone.number
                phone_row.type = phone.type
                phone_row.updated_at = phone.updated_at
