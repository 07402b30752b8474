"""Persistence contracts used by the employee directory.

The directory only depends on these protocols, so it can run against
the SQLAlchemy implementations or against in-memory fakes.
"""

from collections.abc import Iterable
from typing import Protocol
from uuid import UUID

from employee_api.models.domain.employee import Employee


class EmployeeStore(Protocol):
    """Employee persistence operations.

    Lookups return ``None`` when nothing matches. Emails are compared in
    lowercase.
    """

    async def find_by_id(self, employee_id: UUID) -> Employee | None: ...

    async def find_by_ids(self, employee_ids: Iterable[UUID]) -> dict[UUID, Employee]: ...

    async def find_by_email(self, email: str) -> Employee | None: ...

    async def find_by_document_number(self, document_number: str) -> Employee | None: ...

    async def list_active(self) -> list[Employee]: ...

    async def list_by_manager(self, manager_id: UUID) -> list[Employee]: ...

    async def exists_by_email(self, email: str) -> bool: ...

    async def exists_by_document_number(self, document_number: str) -> bool: ...

    async def count(self) -> int: ...

    async def insert(self, employee: Employee) -> None: ...

    async def mark_dirty(self, employee: Employee) -> None: ...


class UnitOfWork(Protocol):
    """Atomic persistence boundary for a single use case."""

    async def commit(self) -> int:
        """Persist pending changes atomically and return the number of records affected."""
        ...

    async def rollback(self) -> None: ...
