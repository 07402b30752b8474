"""Shared fixtures for the employee API tests."""

import os
from collections.abc import AsyncGenerator, Callable, Iterable
from datetime import date
from uuid import UUID

import pytest
import pytest_asyncio

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret-9f8e7d6c5b4a3210ZYXWVUTSRQPONMLK")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SEED_ADMIN_ENABLED", "false")
os.environ.setdefault("DATABASE_AUTO_CREATE", "false")
os.environ.setdefault("RATE_LIMIT_AUTH_LOGIN", "1000")
os.environ.setdefault("RATE_LIMIT_DEFAULT", "10000")

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from employee_api.models.domain.employee import Employee, Phone  # noqa: E402
from employee_api.models.domain.role import Role  # noqa: E402
from employee_api.models.orm import Base  # noqa: E402
from employee_api.security.auth import SessionTokenService  # noqa: E402
from employee_api.security.password import PasswordService  # noqa: E402
from employee_api.services.employee_directory import EmployeeDirectory  # noqa: E402

TEST_PASSWORD = "Secret@123"
TEST_SECRET = "unit-test-secret-0123456789abcdefABCDEF"


class InMemoryEmployeeStore:
    """Employee store backed by a dict, recording every write."""

    def __init__(self) -> None:
        self.rows: dict[UUID, Employee] = {}
        self.inserted: list[Employee] = []
        self.marked_dirty: list[Employee] = []

    async def find_by_id(self, employee_id: UUID) -> Employee | None:
        return self.rows.get(employee_id)

    async def find_by_ids(self, employee_ids: Iterable[UUID]) -> dict[UUID, Employee]:
        return {i: self.rows[i] for i in employee_ids if i in self.rows}

    async def find_by_email(self, email: str) -> Employee | None:
        email = email.strip().lower()
        return next((e for e in self.rows.values() if e.email == email), None)

    async def find_by_document_number(self, document_number: str) -> Employee | None:
        return next(
            (e for e in self.rows.values() if e.document_number == document_number),
            None,
        )

    async def list_active(self) -> list[Employee]:
        active = [e for e in self.rows.values() if e.is_active]
        return sorted(active, key=lambda e: (e.first_name, e.last_name))

    async def list_by_manager(self, manager_id: UUID) -> list[Employee]:
        return [e for e in await self.list_active() if e.manager_id == manager_id]

    async def exists_by_email(self, email: str) -> bool:
        return await self.find_by_email(email) is not None

    async def exists_by_document_number(self, document_number: str) -> bool:
        return await self.find_by_document_number(document_number) is not None

    async def count(self) -> int:
        return len(self.rows)

    async def insert(self, employee: Employee) -> None:
        self.inserted.append(employee)
        self.rows[employee.id] = employee

    async def mark_dirty(self, employee: Employee) -> None:
        self.marked_dirty.append(employee)
        self.rows[employee.id] = employee

    @property
    def writes(self) -> int:
        return len(self.inserted) + len(self.marked_dirty)


class InMemoryUnitOfWork:
    """Unit of work that counts commits and the writes each one covered."""

    def __init__(self, store: InMemoryEmployeeStore) -> None:
        self.store = store
        self.commits = 0
        self._committed_writes = 0

    async def commit(self) -> int:
        self.commits += 1
        affected = self.store.writes - self._committed_writes
        self._committed_writes = self.store.writes
        return affected

    async def rollback(self) -> None:
        pass


@pytest.fixture
def password_service() -> PasswordService:
    return PasswordService(rounds=4)


@pytest.fixture
def token_service() -> SessionTokenService:
    return SessionTokenService(secret=TEST_SECRET, expiration_minutes=30)


@pytest.fixture
def store() -> InMemoryEmployeeStore:
    return InMemoryEmployeeStore()


@pytest.fixture
def unit_of_work(store: InMemoryEmployeeStore) -> InMemoryUnitOfWork:
    return InMemoryUnitOfWork(store)


@pytest.fixture
def directory(
    store: InMemoryEmployeeStore,
    unit_of_work: InMemoryUnitOfWork,
    password_service: PasswordService,
    token_service: SessionTokenService,
) -> EmployeeDirectory:
    return EmployeeDirectory(
        store,
        unit_of_work,
        password_service=password_service,
        token_service=token_service,
    )


@pytest.fixture
def make_employee(password_service: PasswordService) -> Callable[..., Employee]:
    """Build a valid employee; keyword arguments override the defaults."""
    counter = iter(range(1, 10_000))

    def _make(**overrides) -> Employee:
        n = next(counter)
        fields = {
            "first_name": f"Name{n}",
            "last_name": "Silva",
            "email": f"employee{n}@empresa.com",
            "document_number": f"DOC{n:05d}",
            "password_hash": password_service.hash_password(TEST_PASSWORD),
            "birth_date": date(1990, 5, 17),
            "role": Role.EMPLOYEE,
            "phones": [Phone("11999990000", "Mobile")],
        }
        fields.update(overrides)
        return Employee(**fields)

    return _make


@pytest.fixture
def seeded(
    store: InMemoryEmployeeStore,
    make_employee: Callable[..., Employee],
) -> Callable[..., Employee]:
    """Build an employee and put it straight into the in-memory store."""

    def _seed(**overrides) -> Employee:
        employee = make_employee(**overrides)
        store.rows[employee.id] = employee
        return employee

    return _seed


# =============================================================================
# Database fixtures (SQLite in memory)
# =============================================================================


@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session
