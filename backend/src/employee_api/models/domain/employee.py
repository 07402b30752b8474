"""Employee aggregate and its owned phones.

The aggregate keeps its state private and only changes it through
validating mutators. Every mutator stamps ``updated_at``. Invariants
are checked at the point of mutation, so an instance is valid for its
whole lifetime, not only right after construction.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timezone
from uuid import UUID, uuid4

from email_validator import EmailNotValidError, validate_email

from employee_api.exceptions import DomainValidationError
from employee_api.models.domain.role import Role, can_assign_role

NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 255
DOCUMENT_MAX_LENGTH = 50
PHONE_NUMBER_MAX_LENGTH = 20
PHONE_TYPE_MAX_LENGTH = 50
MINIMUM_AGE = 18


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def calculate_age(birth_date: date, today: date | None = None) -> int:
    """Calculate age in completed years.

    Args:
        birth_date: Date of birth
        today: Reference date (defaults to the current date)

    Returns:
        Age in whole years
    """
    today = today or date.today()
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def _required_text(value: str | None, field: str, label: str, max_length: int) -> str:
    if value is None or not value.strip():
        raise DomainValidationError(field, f"{label} is required")
    value = value.strip()
    if len(value) > max_length:
        raise DomainValidationError(
            field, f"{label} must be at most {max_length} characters"
        )
    return value


class Phone:
    """Contact phone owned by a single employee."""

    def __init__(
        self,
        number: str,
        phone_type: str | None = None,
        *,
        phone_id: UUID | None = None,
    ) -> None:
        self.id = phone_id or uuid4()
        self._number = ""
        self._type: str | None = None
        self.created_at = _utcnow()
        self.updated_at: datetime | None = None
        self.set_number(number)
        self.set_type(phone_type)
        self.updated_at = None

    @property
    def number(self) -> str:
        return self._number

    @property
    def type(self) -> str | None:
        return self._type

    def set_number(self, number: str) -> None:
        self._number = _required_text(number, "number", "Phone number", PHONE_NUMBER_MAX_LENGTH)
        self.updated_at = _utcnow()

    def set_type(self, phone_type: str | None) -> None:
        phone_type = phone_type.strip() if phone_type else None
        if phone_type and len(phone_type) > PHONE_TYPE_MAX_LENGTH:
            raise DomainValidationError(
                "type", f"Phone type must be at most {PHONE_TYPE_MAX_LENGTH} characters"
            )
        self._type = phone_type or None
        self.updated_at = _utcnow()

    def __repr__(self) -> str:
        return f"Phone(number={self._number!r}, type={self._type!r})"


class Employee:
    """Employee aggregate root.

    ``manager_id`` is a plain identifier pointing at another employee. The
    aggregate never owns its manager; self-management and cycles are
    rejected by the orchestration layer, which knows the other records.
    """

    def __init__(
        self,
        first_name: str,
        last_name: str,
        email: str,
        document_number: str,
        password_hash: str,
        birth_date: date,
        role: Role,
        manager_id: UUID | None = None,
        phones: Iterable[Phone] = (),
    ) -> None:
        self._id = uuid4()
        self._created_at = _utcnow()
        self._is_active = True
        self._phones: list[Phone] = []

        self.set_first_name(first_name)
        self.set_last_name(last_name)
        self.set_email(email)
        self._document_number = _required_text(
            document_number, "document_number", "Document number", DOCUMENT_MAX_LENGTH
        )
        self.set_password_hash(password_hash)
        self.set_birth_date(birth_date)
        self.set_role(role)
        self._manager_id = manager_id
        for phone in phones:
            self.add_phone(phone)

        # A freshly built aggregate has not been modified yet
        self._updated_at: datetime | None = None

    @classmethod
    def restore(
        cls,
        *,
        id: UUID,
        first_name: str,
        last_name: str,
        email: str,
        document_number: str,
        password_hash: str,
        birth_date: date,
        role: Role,
        is_active: bool,
        manager_id: UUID | None,
        phones: Iterable[Phone],
        created_at: datetime,
        updated_at: datetime | None,
    ) -> Employee:
        """Rebuild an aggregate from stored state without re-running checks.

        Stored records were validated when written; the age rule in
        particular must not reject an employee loaded from storage.
        """
        employee = cls.__new__(cls)
        employee._id = id
        employee._first_name = first_name
        employee._last_name = last_name
        employee._email = email
        employee._document_number = document_number
        employee._password_hash = password_hash
        employee._birth_date = birth_date
        employee._role = Role(role)
        employee._is_active = is_active
        employee._manager_id = manager_id
        employee._phones = list(phones)
        employee._created_at = created_at
        employee._updated_at = updated_at
        return employee

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def first_name(self) -> str:
        return self._first_name

    @property
    def last_name(self) -> str:
        return self._last_name

    @property
    def full_name(self) -> str:
        return f"{self._first_name} {self._last_name}"

    @property
    def email(self) -> str:
        return self._email

    @property
    def document_number(self) -> str:
        return self._document_number

    @property
    def password_hash(self) -> str:
        return self._password_hash

    @property
    def birth_date(self) -> date:
        return self._birth_date

    @property
    def role(self) -> Role:
        return self._role

    @property
    def is_active(self) -> bool:
        return self._is_active

    @property
    def manager_id(self) -> UUID | None:
        return self._manager_id

    @property
    def phones(self) -> tuple[Phone, ...]:
        return tuple(self._phones)

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime | None:
        return self._updated_at

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def _touch(self) -> None:
        self._updated_at = _utcnow()

    def set_first_name(self, first_name: str) -> None:
        self._first_name = _required_text(first_name, "first_name", "First name", NAME_MAX_LENGTH)
        self._touch()

    def set_last_name(self, last_name: str) -> None:
        self._last_name = _required_text(last_name, "last_name", "Last name", NAME_MAX_LENGTH)
        self._touch()

    def set_email(self, email: str) -> None:
        email = _required_text(email, "email", "Email", EMAIL_MAX_LENGTH)
        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError as e:
            raise DomainValidationError("email", "Email address is not valid") from e
        self._email = email.lower()
        self._touch()

    def set_password_hash(self, password_hash: str) -> None:
        if not password_hash or not password_hash.strip():
            raise DomainValidationError("password_hash", "Password is required")
        self._password_hash = password_hash
        self._touch()

    def set_birth_date(self, birth_date: date) -> None:
        if calculate_age(birth_date) < MINIMUM_AGE:
            raise DomainValidationError(
                "birth_date", f"Employee must be at least {MINIMUM_AGE} years old"
            )
        self._birth_date = birth_date
        self._touch()

    def set_role(self, role: Role) -> None:
        self._role = Role(role)
        self._touch()

    def set_manager(self, manager_id: UUID | None) -> None:
        self._manager_id = manager_id
        self._touch()

    def activate(self) -> None:
        """Mark the employee active. Calling it on an active employee is harmless."""
        self._is_active = True
        self._touch()

    def deactivate(self) -> None:
        """Soft-delete the employee. Calling it twice is harmless."""
        self._is_active = False
        self._touch()

    def add_phone(self, phone: Phone) -> None:
        if phone is None:
            raise DomainValidationError("phones", "Phone is required")
        if any(p.id == phone.id for p in self._phones):
            raise DomainValidationError("phones", "Phone is already registered for this employee")
        self._phones.append(phone)
        self._touch()

    def remove_phone(self, phone: Phone) -> None:
        self._phones = [p for p in self._phones if p.id != phone.id]
        self._touch()

    def clear_phones(self) -> None:
        self._phones.clear()
        self._touch()

    def can_assign_role(self, target_role: Role) -> bool:
        """Whether this employee may create or promote someone to ``target_role``."""
        return can_assign_role(self._role, target_role)

    def __repr__(self) -> str:
        return f"Employee(id={self._id}, email={self._email!r}, role={self._role.name})"
