"""Employee directory service.

Every operation runs its checks in a fixed order and stops at the first
one that fails, so the same bad input always produces the same error.
All reads and the final commit of one operation share a unit of work.
"""

import logging
from datetime import date
from uuid import UUID

from employee_api.exceptions import (
    DocumentAlreadyRegisteredError,
    EmailAlreadyRegisteredError,
    EmployeeNotFoundError,
    InactiveAccountError,
    IncorrectCurrentPasswordError,
    InvalidCredentialsError,
    ManagementCycleError,
    SelfManagementError,
)
from employee_api.models.domain.employee import Employee, Phone
from employee_api.models.domain.role import Role
from employee_api.models.dto.auth import LoginResponse
from employee_api.models.dto.employee import (
    EmployeeCreate,
    EmployeeResponse,
    EmployeeUpdate,
    PhoneDto,
)
from employee_api.repositories.protocols import EmployeeStore, UnitOfWork
from employee_api.security.auth import SessionTokenService, get_session_token_service
from employee_api.security.authorization import AuthorizationPolicy
from employee_api.security.password import PasswordService, get_password_service
from employee_api.utils.security_events import SecurityEventType, log_security_event

logger = logging.getLogger(__name__)

DEFAULT_DIRECTOR_FIRST_NAME = "Admin"
DEFAULT_DIRECTOR_LAST_NAME = "Sistema"
DEFAULT_DIRECTOR_BIRTH_DATE = date(1990, 1, 1)
DEFAULT_DIRECTOR_PHONE = ("11999999999", "Celular")


class EmployeeDirectory:
    """Use cases for managing employees and their credentials."""

    def __init__(
        self,
        employees: EmployeeStore,
        unit_of_work: UnitOfWork,
        password_service: PasswordService | None = None,
        token_service: SessionTokenService | None = None,
        policy: AuthorizationPolicy | None = None,
    ) -> None:
        self.employees = employees
        self.unit_of_work = unit_of_work
        self.password_service = password_service or get_password_service()
        self.token_service = token_service or get_session_token_service()
        self.policy = policy or AuthorizationPolicy()

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def login(self, email: str, password: str) -> LoginResponse:
        """Authenticate with email and password.

        Unknown email and wrong password fail with the same error.

        Args:
            email: Employee email (any case)
            password: Plain text password

        Returns:
            LoginResponse with the session token and the employee projection

        Raises:
            InvalidCredentialsError: If the email is unknown or the password is wrong
            InactiveAccountError: If the employee has been deactivated
        """
        employee = await self.employees.find_by_email(email.strip().lower())
        if employee is None:
            log_security_event(
                SecurityEventType.LOGIN_FAILED, actor_email=email, reason="unknown_email"
            )
            raise InvalidCredentialsError()

        if not employee.is_active:
            log_security_event(
                SecurityEventType.LOGIN_FAILED, employee, reason="inactive_account"
            )
            raise InactiveAccountError()

        if not self.password_service.verify_password(password, employee.password_hash):
            log_security_event(
                SecurityEventType.LOGIN_FAILED, employee, reason="invalid_password"
            )
            raise InvalidCredentialsError()

        token, expires_at = self.token_service.issue(
            employee.id, employee.email, employee.full_name, employee.role
        )
        log_security_event(SecurityEventType.LOGIN_SUCCESS, employee)
        return LoginResponse(
            token=token,
            expires_at=expires_at,
            employee=await self._project(employee),
        )

    async def change_password(
        self,
        employee_id: UUID,
        current_password: str,
        new_password: str,
    ) -> None:
        """Change an employee's password after checking the current one.

        Raises:
            EmployeeNotFoundError: If the employee does not exist
            IncorrectCurrentPasswordError: If the current password is wrong
        """
        employee = await self._require(employee_id)

        if not self.password_service.verify_password(current_password, employee.password_hash):
            log_security_event(
                SecurityEventType.PASSWORD_CHANGE_FAILED,
                employee,
                reason="incorrect_current_password",
            )
            raise IncorrectCurrentPasswordError()

        employee.set_password_hash(self.password_service.hash_password(new_password))
        await self.employees.mark_dirty(employee)
        await self.unit_of_work.commit()

        log_security_event(SecurityEventType.PASSWORD_CHANGED, employee)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_employee(self, employee_id: UUID) -> EmployeeResponse:
        """Get a single employee.

        Raises:
            EmployeeNotFoundError: If the employee does not exist
        """
        return await self._project(await self._require(employee_id))

    async def list_employees(self) -> list[EmployeeResponse]:
        """List active employees ordered by name."""
        return await self._project_all(await self.employees.list_active())

    async def get_subordinates(self, manager_id: UUID) -> list[EmployeeResponse]:
        """List active employees reporting directly to ``manager_id``."""
        return await self._project_all(await self.employees.list_by_manager(manager_id))

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def create_employee(
        self,
        requester_id: UUID,
        data: EmployeeCreate,
    ) -> EmployeeResponse:
        """Create a new employee on behalf of ``requester_id``.

        Args:
            requester_id: Authenticated employee performing the operation
            data: Validated creation payload

        Returns:
            The stored employee projection

        Raises:
            EmployeeNotFoundError: If the requester or the manager does not exist
            InactiveAccountError: If the requester has been deactivated
            InsufficientRoleError: If the requester's role is below the new role
            EmailAlreadyRegisteredError: If the email is taken
            DocumentAlreadyRegisteredError: If the document number is taken
        """
        requester = await self._require_active_requester(requester_id)

        self.policy.ensure_can_assign_role(requester.role, data.role, actor_id=requester.id)

        email = str(data.email).strip().lower()
        if await self.employees.exists_by_email(email):
            raise EmailAlreadyRegisteredError(email)

        document_number = data.document_number.strip()
        if await self.employees.exists_by_document_number(document_number):
            raise DocumentAlreadyRegisteredError(document_number)

        if data.manager_id is not None:
            await self._require(data.manager_id, entity="Manager")

        employee = Employee(
            first_name=data.first_name,
            last_name=data.last_name,
            email=email,
            document_number=document_number,
            password_hash=self.password_service.hash_password(data.password),
            birth_date=data.birth_date,
            role=data.role,
            manager_id=data.manager_id,
            phones=[Phone(p.number, p.type) for p in data.phones],
        )

        await self.employees.insert(employee)
        await self.unit_of_work.commit()

        logger.info("Employee %s created by %s", employee.id, requester.id)
        log_security_event(SecurityEventType.EMPLOYEE_CREATED, requester, employee)
        return await self.get_employee(employee.id)

    async def update_employee(
        self,
        employee_id: UUID,
        requester_id: UUID,
        data: EmployeeUpdate,
    ) -> EmployeeResponse:
        """Update an employee on behalf of ``requester_id``.

        The phone list is replaced as a whole. Phones sent with the id of
        one of the employee's current phones keep that id.

        Raises:
            EmployeeNotFoundError: If the employee, requester or manager does not exist
            InactiveAccountError: If the requester has been deactivated
            InsufficientRoleError: If the requester's role is below the new role
            EmailAlreadyRegisteredError: If another employee holds the email
            SelfManagementError: If the employee would manage themselves
            ManagementCycleError: If the manager chain leads back to the employee
        """
        employee = await self._require(employee_id)
        requester = await self._require_active_requester(requester_id)

        self.policy.ensure_can_assign_role(requester.role, data.role, actor_id=requester.id)

        email = str(data.email).strip().lower()
        holder = await self.employees.find_by_email(email)
        if holder is not None and holder.id != employee.id:
            raise EmailAlreadyRegisteredError(email)

        if data.manager_id is not None:
            if data.manager_id == employee.id:
                raise SelfManagementError()
            manager = await self._require(data.manager_id, entity="Manager")
            await self._ensure_no_management_cycle(employee.id, manager)

        previous_role = employee.role
        employee.set_first_name(data.first_name)
        employee.set_last_name(data.last_name)
        employee.set_email(email)
        employee.set_birth_date(data.birth_date)
        employee.set_role(data.role)
        employee.set_manager(data.manager_id)
        self._replace_phones(employee, data.phones)

        await self.employees.mark_dirty(employee)
        await self.unit_of_work.commit()

        logger.info("Employee %s updated by %s", employee.id, requester.id)
        log_security_event(
            SecurityEventType.EMPLOYEE_UPDATED, requester, employee, previous_role=previous_role
        )
        return await self.get_employee(employee.id)

    async def delete_employee(self, employee_id: UUID, requester_id: UUID | None = None) -> None:
        """Deactivate an employee. The record is kept.

        Raises:
            EmployeeNotFoundError: If the employee does not exist
        """
        employee = await self._require(employee_id)
        employee.deactivate()
        await self.employees.mark_dirty(employee)
        await self.unit_of_work.commit()

        logger.info("Employee %s deactivated", employee.id)
        log_security_event(
            SecurityEventType.EMPLOYEE_DEACTIVATED, target=employee, actor_id=requester_id
        )

    async def seed_default_director(
        self,
        email: str,
        password: str,
        document_number: str,
    ) -> Employee | None:
        """Create the first Director account when no employee exists yet.

        Returns:
            The created employee, or None if employees already exist
        """
        if await self.employees.count() > 0:
            logger.info("Employees already exist, skipping default director")
            return None

        number, phone_type = DEFAULT_DIRECTOR_PHONE
        employee = Employee(
            first_name=DEFAULT_DIRECTOR_FIRST_NAME,
            last_name=DEFAULT_DIRECTOR_LAST_NAME,
            email=email,
            document_number=document_number,
            password_hash=self.password_service.hash_password(password),
            birth_date=DEFAULT_DIRECTOR_BIRTH_DATE,
            role=Role.DIRECTOR,
            phones=[Phone(number, phone_type)],
        )
        await self.employees.insert(employee)
        await self.unit_of_work.commit()

        logger.info("Default director %s created", employee.email)
        return employee

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _require(self, employee_id: UUID, entity: str = "Employee") -> Employee:
        employee = await self.employees.find_by_id(employee_id)
        if employee is None:
            raise EmployeeNotFoundError(employee_id, entity=entity)
        return employee

    async def _require_active_requester(self, requester_id: UUID) -> Employee:
        requester = await self._require(requester_id, entity="Requester")
        if not requester.is_active:
            raise InactiveAccountError()
        return requester

    async def _ensure_no_management_cycle(self, employee_id: UUID, manager: Employee) -> None:
        """Walk up from ``manager`` and fail if the chain reaches ``employee_id``."""
        visited = {manager.id}
        current: Employee | None = manager
        while current is not None and current.manager_id is not None:
            if current.manager_id == employee_id:
                raise ManagementCycleError(employee_id, manager.id)
            if current.manager_id in visited:
                # Existing loop that does not involve this employee
                break
            visited.add(current.manager_id)
            current = await self.employees.find_by_id(current.manager_id)

    @staticmethod
    def _replace_phones(employee: Employee, phones: list[PhoneDto]) -> None:
        reusable = {phone.id for phone in employee.phones}
        employee.clear_phones()
        for dto in phones:
            # An id is kept once; repeats become new phones
            phone_id = dto.id if dto.id in reusable else None
            reusable.discard(phone_id)
            employee.add_phone(Phone(dto.number, dto.type, phone_id=phone_id))

    async def _project(self, employee: Employee) -> EmployeeResponse:
        manager_name = None
        if employee.manager_id is not None:
            manager = await self.employees.find_by_id(employee.manager_id)
            manager_name = manager.full_name if manager is not None else None
        return EmployeeResponse.from_employee(employee, manager_name)

    async def _project_all(self, employees: list[Employee]) -> list[EmployeeResponse]:
        manager_ids = {e.manager_id for e in employees if e.manager_id is not None}
        managers = await self.employees.find_by_ids(manager_ids)
        return [
            EmployeeResponse.from_employee(
                e,
                managers[e.manager_id].full_name if e.manager_id in managers else None,
            )
            for e in employees
        ]
