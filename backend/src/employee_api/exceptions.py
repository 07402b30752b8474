"""Domain-specific exceptions for the employee API.

These exceptions provide a clean separation between service-layer errors
and HTTP responses, avoiding string matching in routers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from employee_api.models.domain.role import Role


class EmployeeAPIError(Exception):
    """Base exception for all employee API errors."""

    def __init__(self, message: str = "An error occurred", details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# =============================================================================
# Resource Not Found Errors (404)
# =============================================================================


class NotFoundError(EmployeeAPIError):
    """Base class for resource not found errors."""

    def __init__(self, entity: str = "Resource", key: Any = None) -> None:
        if key is None:
            message = f"{entity} not found"
            details: dict[str, Any] = {}
        else:
            message = f"{entity} with identifier '{key}' was not found"
            details = {"key": str(key)}
        details["entity"] = entity
        super().__init__(message, details)


class EmployeeNotFoundError(NotFoundError):
    """Raised when an employee cannot be found."""

    def __init__(self, employee_id: Any = None, entity: str = "Employee") -> None:
        super().__init__(entity, employee_id)


# =============================================================================
# Business Rule Violations (400)
# =============================================================================


class BusinessRuleError(EmployeeAPIError):
    """Base class for domain constraint violations."""

    pass


class DomainValidationError(BusinessRuleError):
    """Raised when an aggregate field invariant is violated."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message, {"field": field})


class InsufficientRoleError(BusinessRuleError):
    """Raised when an actor tries to grant more authority than they hold."""

    def __init__(self, actor_role: Role, target_role: Role) -> None:
        message = (
            f"Insufficient role to assign role {target_role.name}. "
            f"Your current role is {actor_role.name}."
        )
        super().__init__(
            message,
            {"actor_role": actor_role.name, "target_role": target_role.name},
        )
        self.actor_role = actor_role
        self.target_role = target_role


class EmailAlreadyRegisteredError(BusinessRuleError):
    """Raised when the email belongs to another employee."""

    def __init__(self, email: str) -> None:
        super().__init__(f"Email '{email}' is already registered", {"email": email})


class DocumentAlreadyRegisteredError(BusinessRuleError):
    """Raised when the document number belongs to another employee."""

    def __init__(self, document_number: str) -> None:
        super().__init__(
            f"Document '{document_number}' is already registered",
            {"document_number": document_number},
        )


class DuplicateRecordError(BusinessRuleError):
    """Raised when the database rejects a record as a duplicate."""

    def __init__(self) -> None:
        super().__init__("An employee with the same email or document number already exists")


class SelfManagementError(BusinessRuleError):
    """Raised when an employee is set as their own manager."""

    def __init__(self) -> None:
        super().__init__("An employee cannot be their own manager")


class ManagementCycleError(BusinessRuleError):
    """Raised when a manager assignment would close a reporting loop."""

    def __init__(self, employee_id: Any, manager_id: Any) -> None:
        super().__init__(
            "Manager assignment would create a management cycle",
            {"employee_id": str(employee_id), "manager_id": str(manager_id)},
        )


class InvalidCredentialsError(BusinessRuleError):
    """Raised for unknown email or wrong password at login.

    The message is identical in both cases so that callers cannot tell
    which of the two failed.
    """

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class InactiveAccountError(BusinessRuleError):
    """Raised when a deactivated employee tries to log in or act."""

    def __init__(self) -> None:
        super().__init__("Account is inactive. Contact your administrator.")


class IncorrectCurrentPasswordError(BusinessRuleError):
    """Raised when the current password does not match on password change."""

    def __init__(self) -> None:
        super().__init__("Current password is incorrect")
