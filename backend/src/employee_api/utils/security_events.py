"""Audit trail for logins, password changes and employee administration.

Events go to the ``security`` logger with a structured ``security_event``
payload so they can be routed apart from application logs. Each payload
names the acting employee and, for administration events, the affected
one, including their roles at the time of the event.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import UUID

from employee_api.models.domain.employee import Employee
from employee_api.models.domain.role import Role


class SecurityEventType(str, Enum):
    """Audited employee and credential events."""

    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"

    EMPLOYEE_CREATED = "employee_created"
    EMPLOYEE_UPDATED = "employee_updated"
    EMPLOYEE_DEACTIVATED = "employee_deactivated"

    PASSWORD_CHANGED = "password_changed"
    PASSWORD_CHANGE_FAILED = "password_change_failed"

    PERMISSION_DENIED = "permission_denied"

    @property
    def is_failure(self) -> bool:
        return self in _FAILURE_EVENTS


_FAILURE_EVENTS = frozenset(
    {
        SecurityEventType.LOGIN_FAILED,
        SecurityEventType.PASSWORD_CHANGE_FAILED,
        SecurityEventType.PERMISSION_DENIED,
    }
)

security_logger = logging.getLogger("security")


def _party(employee_id: UUID | None, email: str | None, role: Role | None) -> dict[str, Any]:
    return {
        "employee_id": str(employee_id) if employee_id else None,
        "email": email,
        "role": role.name if role is not None else None,
    }


def _field(value: Any) -> Any:
    if isinstance(value, Role):
        return value.name
    if isinstance(value, UUID):
        return str(value)
    return value


def log_security_event(
    event_type: SecurityEventType,
    actor: Employee | None = None,
    target: Employee | None = None,
    *,
    actor_id: UUID | None = None,
    actor_email: str | None = None,
    actor_role: Role | None = None,
    **details: Any,
) -> None:
    """Write one audit record.

    Args:
        event_type: What happened
        actor: Employee performing the action, when it has been loaded
        target: Employee affected by the action
        actor_id: Actor id when no aggregate is at hand
        actor_email: Actor email when no aggregate is at hand (failed logins)
        actor_role: Actor role when no aggregate is at hand
        **details: Extra structured fields; roles and ids are stored by name
    """
    if actor is not None:
        actor_party = _party(actor.id, actor.email, actor.role)
    else:
        actor_party = _party(actor_id, actor_email, actor_role)

    event: dict[str, Any] = {
        "event_type": event_type.value,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "success": not event_type.is_failure,
        "actor": actor_party,
    }
    if target is not None:
        event["target"] = _party(target.id, target.email, target.role)
    if details:
        event["details"] = {key: _field(value) for key, value in details.items()}

    level = logging.WARNING if event_type.is_failure else logging.INFO
    security_logger.log(
        level,
        "Security event: %s",
        event_type.value,
        extra={"security_event": event},
    )
