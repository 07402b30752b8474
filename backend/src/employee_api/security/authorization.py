"""Role-hierarchy authorization policy."""

import logging
from uuid import UUID

from employee_api.exceptions import InsufficientRoleError
from employee_api.models.domain.role import Role, can_assign_role
from employee_api.utils.security_events import SecurityEventType, log_security_event

logger = logging.getLogger(__name__)


class AuthorizationPolicy:
    """Decide whether an actor may grant a role.

    There is a single rule: the actor's stored role must be greater than or
    equal to the role being created or assigned. The same check guards
    employee creation and role updates.
    """

    def can_assign_role(self, actor_role: Role, target_role: Role) -> bool:
        return can_assign_role(actor_role, target_role)

    def ensure_can_assign_role(
        self,
        actor_role: Role,
        target_role: Role,
        actor_id: UUID | None = None,
    ) -> None:
        """Raise if the actor may not grant ``target_role``.

        Raises:
            InsufficientRoleError: Carrying both roles for diagnostics
        """
        if self.can_assign_role(actor_role, target_role):
            return

        logger.warning(
            "Employee %s with role %s tried to assign role %s",
            actor_id,
            actor_role.name,
            target_role.name,
        )
        log_security_event(
            SecurityEventType.PERMISSION_DENIED,
            actor_id=actor_id,
            actor_role=actor_role,
            requested_role=target_role,
        )
        raise InsufficientRoleError(actor_role, target_role)
