"""Role domain model."""

from enum import IntEnum


class Role(IntEnum):
    """Hierarchical employee role.

    The numeric value is the authority level: a higher value means more
    authority, and comparisons between members follow that order.
    """

    EMPLOYEE = 1
    LEADER = 2
    DIRECTOR = 3

    @property
    def level(self) -> int:
        """Numeric authority level."""
        return int(self.value)


def can_assign_role(actor_role: Role, target_role: Role) -> bool:
    """Check whether an actor may grant the target role.

    An actor may grant any role up to and including their own.

    Args:
        actor_role: Role currently held by the actor
        target_role: Role being created or assigned

    Returns:
        True if the actor's role dominates the target role
    """
    return actor_role >= target_role
