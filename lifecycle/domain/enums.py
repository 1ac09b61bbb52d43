"""Domain enumerations for the employee lifecycle engine.

Enums represent fixed sets of domain values (workflow kind, statuses, roles).
Values match the names so they can be stored and compared as plain strings.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class WorkflowKind(_ValuesMixin, str, Enum):
    """Kind of employee lifecycle event a template or workflow covers."""

    ONBOARDING = "ONBOARDING"
    OFFBOARDING = "OFFBOARDING"


class WorkflowStatus(_ValuesMixin, str, Enum):
    """Workflow instance lifecycle status. COMPLETED is terminal."""

    INITIATED = "INITIATED"
    IN_PROGRESS = "IN_PROGRESS"
    BLOCKED = "BLOCKED"
    COMPLETED = "COMPLETED"


class TaskStatus(_ValuesMixin, str, Enum):
    """Task instance lifecycle status. COMPLETED is terminal."""

    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    BLOCKED = "BLOCKED"
    COMPLETED = "COMPLETED"

    @classmethod
    def open_statuses(cls) -> tuple["TaskStatus", ...]:
        """Statuses that count toward a user's workload."""
        return (cls.NOT_STARTED, cls.IN_PROGRESS)


class UserRole(_ValuesMixin, str, Enum):
    """User role; template tasks are routed to users holding the task's role.

    HR_ADMIN manages users and initiates workflows, LINE_MANAGER oversees
    new hires, TECH_SUPPORT handles provisioning and access, ADMINISTRATOR
    has elevated privileges.
    """

    HR_ADMIN = "HR_ADMIN"
    LINE_MANAGER = "LINE_MANAGER"
    TECH_SUPPORT = "TECH_SUPPORT"
    ADMINISTRATOR = "ADMINISTRATOR"

    @classmethod
    def workflow_admins(cls) -> frozenset["UserRole"]:
        """Roles that may view every workflow regardless of assignment."""
        return frozenset({cls.HR_ADMIN, cls.ADMINISTRATOR})
