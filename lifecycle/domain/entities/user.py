"""User entity as seen by the engine (read-only; owned by the user directory)."""

from dataclasses import dataclass

from lifecycle.domain.enums import UserRole


@dataclass(frozen=True)
class UserEntity:
    """Domain entity for a user eligible for task assignment."""

    id: str
    email: str
    role: UserRole
    is_active: bool = True
    full_name: str | None = None

    def can_take(self, role: UserRole) -> bool:
        """Return whether this user may be assigned a task requiring role."""
        return self.is_active and self.role == role
