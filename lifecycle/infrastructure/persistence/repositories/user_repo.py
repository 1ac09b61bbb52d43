"""User repository: read access to the user directory for assignment."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lifecycle.domain.entities import UserEntity
from lifecycle.domain.enums import UserRole
from lifecycle.infrastructure.persistence.models.user import User
from lifecycle.infrastructure.persistence.repositories.base import BaseRepository


def _user_to_entity(u: User) -> UserEntity:
    """Map ORM User to domain UserEntity."""
    return UserEntity(
        id=u.id,
        email=u.email,
        role=UserRole(u.role),
        is_active=u.is_active,
        full_name=u.full_name,
    )


class UserRepository(BaseRepository[User]):
    """User repository. Implements IUserRepository."""

    resource_type = "user"

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def get_by_id(self, user_id: str) -> UserEntity | None:
        user = await self._get_model(user_id)
        return _user_to_entity(user) if user else None

    async def get_active_by_role(self, role: UserRole) -> list[UserEntity]:
        """Return active users holding role, ordered by id ascending."""
        result = await self.db.execute(
            select(User)
            .where(User.role == role.value, User.is_active.is_(True))
            .order_by(User.id)
        )
        return [_user_to_entity(u) for u in result.scalars().all()]

    async def create_user(
        self,
        email: str,
        role: UserRole,
        *,
        full_name: str | None = None,
        is_active: bool = True,
    ) -> UserEntity:
        """Insert a directory user (seeding and tests; the engine never writes users)."""
        user = await self._add(
            User(email=email, role=role.value, full_name=full_name, is_active=is_active)
        )
        return _user_to_entity(user)
