"""Seed a development database with directory users and starter templates.

Creates tables when missing, one active user per role, and an onboarding and
an offboarding template. Existing users (by email) and templates (by name)
are left as they are, so the script can be re-run.

Usage:
    python -m scripts.seed_dev_data

Requires: DATABASE_URL (Postgres) in the environment or .env at project root.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy import select

from lifecycle.application.dtos.template import ProposedTask
from lifecycle.domain.enums import UserRole, WorkflowKind
from lifecycle.infrastructure.composition import LifecycleServices
from lifecycle.infrastructure.persistence.database import (
    create_tables,
    dispose_engine,
    get_db_transactional,
)
from lifecycle.infrastructure.persistence.models import User
from lifecycle.shared.telemetry import get_logger, setup_logging

logger = get_logger(__name__)

SEED_USERS = [
    ("hr.admin@acme.com", UserRole.HR_ADMIN, "HR Admin"),
    ("line.manager@acme.com", UserRole.LINE_MANAGER, "Line Manager"),
    ("tech.support@acme.com", UserRole.TECH_SUPPORT, "Tech Support"),
    ("administrator@acme.com", UserRole.ADMINISTRATOR, "Administrator"),
]

SEED_TEMPLATES = [
    (
        "Standard Onboarding",
        WorkflowKind.ONBOARDING,
        [
            ProposedTask(
                name="Prepare employment contract",
                assigned_role=UserRole.HR_ADMIN,
                sequence_order=1,
            ),
            ProposedTask(
                name="Provision laptop",
                assigned_role=UserRole.TECH_SUPPORT,
                sequence_order=2,
                is_parallel=True,
            ),
            ProposedTask(
                name="Create accounts",
                assigned_role=UserRole.TECH_SUPPORT,
                sequence_order=2,
                is_parallel=True,
            ),
            ProposedTask(
                name="Welcome meeting",
                assigned_role=UserRole.LINE_MANAGER,
                sequence_order=3,
            ),
        ],
    ),
    (
        "Standard Offboarding",
        WorkflowKind.OFFBOARDING,
        [
            ProposedTask(
                name="Exit interview",
                assigned_role=UserRole.LINE_MANAGER,
                sequence_order=1,
            ),
            ProposedTask(
                name="Revoke access",
                assigned_role=UserRole.TECH_SUPPORT,
                sequence_order=2,
            ),
            ProposedTask(
                name="Final payroll",
                assigned_role=UserRole.HR_ADMIN,
                sequence_order=3,
                depends_on="Exit interview",
            ),
        ],
    ),
]


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def _load_env() -> None:
    """Load .env from project root so get_settings() sees DATABASE_* when run as script."""
    load_dotenv(_project_root() / ".env", override=True)


async def main() -> None:
    """Create tables, seed users and templates."""
    _load_env()
    setup_logging()
    await create_tables()
    try:
        async with get_db_transactional() as session:
            services = LifecycleServices.build(session)
            admin_id: str | None = None
            for email, role, full_name in SEED_USERS:
                result = await session.execute(select(User).where(User.email == email))
                existing = result.scalar_one_or_none()
                if existing is None:
                    user = await services.user_repo.create_user(email, role, full_name=full_name)
                    user_id = user.id
                    logger.info("Created user %s (%s)", email, role.value)
                else:
                    user_id = existing.id
                if role == UserRole.HR_ADMIN:
                    admin_id = user_id
            if admin_id is None:
                print("No HR admin seeded", file=sys.stderr)
                sys.exit(1)
            for name, kind, tasks in SEED_TEMPLATES:
                if await services.template_repo.get_by_name(name) is not None:
                    logger.info("Template %s already exists", name)
                    continue
                detail = await services.templates.create_template(name, kind, tasks, admin_id)
                print(f"Created template: {detail.id} ({name}, {len(detail.tasks)} tasks)")
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
