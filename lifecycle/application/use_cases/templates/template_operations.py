"""Template operations: create, update, get, list, deactivate, purge.

Task lists are validated and normalized by the sequencer before any store
call, so a rejected request never reaches the template store.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from lifecycle.application.dtos.template import (
    ProposedTask,
    TemplateDetail,
    TemplateSummary,
    TemplateTaskDetail,
)
from lifecycle.application.services.sequencer import validate_and_normalize
from lifecycle.domain.entities import WorkflowTemplateEntity
from lifecycle.domain.enums import WorkflowKind
from lifecycle.domain.exceptions import (
    ConflictException,
    ResourceNotFoundException,
    ValidationException,
)

if TYPE_CHECKING:
    from lifecycle.application.interfaces.repositories import ITemplateRepository

logger = logging.getLogger(__name__)

TEMPLATE_NAME_MAX_LENGTH = 100


def to_template_detail(template: WorkflowTemplateEntity) -> TemplateDetail:
    """Map template entity to TemplateDetail DTO (tasks in sequence order)."""
    return TemplateDetail(
        id=template.id,
        name=template.name,
        description=template.description,
        kind=template.kind,
        is_active=template.is_active,
        tasks=[
            TemplateTaskDetail(
                id=t.id,
                name=t.name,
                description=t.description,
                assigned_role=t.assigned_role,
                sequence_order=t.sequence_order,
                is_parallel=t.is_parallel,
                depends_on_task_id=t.depends_on_task_id,
            )
            for t in template.ordered_tasks()
        ],
        created_by=template.created_by,
        updated_by=template.updated_by,
        created_at=template.created_at,
        updated_at=template.updated_at,
    )


def to_template_summary(template: WorkflowTemplateEntity) -> TemplateSummary:
    """Map template entity to TemplateSummary DTO."""
    return TemplateSummary(
        id=template.id,
        name=template.name,
        kind=template.kind,
        is_active=template.is_active,
        task_count=len(template.tasks),
        created_at=template.created_at,
        updated_at=template.updated_at,
    )


def _clean_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationException("Template name is required", field="name")
    if len(cleaned) > TEMPLATE_NAME_MAX_LENGTH:
        raise ValidationException(
            f"Template name must be at most {TEMPLATE_NAME_MAX_LENGTH} characters",
            field="name",
        )
    return cleaned


class TemplateService:
    """Create and manage workflow templates. Every write takes the acting user's id."""

    def __init__(self, template_repo: ITemplateRepository) -> None:
        self.template_repo = template_repo

    async def create_template(
        self,
        name: str,
        kind: WorkflowKind,
        tasks: Sequence[ProposedTask],
        actor_id: str,
        description: str | None = None,
    ) -> TemplateDetail:
        """Validate, normalize and persist a new active template.

        Raises:
            ValidationException: If name or task list is invalid.
            ConflictException: If a template with this name exists.
        """
        cleaned = _clean_name(name)
        normalized = validate_and_normalize(tasks)
        if await self.template_repo.get_by_name(cleaned) is not None:
            raise ConflictException(
                f"Template with name '{cleaned}' already exists", name=cleaned
            )
        template = await self.template_repo.create_template(
            name=cleaned,
            kind=kind,
            tasks=normalized,
            actor_id=actor_id,
            description=description,
        )
        logger.info(
            "Created template %s (%s) with %d tasks", template.id, cleaned, len(normalized)
        )
        return to_template_detail(template)

    async def update_template(
        self,
        template_id: str,
        name: str,
        kind: WorkflowKind,
        tasks: Sequence[ProposedTask],
        actor_id: str,
        description: str | None = None,
        is_active: bool = True,
    ) -> TemplateDetail:
        """Replace header fields and the whole task set of a template.

        Running workflows keep their own copies of task order and
        dependencies, so replacing tasks does not affect them.

        Raises:
            ResourceNotFoundException: If the template does not exist.
            ValidationException: If name or task list is invalid.
            ConflictException: If another template already uses the name.
        """
        existing = await self.template_repo.get_by_id(template_id)
        if existing is None:
            raise ResourceNotFoundException("template", template_id)
        cleaned = _clean_name(name)
        normalized = validate_and_normalize(tasks)
        clash = await self.template_repo.get_by_name(cleaned)
        if clash is not None and clash.id != template_id:
            raise ConflictException(
                f"Template with name '{cleaned}' already exists", name=cleaned
            )
        await self.template_repo.update_template(
            template_id,
            name=cleaned,
            kind=kind,
            is_active=is_active,
            actor_id=actor_id,
            description=description,
        )
        await self.template_repo.replace_tasks(template_id, normalized, actor_id)
        updated = await self.template_repo.get_by_id(template_id)
        if updated is None:
            raise ResourceNotFoundException("template", template_id)
        logger.info("Updated template %s with %d tasks", template_id, len(normalized))
        return to_template_detail(updated)

    async def get_template(self, template_id: str) -> TemplateDetail:
        """Return template with tasks; raise ResourceNotFoundException if absent."""
        template = await self.template_repo.get_by_id(template_id)
        if template is None:
            raise ResourceNotFoundException("template", template_id)
        return to_template_detail(template)

    async def list_templates(self, include_inactive: bool = True) -> list[TemplateSummary]:
        """Return template summaries ordered by name."""
        templates = await self.template_repo.get_all(include_inactive=include_inactive)
        return [to_template_summary(t) for t in templates]

    async def deactivate_template(self, template_id: str, actor_id: str) -> None:
        """Soft delete: mark inactive so no new workflows can be created from it.

        Raises:
            ResourceNotFoundException: If the template does not exist.
            ConflictException: If non-completed workflows still use the template.
        """
        if await self.template_repo.get_by_id(template_id) is None:
            raise ResourceNotFoundException("template", template_id)
        active = await self.template_repo.count_referencing_workflows(
            template_id, exclude_completed=True
        )
        if active:
            raise ConflictException(
                "Template cannot be deleted as it is in use by active workflows",
                template_id=template_id,
                active_workflows=active,
            )
        await self.template_repo.set_active(template_id, False, actor_id)
        logger.info("Deactivated template %s", template_id)

    async def purge_template(self, template_id: str) -> None:
        """Hard delete a template that no workflow ever referenced.

        Raises:
            ResourceNotFoundException: If the template does not exist.
            ConflictException: If any workflow references the template.
        """
        if await self.template_repo.get_by_id(template_id) is None:
            raise ResourceNotFoundException("template", template_id)
        referencing = await self.template_repo.count_referencing_workflows(template_id)
        if referencing:
            raise ConflictException(
                "Template is referenced by existing workflows; deactivate it instead",
                template_id=template_id,
                workflows=referencing,
            )
        await self.template_repo.delete_template(template_id)
        logger.info("Purged template %s", template_id)
