"""Instantiate workflow use case: template -> workflow instance + task instances + history.

All checks run before the first write. The caller's unit of work commits
the instance, its tasks and the initial history entry together, or none
of them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import validate_email

from lifecycle.application.dtos.workflow import (
    EmployeeDetails,
    WorkflowCreationResult,
    WorkflowInitiationResult,
)
from lifecycle.domain.entities import (
    TaskInstanceEntity,
    WorkflowInstanceEntity,
    WorkflowTemplateEntity,
)
from lifecycle.domain.enums import TaskStatus, WorkflowStatus
from lifecycle.domain.exceptions import ResourceNotFoundException, ValidationException
from lifecycle.shared.utils import generate_cuid, utc_now

if TYPE_CHECKING:
    from lifecycle.application.interfaces.repositories import (
        ITaskInstanceRepository,
        ITemplateRepository,
        IUserRepository,
        IWorkflowRepository,
    )
    from lifecycle.application.services.assignment_engine import AssignmentEngine
    from lifecycle.application.services.state_machine import WorkflowStateMachine

logger = logging.getLogger(__name__)


def validate_employee_details(employee: EmployeeDetails | None) -> EmployeeDetails:
    """Return employee with fields stripped; raise ValidationException if incomplete."""
    if employee is None:
        raise ValidationException("Employee details are required", field="employee")
    name = (employee.name or "").strip()
    email = (employee.email or "").strip()
    role = (employee.role or "").strip()
    if not name:
        raise ValidationException("Employee name is required", field="employee.name")
    if not email:
        raise ValidationException("Employee email is required", field="employee.email")
    if not role:
        raise ValidationException("Employee role is required", field="employee.role")
    try:
        validate_email(email)
    except ValueError as e:
        raise ValidationException(
            "Employee email must be valid", field="employee.email"
        ) from e
    return EmployeeDetails(name=name, email=email, role=role)


def build_task_instances(
    workflow_id: str, template: WorkflowTemplateEntity
) -> list[TaskInstanceEntity]:
    """Create one NOT_STARTED, unassigned, visible task instance per template task.

    Template dependencies are resolved to the ids of the sibling instances.
    """
    ordered = template.ordered_tasks()
    instance_ids = {t.id: generate_cuid() for t in ordered}
    return [
        TaskInstanceEntity(
            id=instance_ids[t.id],
            workflow_id=workflow_id,
            template_task_id=t.id,
            task_name=t.name,
            assigned_role=t.assigned_role,
            sequence_order=t.sequence_order,
            status=TaskStatus.NOT_STARTED,
            is_visible=True,
            depends_on_task_id=(
                instance_ids.get(t.depends_on_task_id) if t.depends_on_task_id else None
            ),
        )
        for t in ordered
    ]


class InstantiateWorkflowUseCase:
    """Creates a workflow instance and its task instances from an active template."""

    def __init__(
        self,
        template_repo: ITemplateRepository,
        user_repo: IUserRepository,
        workflow_repo: IWorkflowRepository,
        task_repo: ITaskInstanceRepository,
        state_machine: WorkflowStateMachine,
    ) -> None:
        self._template_repo = template_repo
        self._user_repo = user_repo
        self._workflow_repo = workflow_repo
        self._task_repo = task_repo
        self._state_machine = state_machine

    async def execute(
        self,
        template_id: str,
        employee: EmployeeDetails | None,
        custom_fields: dict[str, Any] | None,
        actor_id: str,
    ) -> WorkflowCreationResult:
        """Instantiate template_id for employee.

        Args:
            template_id: Template to instantiate.
            employee: Employee name, email and role.
            custom_fields: Free-form values stored on the instance ({} when None).
            actor_id: User initiating the workflow.

        Returns:
            Workflow id, total task count and immediately visible task count.

        Raises:
            ResourceNotFoundException: If template or actor does not exist.
            ValidationException: If template is inactive or employee details are incomplete.
        """
        template = await self._template_repo.get_by_id(template_id)
        if template is None:
            raise ResourceNotFoundException("template", template_id)
        if not template.can_instantiate():
            raise ValidationException(
                f"Cannot instantiate inactive workflow template: {template_id}",
                field="template_id",
            )
        actor = await self._user_repo.get_by_id(actor_id)
        if actor is None:
            raise ResourceNotFoundException("user", actor_id)
        employee = validate_employee_details(employee)

        logger.info(
            "Creating workflow instance from template %s for employee %s",
            template_id,
            employee.name,
        )
        workflow = await self._workflow_repo.create(
            WorkflowInstanceEntity(
                id=generate_cuid(),
                template_id=template.id,
                employee_name=employee.name,
                employee_email=employee.email,
                employee_role=employee.role,
                kind=template.kind,
                status=WorkflowStatus.INITIATED,
                initiated_by=actor.id,
                initiated_at=utc_now(),
                custom_fields=dict(custom_fields) if custom_fields else {},
            )
        )
        tasks = await self._task_repo.create_many(build_task_instances(workflow.id, template))
        await self._state_machine.record_initiated(workflow, actor.id)

        result = WorkflowCreationResult(
            workflow_id=workflow.id,
            total_tasks=len(tasks),
            visible_tasks=sum(1 for t in tasks if t.is_visible),
        )
        logger.info(
            "Workflow instance %s created with %d total tasks, %d immediately visible",
            result.workflow_id,
            result.total_tasks,
            result.visible_tasks,
        )
        return result


class InitiateWorkflowUseCase:
    """Instantiates a workflow and runs the initial assignment pass in one unit of work."""

    def __init__(
        self,
        instantiate: InstantiateWorkflowUseCase,
        assignment_engine: AssignmentEngine,
        workflow_repo: IWorkflowRepository,
    ) -> None:
        self._instantiate = instantiate
        self._assignment_engine = assignment_engine
        self._workflow_repo = workflow_repo

    async def execute(
        self,
        template_id: str,
        employee: EmployeeDetails | None,
        custom_fields: dict[str, Any] | None,
        actor_id: str,
    ) -> WorkflowInitiationResult:
        """Instantiate, then assign ready tasks.

        Returns the creation summary, the new assignments, the ready tasks no
        active user could take, and the final workflow status.
        """
        creation = await self._instantiate.execute(template_id, employee, custom_fields, actor_id)
        assignment_pass = await self._assignment_engine.run_pass(creation.workflow_id)
        workflow = await self._workflow_repo.get_by_id(creation.workflow_id)
        if workflow is None:
            raise ResourceNotFoundException("workflow", creation.workflow_id)
        return WorkflowInitiationResult(
            creation=creation,
            assignments=assignment_pass.assigned,
            status=workflow.status,
            unassigned=assignment_pass.unassigned,
        )
