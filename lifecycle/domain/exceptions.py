"""Domain exceptions for the employee lifecycle engine.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. The transport
layer maps them to responses using error_code.
"""

from typing import Any


class LifecycleException(Exception):
    """Base exception for all engine errors.

    All custom exceptions inherit from this class to allow consistent
    error handling and logging.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return a serializable form (error, message, details)."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(LifecycleException):
    """Raised when input is malformed or a business rule is violated.

    Covers empty task lists, duplicate non-parallel sequence orders, missing
    or cyclic dependencies, illegal status transitions, inactive templates
    and incomplete employee details.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        **details_extra: Any,
    ) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
            **details_extra: Optional keys merged into details (e.g. sequence_order).
        """
        details: dict[str, Any] = {"field": field} if field else {}
        details.update(details_extra)
        super().__init__(message, "VALIDATION_ERROR", details)


class InvalidTransitionException(ValidationException):
    """Raised when a requested status transition is not allowed."""

    def __init__(self, entity: str, current: str, requested: str) -> None:
        """Initialize with entity kind and both statuses.

        Args:
            entity: 'workflow' or 'task'.
            current: Current status value.
            requested: Requested status value.
        """
        super().__init__(
            f"Invalid {entity} state transition from {current} to {requested}",
            field="status",
            entity=entity,
            current_status=current,
            requested_status=requested,
        )


class ResourceNotFoundException(LifecycleException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'template', 'workflow').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class ConflictException(LifecycleException):
    """Raised when an operation is blocked by existing state.

    E.g. deleting a template still referenced by active workflows, or
    creating a template whose name is taken.
    """

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message, "CONFLICT", details)


class AuthorizationException(LifecycleException):
    """Raised when the acting user may not see or change the resource."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional resource, action, and message.

        Args:
            resource: Optional resource type (e.g. 'workflow', 'task').
            action: Optional action that was attempted (e.g. 'read', 'update').
            message: Human-readable message; default used when resource/action omitted.
        """
        if resource and action:
            message = f"Permission denied: {action} on {resource}"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)
