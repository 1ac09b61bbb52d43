"""Tests for domain exceptions (error_code, message, details)."""

from lifecycle.domain.exceptions import (
    AuthorizationException,
    ConflictException,
    InvalidTransitionException,
    LifecycleException,
    ResourceNotFoundException,
    ValidationException,
)


def test_lifecycle_exception_default_error_code() -> None:
    """Base LifecycleException uses class name as error_code when not provided."""
    exc = LifecycleException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "LifecycleException"
    assert exc.details == {}
    assert str(exc) == "Something failed"


def test_to_dict() -> None:
    exc = LifecycleException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {
        "error": "CUSTOM",
        "message": "Oops",
        "details": {"key": "value"},
    }


def test_validation_exception_with_extra_details() -> None:
    exc = ValidationException("Bad order", field="sequence_order", sequence_order=3)
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "sequence_order", "sequence_order": 3}


def test_validation_exception_without_field() -> None:
    exc = ValidationException("Generic validation error")
    assert exc.details == {}


def test_invalid_transition_is_validation_error() -> None:
    exc = InvalidTransitionException("task", "COMPLETED", "IN_PROGRESS")
    assert isinstance(exc, ValidationException)
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.message == "Invalid task state transition from COMPLETED to IN_PROGRESS"
    assert exc.details["current_status"] == "COMPLETED"
    assert exc.details["requested_status"] == "IN_PROGRESS"


def test_resource_not_found_exception() -> None:
    exc = ResourceNotFoundException("template", "tpl-123")
    assert exc.message == "template not found: tpl-123"
    assert exc.error_code == "RESOURCE_NOT_FOUND"
    assert exc.details == {"resource_type": "template", "resource_id": "tpl-123"}


def test_conflict_exception() -> None:
    exc = ConflictException("In use", template_id="tpl1")
    assert exc.error_code == "CONFLICT"
    assert exc.details == {"template_id": "tpl1"}


def test_authorization_exception_with_resource_and_action() -> None:
    exc = AuthorizationException(resource="workflow", action="read")
    assert exc.message == "Permission denied: read on workflow"
    assert exc.error_code == "PERMISSION_DENIED"
    assert exc.details == {"resource": "workflow", "action": "read"}


def test_authorization_exception_default_message() -> None:
    exc = AuthorizationException()
    assert exc.message == "Permission denied"
    assert exc.details == {}
