"""Template use cases: create, update, get, list, deactivate, purge."""

from lifecycle.application.use_cases.templates.template_operations import (
    TemplateService,
)

__all__ = [
    "TemplateService",
]
