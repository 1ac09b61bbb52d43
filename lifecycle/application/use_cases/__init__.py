"""Application use cases: templates and workflows."""
