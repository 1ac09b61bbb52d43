"""Employee lifecycle workflow engine.

Template-driven onboarding/offboarding workflows: template sequencing,
instantiation, status state machines and role-based task assignment.
"""

__version__ = "1.0.0"
