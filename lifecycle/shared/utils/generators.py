"""Identifier generation for lifecycle rows (CUID2).

Ids are assigned in the application rather than by the database, so a
workflow's task instances can point at each other before the first flush.
"""

from cuid2 import Cuid

_CUID = Cuid(length=25)


def generate_cuid() -> str:
    """Return a new 25-character CUID2 for a template, workflow, task or history row."""
    return _CUID.generate()
