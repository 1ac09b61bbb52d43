"""Shared utilities: telemetry and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from lifecycle.shared.utils import (
    ensure_utc,
    generate_cuid,
    utc_days_from_now,
    utc_now,
)

__all__ = [
    "generate_cuid",
    "utc_now",
    "utc_days_from_now",
    "ensure_utc",
]
