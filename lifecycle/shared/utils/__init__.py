"""Shared utilities: datetime and id generators."""

from lifecycle.shared.utils.datetime import ensure_utc, utc_days_from_now, utc_now
from lifecycle.shared.utils.generators import generate_cuid

__all__ = [
    "generate_cuid",
    "utc_now",
    "utc_days_from_now",
    "ensure_utc",
]
