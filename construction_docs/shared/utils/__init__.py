"""Shared utilities: datetime and id generators."""

from construction_docs.shared.utils.datetime import ensure_utc, utc_now
from construction_docs.shared.utils.generators import generate_cuid

__all__ = [
    "generate_cuid",
    "utc_now",
    "ensure_utc",
]
