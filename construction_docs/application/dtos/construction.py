"""DTOs for construction lookups (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ConstructionResult:
    """Construction read-model (id, name, owning project, timestamps)."""

    id: str
    name: str
    project_id: str
    created_at: datetime
    updated_at: datetime
