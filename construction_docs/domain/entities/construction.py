"""Construction domain entity.

A physical structure within a project that construction documents attach to.
Created and edited by CRUD flows outside this service; consumed here as a
foreign key and as the owner of the version sequence.
"""

from dataclasses import dataclass

from construction_docs.domain.exceptions import ValidationException


@dataclass(frozen=True)
class ConstructionEntity:
    """Domain entity for construction (identity plus owning project)."""

    id: str
    name: str
    project_id: str

    def __post_init__(self) -> None:
        if not self.id:
            raise ValidationException("Construction ID is required", field="id")
        if not self.project_id:
            raise ValidationException(
                "Construction must belong to a project", field="project_id"
            )

    def belongs_to_project(self, project_id: str) -> bool:
        """Return whether this construction is owned by the given project."""
        return self.project_id == project_id
