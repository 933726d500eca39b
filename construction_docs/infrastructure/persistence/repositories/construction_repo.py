"""Construction repository. Read access plus the version allocation lock."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from construction_docs.application.dtos.construction import ConstructionResult
from construction_docs.infrastructure.persistence.models.construction import (
    Construction,
)
from construction_docs.infrastructure.persistence.repositories.base import (
    BaseRepository,
)


def _construction_to_result(c: Construction) -> ConstructionResult:
    """Map ORM Construction to application ConstructionResult."""
    return ConstructionResult(
        id=c.id,
        name=c.name,
        project_id=c.project_id,
        created_at=c.created_at,
        updated_at=c.updated_at,
    )


class ConstructionRepository(BaseRepository[Construction]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Construction)

    async def get_by_id(self, construction_id: str) -> ConstructionResult | None:
        row = await self._get_orm_by_id(construction_id)
        return _construction_to_result(row) if row else None

    async def create_construction(
        self, name: str, project_id: str, construction_id: str | None = None
    ) -> ConstructionResult:
        """Insert a construction (dev seeding and tests; production rows come from the CRUD service)."""
        obj = Construction(name=name, project_id=project_id)
        if construction_id:
            obj.id = construction_id
        created = await super().create(obj)
        return _construction_to_result(created)

    async def lock_for_version_allocation(
        self, construction_id: str
    ) -> ConstructionResult | None:
        """SELECT ... FOR UPDATE on the construction row.

        Must run inside the request transaction (get_db_transactional); the
        lock is released on commit or rollback, so concurrent uploads to the
        same construction allocate versions one after another.
        """
        result = await self.db.execute(
            select(Construction)
            .where(Construction.id == construction_id)
            .with_for_update()
        )
        row = result.scalar_one_or_none()
        return _construction_to_result(row) if row else None
