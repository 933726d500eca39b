"""Construction ORM model. Owner of the per-construction version sequence."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from construction_docs.infrastructure.persistence.database import Base
from construction_docs.infrastructure.persistence.models.mixins import (
    CuidMixin,
    TimestampMixin,
)


class Construction(CuidMixin, TimestampMixin, Base):
    """Construction within a project. Table: construction."""

    __tablename__ = "construction"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    project_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
