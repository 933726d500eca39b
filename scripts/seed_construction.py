"""Create a construction row for local development (Postgres only).

Usage:
    python -m scripts.seed_construction <project_id> <name> [construction_id]
Prints the construction id to use as constructionId in uploads.
"""

import asyncio
import sys

from construction_docs.infrastructure.persistence import database
from construction_docs.infrastructure.persistence.repositories import (
    ConstructionRepository,
)
from construction_docs.shared.telemetry.logging import get_logger, setup_logging

logger = get_logger(__name__)


async def main() -> None:
    """Insert one construction in its own transaction."""
    if len(sys.argv) < 3:
        print(
            "Usage: python -m scripts.seed_construction <project_id> <name> [construction_id]",
            file=sys.stderr,
        )
        sys.exit(1)
    project_id = sys.argv[1]
    name = sys.argv[2]
    construction_id = sys.argv[3] if len(sys.argv) > 3 else None

    setup_logging()
    if database.get_engine() is None or database.AsyncSessionLocal is None:
        print("DATABASE_URL is not set", file=sys.stderr)
        sys.exit(1)

    async with database.AsyncSessionLocal() as session:
        async with session.begin():
            repo = ConstructionRepository(session)
            construction = await repo.create_construction(
                name=name, project_id=project_id, construction_id=construction_id
            )
    logger.info("Created construction %s (%s) in project %s", construction.id, name, project_id)
    print(construction.id)
    await database.dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
