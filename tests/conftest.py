"""Pytest configuration and fixtures for construction-docs.

Environment is prepared before the app is imported: a test SECRET_KEY, rate
limiting off, and a throwaway storage root. API tests swap the SQL
repositories for in-memory ones through dependency_overrides and store bytes
in a per-test LocalStorageService under tmp_path.
"""

import os
import tempfile

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-construction-docs")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.setdefault("STORAGE_ROOT", tempfile.mkdtemp(prefix="construction-docs-"))

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from construction_docs.core.config import get_settings  # noqa: E402

get_settings.cache_clear()

from construction_docs.api.v1.dependencies import (  # noqa: E402
    get_construction_repo_for_write,
    get_document_repo,
    get_document_repo_for_write,
    get_storage_service,
)
from construction_docs.infrastructure.external.storage import (  # noqa: E402
    LocalStorageService,
)
from construction_docs.infrastructure.persistence import database  # noqa: E402
from construction_docs.infrastructure.security.jwt import (  # noqa: E402
    create_access_token,
)
from construction_docs.main import app  # noqa: E402
from tests.fakes import (  # noqa: E402
    InMemoryConstructionRepository,
    InMemoryDocumentRepository,
)


@pytest.fixture
def storage(tmp_path) -> LocalStorageService:
    return LocalStorageService(storage_root=str(tmp_path / "storage"))


@pytest.fixture
def document_repo() -> InMemoryDocumentRepository:
    return InMemoryDocumentRepository()


@pytest.fixture
def construction_repo() -> InMemoryConstructionRepository:
    """Construction c1 in project p1, c2 in project p2."""
    return InMemoryConstructionRepository([("c1", "p1"), ("c2", "p2")])


@pytest.fixture
async def client(storage, document_repo, construction_repo) -> AsyncClient:
    """Async HTTP client against the FastAPI app with in-memory persistence."""
    app.dependency_overrides[get_document_repo] = lambda: document_repo
    app.dependency_overrides[get_document_repo_for_write] = lambda: document_repo
    app.dependency_overrides[get_construction_repo_for_write] = lambda: construction_repo
    app.dependency_overrides[get_storage_service] = lambda: storage
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def raw_client() -> AsyncClient:
    """Client without overrides (real SQL dependencies)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers():
    """Return a factory: auth_headers(role, user_id='user-1') -> Authorization header."""

    def _headers(role: str | None, user_id: str = "user-1") -> dict[str, str]:
        claims: dict[str, str] = {"sub": user_id}
        if role is not None:
            claims["role"] = role
        return {"Authorization": f"Bearer {create_access_token(claims)}"}

    return _headers


@pytest.fixture
async def db_session():
    """Database session for repository integration tests. Rolls back after test.

    Requires DATABASE_URL (PostgreSQL, migrated with alembic upgrade head).
    Skips when it is not set; run without DB via: pytest -m 'not requires_db'.
    """
    if database.get_engine() is None or database.AsyncSessionLocal is None:
        pytest.skip(
            "Postgres not configured: set DATABASE_URL, then run: alembic upgrade head"
        )
    async with database.AsyncSessionLocal() as session:
        yield session
        await session.rollback()
