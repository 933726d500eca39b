"""Document endpoint tests against in-memory repositories and temp-dir storage."""

import os

import pytest
from httpx import ASGITransport, AsyncClient

from construction_docs.api.v1.dependencies import (
    get_construction_repo_for_write,
    get_document_repo_for_write,
    get_file_validator,
    get_storage_service,
)
from construction_docs.application.services.file_validator import FileValidator
from construction_docs.core.config import get_settings
from construction_docs.domain.exceptions import PermissionDeniedException
from construction_docs.main import app, create_app
from construction_docs.middleware import RequestSizeLimitMiddleware
from tests.fakes import make_document

PDF = b"%PDF-1.7 drawing sheet"


def _form(**overrides) -> dict[str, str]:
    data = {
        "type": "working_documentation",
        "projectId": "p1",
        "constructionId": "c1",
    }
    data.update(overrides)
    return {k: v for k, v in data.items() if v is not None}


def _file(name: str = "plan.pdf", content: bytes = PDF, mime: str = "application/pdf"):
    return {"file": (name, content, mime)}


async def _upload(client, headers, **form):
    return await client.post(
        "/api/v1/documents/upload", data=_form(**form), files=_file(), headers=headers
    )


class TestUpload:
    async def test_upload_returns_camel_case_document(
        self, client: AsyncClient, auth_headers
    ) -> None:
        response = await _upload(client, auth_headers("Manager"))
        assert response.status_code == 201
        body = response.json()
        assert body["version"] == 1
        assert body["originalName"] == "plan.pdf"
        assert body["fileSize"] == len(PDF)
        assert body["constructionId"] == "c1"
        assert body["projectId"] == "p1"
        assert body["mimeType"] == "application/pdf"
        assert body["uploadedBy"] == "user-1"

    async def test_upload_opens_next_version(
        self, client: AsyncClient, auth_headers, document_repo
    ) -> None:
        for v in (1, 2, 3):
            document_repo.documents[f"d{v}"] = make_document(f"d{v}", version=v)
        response = await _upload(client, auth_headers("Admin"))
        assert response.status_code == 201
        assert response.json()["version"] == 4

    async def test_explicit_version(self, client: AsyncClient, auth_headers) -> None:
        response = await _upload(client, auth_headers("Admin"), version="3")
        assert response.json()["version"] == 3

    async def test_non_numeric_version_rejected(
        self, client: AsyncClient, auth_headers
    ) -> None:
        response = await _upload(client, auth_headers("Admin"), version="latest")
        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    async def test_employee_forbidden(
        self, client: AsyncClient, auth_headers, document_repo
    ) -> None:
        response = await client.post(
            "/api/v1/documents/upload",
            data=_form(type="nonsense"),
            files=_file(mime="text/plain", content=b""),
            headers=auth_headers("Employee"),
        )
        assert response.status_code == 403
        assert response.json()["error"] == "PERMISSION_DENIED"
        assert document_repo.documents == {}

    async def test_trial_role_forbidden(self, client: AsyncClient, auth_headers) -> None:
        response = await _upload(client, auth_headers("Trial"))
        assert response.status_code == 403

    async def test_no_token_unauthorized(self, client: AsyncClient) -> None:
        response = await _upload(client, {})
        assert response.status_code == 401

    async def test_unsupported_type(self, client: AsyncClient, auth_headers) -> None:
        response = await client.post(
            "/api/v1/documents/upload",
            data=_form(),
            files=_file(name="run.exe", mime="application/x-msdownload"),
            headers=auth_headers("Admin"),
        )
        assert response.status_code == 415
        assert response.json()["error"] == "UNSUPPORTED_FILE_TYPE"

    async def test_empty_file(self, client: AsyncClient, auth_headers) -> None:
        response = await client.post(
            "/api/v1/documents/upload",
            data=_form(),
            files=_file(content=b""),
            headers=auth_headers("Admin"),
        )
        assert response.status_code == 400
        assert response.json()["error"] == "EMPTY_FILE"

    async def test_too_large_reported_before_type(
        self, client: AsyncClient, auth_headers
    ) -> None:
        app.dependency_overrides[get_file_validator] = lambda: FileValidator(max_size=8)
        response = await client.post(
            "/api/v1/documents/upload",
            data=_form(),
            files=_file(content=b"x" * 9, mime="text/plain"),
            headers=auth_headers("Admin"),
        )
        assert response.status_code == 413
        assert response.json()["error"] == "FILE_TOO_LARGE"

    async def test_invalid_category(self, client: AsyncClient, auth_headers) -> None:
        response = await _upload(client, auth_headers("Admin"), type="tz")
        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_CATEGORY"

    async def test_missing_construction(self, client: AsyncClient, auth_headers) -> None:
        response = await _upload(client, auth_headers("Admin"), constructionId=None)
        assert response.status_code == 400
        assert response.json()["error"] == "MISSING_REFERENCE"

    async def test_missing_file(self, client: AsyncClient, auth_headers) -> None:
        response = await client.post(
            "/api/v1/documents/upload", data=_form(), headers=auth_headers("Admin")
        )
        assert response.status_code == 400
        assert response.json()["details"] == {"field": "file"}

    async def test_unknown_construction(self, client: AsyncClient, auth_headers) -> None:
        response = await _upload(client, auth_headers("Admin"), constructionId="nope")
        assert response.status_code == 404

    async def test_project_upload(self, client: AsyncClient, auth_headers) -> None:
        response = await client.post(
            "/api/v1/documents/project/upload",
            data={"type": "contract", "projectId": "p1", "context": "project_doc"},
            files=_file(name="contract.pdf"),
            headers=auth_headers("Manager"),
        )
        assert response.status_code == 201
        body = response.json()
        assert body["category"] == "contract"
        assert body["constructionId"] is None
        assert body["version"] == 1


class TestReplace:
    async def test_replace_creates_next_version(
        self, client: AsyncClient, auth_headers, document_repo
    ) -> None:
        document_repo.documents["d4"] = make_document("d4", version=4)
        response = await client.put(
            "/api/v1/documents/d4",
            files=_file(name="plan-rev.pdf"),
            headers=auth_headers("Manager"),
        )
        assert response.status_code == 201
        assert response.headers["X-Document-Version"] == "5"
        new_doc = response.json()
        assert new_doc["version"] == 5

        listing = await client.get(
            "/api/v1/documents/construction/c1", headers=auth_headers("Employee")
        )
        versions = sorted(d["version"] for d in listing.json())
        assert versions == [4, 5]

    async def test_replace_missing(self, client: AsyncClient, auth_headers) -> None:
        response = await client.put(
            "/api/v1/documents/ghost", files=_file(), headers=auth_headers("Admin")
        )
        assert response.status_code == 404

    async def test_replace_forbidden_for_employee(
        self, client: AsyncClient, auth_headers, document_repo
    ) -> None:
        document_repo.documents["d1"] = make_document("d1")
        response = await client.put(
            "/api/v1/documents/d1", files=_file(), headers=auth_headers("Employee")
        )
        assert response.status_code == 403


class TestDelete:
    async def test_delete_then_repeat_is_404(
        self, client: AsyncClient, auth_headers
    ) -> None:
        created = (await _upload(client, auth_headers("Admin"))).json()
        first = await client.delete(
            f"/api/v1/documents/{created['id']}", headers=auth_headers("Admin")
        )
        assert first.status_code == 204
        second = await client.delete(
            f"/api/v1/documents/{created['id']}", headers=auth_headers("Admin")
        )
        assert second.status_code == 404

    async def test_delete_forbidden_for_employee(
        self, client: AsyncClient, auth_headers, document_repo
    ) -> None:
        document_repo.documents["d1"] = make_document("d1")
        response = await client.delete(
            "/api/v1/documents/d1", headers=auth_headers("Employee")
        )
        assert response.status_code == 403
        assert "d1" in document_repo.documents


class TestQueries:
    async def test_versions_endpoint(
        self, client: AsyncClient, auth_headers, document_repo
    ) -> None:
        for doc in (
            make_document("w2", version=2, minutes=2),
            make_document("p2", category="project_documentation", version=2, minutes=3),
            make_document("w1", version=1, minutes=1),
        ):
            document_repo.documents[doc.id] = doc
        response = await client.get(
            "/api/v1/documents/construction/c1/versions",
            headers=auth_headers("Employee"),
        )
        assert response.status_code == 200
        body = response.json()
        assert body["latestVersion"] == 2
        assert body["nextVersion"] == 3
        assert [g["versionNumber"] for g in body["versions"]] == [2, 1]
        v1 = body["versions"][1]["documentsByCategory"]
        assert [d["id"] for d in v1["working_documentation"]] == ["w1"]
        assert v1["project_documentation"] == []

    async def test_empty_construction_listing(
        self, client: AsyncClient, auth_headers
    ) -> None:
        response = await client.get(
            "/api/v1/documents/construction/c9", headers=auth_headers("Employee")
        )
        assert response.status_code == 200
        assert response.json() == []

    async def test_filtered_listing(
        self, client: AsyncClient, auth_headers, document_repo
    ) -> None:
        document_repo.documents["a"] = make_document("a", context="initial_data")
        document_repo.documents["b"] = make_document("b", context="project_doc")
        response = await client.get(
            "/api/v1/documents",
            params={"constructionId": "c1", "context": "project_doc"},
            headers=auth_headers("Employee"),
        )
        assert [d["id"] for d in response.json()] == ["b"]

    async def test_listing_without_scope(self, client: AsyncClient, auth_headers) -> None:
        response = await client.get(
            "/api/v1/documents", params={"category": "tz"}, headers=auth_headers("Admin")
        )
        assert response.status_code == 400

    async def test_get_metadata(
        self, client: AsyncClient, auth_headers, document_repo
    ) -> None:
        document_repo.documents["d1"] = make_document("d1", version=None)
        response = await client.get("/api/v1/documents/d1", headers=auth_headers("Employee"))
        assert response.status_code == 200
        assert response.json()["fileName"] == "plan.pdf"

    async def test_get_metadata_denied_for_customer(
        self, client: AsyncClient, auth_headers, document_repo
    ) -> None:
        document_repo.documents["d1"] = make_document("d1")
        response = await client.get("/api/v1/documents/d1", headers=auth_headers("Customer"))
        assert response.status_code == 403

    async def test_download_superseded_version(
        self, client: AsyncClient, auth_headers
    ) -> None:
        created = (await _upload(client, auth_headers("Admin"))).json()
        await client.put(
            f"/api/v1/documents/{created['id']}",
            files=_file(content=b"%PDF revised"),
            headers=auth_headers("Admin"),
        )
        response = await client.get(
            f"/api/v1/documents/{created['id']}/download",
            headers=auth_headers("Employee"),
        )
        assert response.status_code == 200
        assert response.content == PDF
        assert response.headers["content-type"] == "application/pdf"
        assert "plan.pdf" in response.headers["content-disposition"]


async def test_request_size_limit_middleware() -> None:
    """Bodies over the limit are answered with 413 before reaching the app."""

    async def echo(scope, receive, send):
        await send({"type": "http.response.start", "status": 200, "headers": []})
        await send({"type": "http.response.body", "body": b"ok"})

    limited = RequestSizeLimitMiddleware(echo, max_bytes=10)
    async with AsyncClient(transport=ASGITransport(app=limited), base_url="http://t") as c:
        ok = await c.post("/", content=b"x" * 10)
        too_big = await c.post("/", content=b"x" * 11)
    assert ok.status_code == 200
    assert too_big.status_code == 413
    assert too_big.json()["error"] == "FILE_TOO_LARGE"


async def test_request_size_limit_reports_authorize_verdict_first() -> None:
    async def echo(scope, receive, send):
        await send({"type": "http.response.start", "status": 200, "headers": []})
        await send({"type": "http.response.body", "body": b"ok"})

    def deny(scope):
        return PermissionDeniedException("upload_document", "Employee")

    limited = RequestSizeLimitMiddleware(echo, max_bytes=10, authorize=deny)
    async with AsyncClient(transport=ASGITransport(app=limited), base_url="http://t") as c:
        small = await c.post("/", content=b"x" * 5)
        too_big = await c.post("/", content=b"x" * 11)
    assert small.status_code == 200
    assert too_big.status_code == 403
    assert too_big.json()["error"] == "PERMISSION_DENIED"


@pytest.mark.skipif(bool(os.environ.get("DATABASE_URL")), reason="database configured")
async def test_sql_not_configured_returns_503(raw_client: AsyncClient, auth_headers) -> None:
    response = await raw_client.get(
        "/api/v1/documents/construction/c1", headers=auth_headers("Admin")
    )
    assert response.status_code == 503
    assert response.json()["error"] == "SERVICE_UNAVAILABLE"


@pytest.fixture
async def small_limit_client(monkeypatch, storage, document_repo, construction_repo):
    """App built with a 1 KiB upload limit so oversized bodies stay cheap to send."""
    monkeypatch.setenv("MAX_UPLOAD_SIZE", "1024")
    monkeypatch.setenv("MULTIPART_OVERHEAD_BYTES", "512")
    get_settings.cache_clear()
    limited_app = create_app()
    limited_app.dependency_overrides[get_storage_service] = lambda: storage
    limited_app.dependency_overrides[get_document_repo_for_write] = lambda: document_repo
    limited_app.dependency_overrides[get_construction_repo_for_write] = (
        lambda: construction_repo
    )
    transport = ASGITransport(app=limited_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    get_settings.cache_clear()


class TestOversizedBody:
    """Bodies over the transport limit still report auth and permission first."""

    BIG = b"%PDF" + b"x" * 8192

    async def test_employee_upload_denied_not_too_large(
        self, small_limit_client: AsyncClient, auth_headers, document_repo
    ) -> None:
        response = await small_limit_client.post(
            "/api/v1/documents/upload",
            data=_form(),
            files=_file(content=self.BIG),
            headers=auth_headers("Employee"),
        )
        assert response.status_code == 403
        assert response.json()["error"] == "PERMISSION_DENIED"
        assert document_repo.documents == {}

    async def test_employee_replace_denied_not_too_large(
        self, small_limit_client: AsyncClient, auth_headers
    ) -> None:
        response = await small_limit_client.put(
            "/api/v1/documents/d1",
            files=_file(content=self.BIG),
            headers=auth_headers("Employee"),
        )
        assert response.status_code == 403

    async def test_missing_token_unauthorized(
        self, small_limit_client: AsyncClient
    ) -> None:
        response = await small_limit_client.post(
            "/api/v1/documents/upload", data=_form(), files=_file(content=self.BIG)
        )
        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    async def test_manager_gets_file_too_large(
        self, small_limit_client: AsyncClient, auth_headers
    ) -> None:
        response = await small_limit_client.post(
            "/api/v1/documents/upload",
            data=_form(),
            files=_file(content=self.BIG),
            headers=auth_headers("Manager"),
        )
        assert response.status_code == 413
        assert response.json()["error"] == "FILE_TOO_LARGE"
