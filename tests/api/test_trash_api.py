"""
Tests for the trash and project API routes.

The routers run against the in-memory store via dependency overrides.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api import deps
from src.api.routes import projects, trash
from src.app_shell.context import ServiceContext

# --- Test Setup ---


@pytest.fixture
def app(memory_ctx: ServiceContext) -> FastAPI:
    """Test FastAPI app with project and trash routes."""
    app = FastAPI()
    app.include_router(projects.router, prefix="/api/projects")
    app.include_router(trash.router, prefix="/api/trash")
    app.dependency_overrides[deps.get_store] = lambda: memory_ctx.store
    app.dependency_overrides[deps.get_clock] = lambda: memory_ctx.clock
    app.dependency_overrides[deps.get_rules] = lambda: memory_ctx.rules
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def launch(client: TestClient) -> dict[str, Any]:
    """Project "Launch" with files A.md and B.png, created over HTTP."""
    project = client.post("/api/projects", json={"name": "Launch", "budget": 500}).json()
    for name, file_type in [("A.md", "document"), ("B.png", "image")]:
        response = client.post(
            f"/api/projects/{project['id']}/files",
            json={"name": name, "type": file_type, "content": "data"},
        )
        assert response.status_code == 201
    return project


# --- Delete / Restore ---


class TestProjectCascade:
    def test_delete_and_restore_project(self, client: TestClient, launch: dict[str, Any]) -> None:
        response = client.post(f"/api/trash/projects/{launch['id']}", json={"deleted_by": "u1"})
        assert response.status_code == 201
        snapshot_id = response.json()["id"]

        assert client.get(f"/api/projects/{launch['id']}").status_code == 404
        trashed = client.get("/api/trash/projects").json()
        assert len(trashed) == 1
        assert len(trashed[0]["associated_files"]) == 2
        assert len(client.get("/api/trash/files").json()) == 2

        response = client.post(f"/api/trash/projects/{snapshot_id}/restore")
        assert response.status_code == 200
        new_id = response.json()["id"]

        assert new_id != launch["id"]
        files = client.get(f"/api/projects/{new_id}/files").json()
        assert {f["project_id"] for f in files} == {new_id}
        assert len(files) == 2
        assert client.get("/api/trash/projects").json() == []

    def test_delete_missing_project_is_404(self, client: TestClient) -> None:
        response = client.post("/api/trash/projects/00000000-0000-0000-0000-000000000000")
        assert response.status_code == 404


class TestFileRestore:
    def test_restore_into_trashed_project_is_409(
        self, client: TestClient, launch: dict[str, Any]
    ) -> None:
        client.post(f"/api/trash/projects/{launch['id']}")
        snapshot = client.get("/api/trash/files").json()[0]

        response = client.post(f"/api/trash/files/{snapshot['id']}/restore")

        assert response.status_code == 409
        assert response.json()["detail"]["code"] == "target_missing"
        assert len(client.get("/api/trash/files").json()) == 2

    def test_restore_into_target_project(
        self, client: TestClient, launch: dict[str, Any]
    ) -> None:
        archive = client.post("/api/projects", json={"name": "Archive"}).json()
        file = client.get(f"/api/projects/{launch['id']}/files").json()[0]
        snapshot_id = client.post(f"/api/trash/files/{file['id']}").json()["id"]

        response = client.post(
            f"/api/trash/files/{snapshot_id}/restore",
            json={"target_project_id": archive["id"]},
        )

        assert response.status_code == 200
        assert len(client.get(f"/api/projects/{archive['id']}/files").json()) == 1

    def test_purge_then_restore_is_404(self, client: TestClient, launch: dict[str, Any]) -> None:
        file = client.get(f"/api/projects/{launch['id']}/files").json()[0]
        snapshot_id = client.post(f"/api/trash/files/{file['id']}").json()["id"]

        assert client.delete(f"/api/trash/files/{snapshot_id}").status_code == 200
        assert client.post(f"/api/trash/files/{snapshot_id}/restore").status_code == 404


# --- Stats / Sweep ---


class TestStatsAndCleanup:
    def test_stats(self, client: TestClient, launch: dict[str, Any]) -> None:
        client.post(f"/api/trash/projects/{launch['id']}")

        stats = client.get("/api/trash/stats").json()

        assert stats["project_count"] == 1
        assert stats["file_count"] == 2
        assert stats["total_size"] == 8
        assert stats["items_near_expiry_count"] == 0

    def test_cleanup_removes_expired(
        self, client: TestClient, launch: dict[str, Any], memory_ctx: ServiceContext
    ) -> None:
        client.post(f"/api/trash/projects/{launch['id']}")
        memory_ctx.clock.advance(timedelta(days=31))  # type: ignore[attr-defined]

        result = client.post("/api/trash/cleanup").json()

        assert result == {"deleted_projects_count": 1, "deleted_files_count": 2, "total_cleaned": 3}
