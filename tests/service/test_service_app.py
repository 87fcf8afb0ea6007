"""Tests for the FastAPI service mode."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from color_inspector.orchestrator import ColorInspector
from color_inspector.service import create_app
from tests._fixtures.workspace_builder import WorkspaceBuilder


class _RecordingInspector(ColorInspector):
    def __init__(self) -> None:
        super().__init__()
        self.calls: list[dict[str, object]] = []

    def scan(self, root, workspace=None, *, max_files=None):  # type: ignore[override]
        self.calls.append({"root": root, "workspace": workspace, "max_files": max_files})
        return super().scan(root, workspace, max_files=max_files)


@pytest.fixture
def inspector() -> _RecordingInspector:
    return _RecordingInspector()


@pytest.fixture
def client(inspector: _RecordingInspector) -> TestClient:
    return TestClient(create_app(lambda: inspector))


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_scan_endpoint_returns_inventory(
    client: TestClient,
    inspector: _RecordingInspector,
    workspace_builder: WorkspaceBuilder,
) -> None:
    workspace_builder.write(
        {
            "main.css": """
                :root { --border: #aabbcc; }
                .pair-card { border: 1px solid var(--border); color: #FFF; }
            """
        }
    )

    response = client.post(
        "/scan",
        json={
            "root": str(workspace_builder.path("main.css")),
            "workspace": str(workspace_builder.path()),
            "max_files": 5,
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["root"] == "main.css"
    assert data["total_colors"] == 2
    assert data["truncated"] is False
    group = data["groups"][0]
    assert group["file"] == "main.css"
    variable = group["entries"][0]
    assert variable["name"] == "--border"
    assert variable["usages"][0]["scope"] == ".pair-card"
    assert inspector.calls[0]["max_files"] == 5


def test_scan_endpoint_maps_missing_root_to_404(
    client: TestClient, workspace_builder: WorkspaceBuilder
) -> None:
    response = client.post(
        "/scan",
        json={
            "root": str(workspace_builder.path("missing.css")),
            "workspace": str(workspace_builder.path()),
        },
    )

    assert response.status_code == 404
    assert "Root file not found" in response.json()["detail"]


def test_scan_endpoint_maps_config_errors_to_400(
    client: TestClient, workspace_builder: WorkspaceBuilder
) -> None:
    workspace_builder.write(
        {
            "main.css": ".a { color: #fff; }\n",
            ".color-inspector.yml": "report:\n  format: pdf\n",
        }
    )

    response = client.post(
        "/scan",
        json={
            "root": str(workspace_builder.path("main.css")),
            "workspace": str(workspace_builder.path()),
        },
    )

    assert response.status_code == 400
    assert "report.format" in response.json()["detail"]


def test_scan_endpoint_validates_max_files(client: TestClient) -> None:
    response = client.post("/scan", json={"root": "main.css", "max_files": 0})
    assert response.status_code == 422
