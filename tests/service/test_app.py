"""Tests for the FastAPI service mode."""

from __future__ import annotations

import pytest

try:
    from fastapi.testclient import TestClient
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    pytest.skip("fastapi not installed", allow_module_level=True)

from testgen.service import create_app
from tests._fixtures.stubs import StubOrchestrator


@pytest.fixture
def orchestrator() -> StubOrchestrator:
    return StubOrchestrator()


@pytest.fixture
def client(orchestrator: StubOrchestrator) -> TestClient:
    return TestClient(create_app(lambda: orchestrator))


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_analyze_endpoint(client: TestClient) -> None:
    response = client.post("/analyze", json={"filePath": "src/Button.tsx", "projectRoot": "/repo"})

    assert response.status_code == 200
    assert response.json()["componentName"] == "Button"


def test_generate_endpoint(client: TestClient, orchestrator: StubOrchestrator) -> None:
    response = client.post(
        "/generate",
        json={"filePath": "src/Button.tsx", "projectRoot": "/repo", "verify": False},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "skipped"
    assert data["iterations"] == 0
    assert data["test_path"].endswith("Button.test.tsx")
    assert orchestrator.calls[-1][-1] is False


def test_missing_component_maps_to_404(client: TestClient) -> None:
    response = client.post("/analyze", json={"filePath": "src/Nope.tsx", "projectRoot": "/repo"})

    assert response.status_code == 404
    assert "Component file not found" in response.json()["detail"]


def test_rpc_endpoint_shares_dispatcher(client: TestClient) -> None:
    response = client.post("/rpc", json={"jsonrpc": "2.0", "id": 3, "method": "tools/list"})

    assert response.status_code == 200
    assert response.json()["id"] == 3
    assert len(response.json()["result"]["tools"]) == 3


def test_rpc_notification_has_empty_response(client: TestClient) -> None:
    response = client.post("/rpc", json={"jsonrpc": "2.0", "method": "notifications/initialized"})

    assert response.status_code == 204
