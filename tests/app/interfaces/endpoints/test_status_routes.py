from fastapi.testclient import TestClient

from mediastream.application.services.status_service import StatusService
from mediastream.domain.models.health_status import HealthStatus
from mediastream.interfaces.service_dependencies import get_status_service
from mediastream.main import app


class BrokenChecker:
    def check(self) -> HealthStatus:
        return HealthStatus(service="storage", status="error", details="read-only")


def test_get_status(client: TestClient) -> None:
    """测试获取应用状态API接口"""
    response = client.get("/api/mediastream/status")
    data = response.json()

    assert response.status_code == 200
    assert data["code"] == 200
    assert {item["service"] for item in data["data"]} >= {"storage", "fastapi"}


def test_get_status_reports_failures(client: TestClient) -> None:
    app.dependency_overrides[get_status_service] = lambda: StatusService([BrokenChecker()])
    try:
        data = client.get("/api/mediastream/status").json()
    finally:
        app.dependency_overrides.pop(get_status_service, None)

    assert data["code"] == 503
    assert data["data"][0]["details"] == "read-only"
