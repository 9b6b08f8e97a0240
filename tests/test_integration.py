import csv
import io

import httpx
import pytest
from fastapi.testclient import TestClient

from kwikmaps.config import settings
from kwikmaps.main import create_app
from kwikmaps.services.insights import advisor, narrative
from kwikmaps.services.insights.groq_client import CompletionServiceError, GroqClient


class DummyCompletions:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error

    def complete(self, messages, *, temperature, max_tokens):
        if self.error is not None:
            raise self.error
        return self.reply


def _waypoints(coords) -> list[dict]:
    return [
        {"id": f"W{index}", "name": f"Stop {index}", "latitude": lat, "longitude": lon}
        for index, (lat, lon) in enumerate(coords)
    ]


@pytest.fixture
def api_client() -> TestClient:
    return TestClient(create_app())


def test_root_and_health(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(settings, "groq_api_key", None)

    root = api_client.get("/")
    assert root.status_code == 200
    assert root.json()["status"] == "running"

    assert api_client.get("/api/health").json() == {"status": "ok"}

    insights = api_client.get("/api/health/insights").json()
    assert insights["service"] == "insights"
    assert insights["configured"] is False


def test_optimize_endpoint_returns_route_and_insights(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(narrative, "GroqClient", lambda: DummyCompletions(reply="Enjoy the drive."))

    response = api_client.post(
        "/api/routes/optimize",
        json={"waypoints": _waypoints([(0.0, 0.0), (1.0, 1.0), (0.0, 1.0), (1.0, 0.0)])},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert [stop["order"] for stop in payload["optimized_route"]] == [1, 2, 3, 4]
    assert payload["optimized_route"][0]["id"] == "W0"
    assert sorted(stop["id"] for stop in payload["optimized_route"]) == ["W0", "W1", "W2", "W3"]
    assert len(payload["legs"]) == 3
    assert payload["total_distance_km"] == pytest.approx(sum(leg["distance_km"] for leg in payload["legs"]), abs=0.15)
    assert payload["ai_insights"] == "Enjoy the drive."
    assert payload["metadata"]["waypoint_count"] == 4


def test_optimize_endpoint_survives_insights_failure(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(narrative, "GroqClient", lambda: DummyCompletions(error=CompletionServiceError("down")))

    response = api_client.post("/api/routes/optimize", json={"waypoints": _waypoints([(0.0, 0.0), (0.0, 1.0)])})

    assert response.status_code == 200
    payload = response.json()
    assert payload["total_distance_km"] == 111.2
    assert payload["ai_insights"] == narrative.FALLBACK_UNAVAILABLE


def test_optimize_endpoint_csv_format(api_client: TestClient):
    response = api_client.post(
        "/api/routes/optimize",
        params={"format": "csv"},
        json={"waypoints": _waypoints([(0.0, 0.0), (0.0, 1.0)]), "include_insights": False},
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    rows = list(csv.DictReader(io.StringIO(response.text)))
    assert [row["order"] for row in rows] == ["1", "2"]


def test_optimize_endpoint_rejects_single_waypoint(api_client: TestClient):
    response = api_client.post(
        "/api/routes/optimize",
        json={"waypoints": _waypoints([(0.0, 0.0)]), "include_insights": False},
    )

    assert response.status_code == 400
    assert "At least 2 waypoints" in response.json()["detail"]


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"waypoints": "not-a-list"},
        {"waypoints": [{"name": "Nowhere", "latitude": 91.0, "longitude": 0.0}, {"name": "B", "latitude": 0, "longitude": 0}]},
        {"waypoints": [{"name": "", "latitude": 0.0, "longitude": 0.0}, {"name": "B", "latitude": 0, "longitude": 0}]},
        {"waypoints": [{"name": "A", "latitude": 0.0}, {"name": "B", "latitude": 0, "longitude": 0}]},
    ],
)
def test_optimize_endpoint_rejects_malformed_input(api_client: TestClient, body: dict):
    response = api_client.post("/api/routes/optimize", json=body)

    assert response.status_code == 422


def test_evaluate_endpoint(api_client: TestClient):
    response = api_client.post(
        "/api/routes/evaluate",
        json={"waypoints": _waypoints([(0.0, 0.0), (0.0, 2.0), (0.0, 1.0)])},
    )

    assert response.status_code == 200
    payload = response.json()
    assert [stop["id"] for stop in payload["optimized_route"]] == ["W0", "W1", "W2"]
    assert payload["total_distance_km"] == 333.6


def test_chat_endpoint_returns_route_update(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(advisor, "GroqClient", lambda: DummyCompletions(reply="Swapped.\nROUTE_UPDATE:[2,1]"))

    response = api_client.post(
        "/api/routes/chat",
        json={
            "message": "Start at stop 2",
            "current_route": _waypoints([(0.0, 0.0), (0.0, 1.0)]),
            "conversation_history": [{"role": "user", "content": "Hi"}],
        },
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["reply"] == "Swapped."
    assert [stop["id"] for stop in payload["route_update"]["optimized_route"]] == ["W1", "W0"]
    assert payload["route_update"]["total_distance_km"] == 111.2


def test_chat_endpoint_without_provider(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(settings, "groq_api_key", None)

    response = api_client.post(
        "/api/routes/chat",
        json={"message": "Hi", "current_route": _waypoints([(0.0, 0.0), (0.0, 1.0)])},
    )

    assert response.status_code == 503


def test_chat_endpoint_provider_failure(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(advisor, "GroqClient", lambda: DummyCompletions(error=CompletionServiceError("down")))

    response = api_client.post(
        "/api/routes/chat",
        json={"message": "Hi", "current_route": _waypoints([(0.0, 0.0), (0.0, 1.0)])},
    )

    assert response.status_code == 502
    assert response.json()["detail"] == "AI service error"


def test_optimize_endpoint_survives_undecodable_insights_reply(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, headers={"Content-Encoding": "gzip"}, stream=httpx.ByteStream(b"not-gzip"))

    monkeypatch.setattr(
        narrative,
        "GroqClient",
        lambda: GroqClient(api_key="test-key", max_retries=0, transport=httpx.MockTransport(handler)),
    )

    response = api_client.post(
        "/api/routes/optimize",
        json={"waypoints": _waypoints([(0.0, 0.0), (0.0, 2.0), (0.0, 1.0)])},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["total_distance_km"] == 222.4
    assert payload["ai_insights"] == narrative.FALLBACK_UNAVAILABLE


def test_chat_endpoint_rejects_too_many_waypoints(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(settings, "max_waypoints", 3)

    def fail_client():
        raise AssertionError("provider should not be contacted")

    monkeypatch.setattr(advisor, "GroqClient", fail_client)

    response = api_client.post(
        "/api/routes/chat",
        json={"message": "Hi", "current_route": _waypoints([(0.0, float(i)) for i in range(5)])},
    )

    assert response.status_code == 400
    assert "Too many waypoints" in response.json()["detail"]
