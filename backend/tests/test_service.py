from __future__ import annotations

from datetime import datetime

from fastapi.testclient import TestClient

from core.config import Settings
from main import create_app


def test_health(client) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    datetime.fromisoformat(body["timestamp"].replace("Z", "+00:00"))


def test_metrics_count_requests_by_route(client) -> None:
    client.get("/health")
    client.get("/entries/abc")

    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    text = resp.text
    assert 'http_requests_total{method="GET",route="/health",status="200"} 1.0' in text
    assert 'http_requests_total{method="GET",route="/entries/{entry_id}",status="404"} 1.0' in text
    assert "http_request_duration_seconds_bucket" in text


def test_metrics_label_routes_with_their_full_template(client) -> None:
    client.get("/entries")
    client.get("/entries/1")
    client.get("/stats")
    client.get("/stats/daily")
    client.get("/stats/locations")

    text = client.get("/metrics").text
    assert 'http_requests_total{method="GET",route="/entries",status="200"} 1.0' in text
    assert 'http_requests_total{method="GET",route="/entries/{entry_id}",status="404"} 1.0' in text
    assert 'http_requests_total{method="GET",route="/stats",status="200"} 1.0' in text
    assert 'http_requests_total{method="GET",route="/stats/daily",status="200"} 1.0' in text
    assert 'http_requests_total{method="GET",route="/stats/locations",status="200"} 1.0' in text
    assert 'route="/daily"' not in text
    assert 'route=""' not in text


def test_unmatched_paths_share_one_label(client) -> None:
    for path in ("/nope", "/random/a1b2", "/random/c3d4"):
        assert client.get(path).status_code == 404

    text = client.get("/metrics").text
    assert 'http_requests_total{method="GET",route="unmatched",status="404"} 3.0' in text
    assert "/random" not in text
    assert 'route="/nope"' not in text


def test_each_app_has_its_own_registry(settings) -> None:
    with TestClient(create_app(settings)) as first:
        first.get("/health")
    with TestClient(create_app(settings)) as second:
        text = second.get("/metrics").text
    assert 'route="/health"' not in text


def test_unknown_route_uses_error_body(client) -> None:
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert set(resp.json()) == {"error"}


def test_cors_headers_are_sent(client) -> None:
    resp = client.get("/health", headers={"Origin": "http://example.com"})
    assert "access-control-allow-origin" in resp.headers


def test_store_outage_maps_to_500(tmp_path) -> None:
    settings = Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'entries.db'}")
    with TestClient(create_app(settings)) as client:
        assert client.get("/health").status_code == 200

        for path, message in (
            ("/entries", "Failed to fetch entries"),
            ("/entries/1", "Failed to fetch entry"),
            ("/stats", "Failed to fetch stats"),
            ("/stats/daily", "Failed to fetch daily stats"),
            ("/stats/locations", "Failed to fetch location stats"),
        ):
            resp = client.get(path)
            assert resp.status_code == 500, path
            assert resp.json() == {"error": message}

        resp = client.post("/entries", json={"quantity": 1, "location": "Home"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "Failed to create entry"}
