from __future__ import annotations

from fastapi.testclient import TestClient

from main import create_app


def _create(client, **body):
    return client.post("/entries", json=body)


def test_create_entry_returns_full_row(client) -> None:
    resp = _create(client, quantity=2, location="Home")
    assert resp.status_code == 201

    body = resp.json()
    assert isinstance(body["id"], int) and body["id"] > 0
    assert body["quantity"] == 2
    assert body["location"] == "Home"
    assert body["notes"] is None
    assert body["created_at"] == body["updated_at"]


def test_created_entry_can_be_fetched(client) -> None:
    created = _create(client, quantity=3, location="Office", notes="Morning break").json()

    resp = client.get(f"/entries/{created['id']}")
    assert resp.status_code == 200
    fetched = resp.json()
    assert fetched["quantity"] == 3
    assert fetched["location"] == "Office"
    assert fetched["notes"] == "Morning break"
    assert fetched["created_at"] == fetched["updated_at"]


def test_ids_increase_with_each_insert(client) -> None:
    first = _create(client, quantity=1, location="Car").json()
    second = _create(client, quantity=1, location="Car").json()
    assert second["id"] > first["id"]


def test_blank_notes_are_stored_as_null(client) -> None:
    body = _create(client, quantity=1, location="Home", notes="").json()
    assert body["notes"] is None


def test_empty_body_is_rejected_without_creating_a_row(client) -> None:
    resp = client.post("/entries", json={})
    assert resp.status_code == 400
    assert resp.json() == {"error": "quantity and location are required"}

    assert client.get("/entries").json()["count"] == 0


def test_falsy_values_count_as_missing(client) -> None:
    for body in (
        {"quantity": 0, "location": "Home"},
        {"quantity": 1, "location": ""},
        {"quantity": None, "location": "Home"},
        {"quantity": 1},
    ):
        resp = client.post("/entries", json=body)
        assert resp.status_code == 400, body
        assert resp.json() == {"error": "quantity and location are required"}

    assert client.get("/stats").json()["total_entries"] == 0


def test_negative_quantity_is_a_server_error_and_not_stored(client) -> None:
    resp = _create(client, quantity=-1, location="Home")
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to create entry"}

    assert client.get("/entries").json()["count"] == 0


def test_malformed_json_is_a_bad_request(client) -> None:
    resp = client.post("/entries", content="{not json", headers={"content-type": "application/json"})
    assert resp.status_code == 400
    assert set(resp.json()) == {"error"}


def test_unconvertible_values_are_a_server_error_and_not_stored(client) -> None:
    for body in (
        {"quantity": "lots", "location": "Home"},
        {"quantity": 2.5, "location": "Home"},
        {"quantity": True, "location": "Home"},
        {"quantity": 1, "location": {"room": "kitchen"}},
    ):
        resp = client.post("/entries", json=body)
        assert resp.status_code == 500, body
        assert resp.json() == {"error": "Failed to create entry"}

    assert client.get("/entries").json()["count"] == 0


def test_convertible_values_are_stored(client) -> None:
    resp = _create(client, quantity="3", location=123)
    assert resp.status_code == 201
    body = resp.json()
    assert body["quantity"] == 3
    assert body["location"] == "123"


def test_unknown_entry_is_not_found(client) -> None:
    resp = client.get("/entries/99999999")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Entry not found"}


def test_non_numeric_and_out_of_range_ids_are_not_found(client) -> None:
    for entry_id in ("abc", "1.5", "-3", "0", str(2**40)):
        resp = client.get(f"/entries/{entry_id}")
        assert resp.status_code == 404, entry_id
        assert resp.json() == {"error": "Entry not found"}


def test_only_plain_digit_ids_are_looked_up(client) -> None:
    for _ in range(10):
        _create(client, quantity=1, location="Home")
    assert client.get("/entries/10").json()["id"] == 10

    for entry_id in ("1_0", "+10", "%2010", "10%20", "١٠"):
        resp = client.get(f"/entries/{entry_id}")
        assert resp.status_code == 404, entry_id
        assert resp.json() == {"error": "Entry not found"}


def test_list_is_empty_on_a_fresh_database(client) -> None:
    resp = client.get("/entries")
    assert resp.status_code == 200
    assert resp.json() == {"entries": [], "count": 0}


def test_list_returns_newest_first_without_updated_at(client) -> None:
    ids = [_create(client, quantity=q, location="Home").json()["id"] for q in (1, 2, 3)]

    body = client.get("/entries").json()
    assert body["count"] == 3
    assert [e["id"] for e in body["entries"]] == list(reversed(ids))

    first = body["entries"][0]
    assert "updated_at" not in first
    assert set(first) == {"id", "quantity", "location", "notes", "created_at"}

    created = [e["created_at"] for e in body["entries"]]
    assert created == sorted(created, reverse=True)


def test_list_is_capped(settings) -> None:
    settings.entries_list_limit = 2
    with TestClient(create_app(settings)) as client:
        for _ in range(3):
            _create(client, quantity=1, location="Home")
        body = client.get("/entries").json()
    assert body["count"] == 2
    assert len(body["entries"]) == 2
