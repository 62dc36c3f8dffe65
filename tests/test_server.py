from fastapi.testclient import TestClient

from fieldmap_sql.server import create_app


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_generate_query(client: TestClient) -> None:
    response = client.post("/api/v1/generate-query", json={"description": "Get user emails", "system": "default"})
    assert response.status_code == 200
    body = response.json()
    assert "users.email" in body["query"]
    assert body["matched_fields"]
    assert body["confidence"] > 0
    assert set(body) == {"query", "matched_fields", "joins_used", "confidence", "processing_time_ms"}


def test_generate_query_with_limit(client: TestClient) -> None:
    response = client.post("/api/v1/generate-query", json={"description": "Get user orders", "limit": 10})
    assert response.status_code == 200
    assert "LIMIT 10" in response.json()["query"]


def test_joins_are_reported_with_direction(client: TestClient) -> None:
    response = client.post(
        "/api/v1/generate-query",
        json={"description": "get order line item identifiers with product display name", "system": "SystemB"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["joins_used"] == [
        {
            "from": "order_items",
            "to": "products",
            "condition": "order_items.product_id = products.product_id",
        }
    ]
    aliases = {m["column_name"]: m["system_alias"] for m in body["matched_fields"]}
    assert aliases["name"] == "display_name"


def test_empty_description_is_rejected(client: TestClient) -> None:
    assert client.post("/api/v1/generate-query", json={"description": ""}).status_code == 422
    assert client.post("/api/v1/generate-query", json={"description": "   "}).status_code == 422
    assert client.post("/api/v1/generate-query", json={}).status_code == 422


def test_negative_limit_is_rejected(client: TestClient) -> None:
    response = client.post("/api/v1/generate-query", json={"description": "user emails", "limit": -1})
    assert response.status_code == 422


def test_no_matches_is_reported(client: TestClient) -> None:
    response = client.post("/api/v1/generate-query", json={"description": "xyz12345 nonexistent fields"})
    assert response.status_code == 400
    assert "no matching fields found" in response.json()["detail"]


def test_list_fields(client: TestClient) -> None:
    response = client.get("/api/v1/fields")
    assert response.status_code == 200
    fields = response.json()["fields"]
    assert len(fields) == 17
    assert {"column_name", "table_name", "system_a_fieldmap", "field_description"} <= set(fields[0])


def test_list_fields_for_system(client: TestClient) -> None:
    everything = client.get("/api/v1/fields").json()["fields"]
    system_b = client.get("/api/v1/fields", params={"system": "system_b"}).json()["fields"]
    assert 0 < len(system_b) < len(everything)
    assert all(f["system_b_fieldmap"] for f in system_b)


def test_injected_generator(scenario_generator) -> None:
    client = TestClient(create_app(generator=scenario_generator))
    response = client.post("/api/v1/generate-query", json={"description": "get user emails"})
    assert response.json()["query"] == "SELECT users.email FROM users u"
