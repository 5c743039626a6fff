async def test_health_ok(client):
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["notification_worker"] is False


async def test_request_id_echoed_and_used_for_correlation(client):
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"
    assert response.headers["X-Correlation-ID"] == "req-123"


async def test_correlation_id_forwarded(client):
    response = await client.get(
        "/api/v1/health",
        headers={"X-Request-ID": "req-1", "X-Correlation-ID": "flow-9"},
    )
    assert response.headers["X-Correlation-ID"] == "flow-9"


async def test_unsafe_request_id_replaced(client):
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "bad id!"})
    assert response.headers["X-Request-ID"] != "bad id!"
