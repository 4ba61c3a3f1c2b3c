"""
API Tests - Health and errors
"""


class TestHealth:
    """/health endpoints"""

    async def test_health_reports_database(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["environment"] == "testing"
        assert body["checks"]["database"]["status"] == "healthy"

    async def test_liveness(self, client):
        response = await client.get("/health/live")

        assert response.json() == {"status": "alive"}

    async def test_readiness(self, client):
        response = await client.get("/health/ready")

        assert response.status_code == 200
        assert response.json() == {"status": "ready"}


class TestErrorEnvelope:
    """Framework errors use the same error body"""

    async def test_unknown_route(self, client):
        response = await client.get("/no/such/route")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "HTTP_404"

    async def test_malformed_json(self, client):
        response = await client.post(
            "/customers",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VAL_02"

    async def test_responses_carry_request_id(self, client):
        response = await client.get("/health/live", headers={"X-Request-ID": "abc-123"})

        assert response.headers["X-Request-ID"] == "abc-123"
        assert response.headers["X-Content-Type-Options"] == "nosniff"
