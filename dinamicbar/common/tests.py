"""
Tests de los middlewares comunes
"""


class TestMiddleware:

    def test_security_headers_present(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        # HSTS solo en producción
        assert "Strict-Transport-Security" not in response.headers

    def test_process_time_header(self, client):
        response = client.get("/health")
        assert float(response.headers["X-Process-Time"]) >= 0
