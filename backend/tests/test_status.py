from fastapi.testclient import TestClient

from app.main import app


def _pdf():
    return ("ficheiros", ("file.pdf", b"%PDF-1.4", "application/pdf"))


class TestOrderStatus:
    def test_status_of_submitted_order(self, client, auth):
        upload = client.post(
            "/api/upload",
            data={"nome": "Ana Silva", "email": "ana@example.com", "comentarios": "Néon LED"},
            files=[_pdf()],
            headers=auth,
        )
        order_id = upload.json()["data"]["orderId"]

        r = client.get(f"/api/status/{order_id}")
        assert r.status_code == 200
        data = r.json()["data"]
        assert data["orderId"] == order_id
        assert data["name"] == "Ana Silva"
        assert data["description"] == "Néon LED"
        assert data["recordId"] == "rec001"

    def test_unknown_order(self, client):
        r = client.get("/api/status/17290000000009999")
        assert r.status_code == 404
        assert r.json() == {"success": False, "error": "Encomenda não encontrada.", "code": "ORDER_NOT_FOUND"}

    def test_store_not_configured(self, client, fakes):
        fakes.repository.configured = False
        r = client.get("/api/status/17290000000009999")
        assert r.status_code == 503
        assert r.json()["code"] == "SERVICE_UNAVAILABLE"

    def test_unexpected_error_returns_generic_500(self, client, fakes):
        async def broken_find(order_id):
            raise RuntimeError("socket exploded at 0xdeadbeef")

        fakes.repository.find_order = broken_find
        c = TestClient(app, raise_server_exceptions=False)
        r = c.get("/api/status/123")
        assert r.status_code == 500
        assert r.json()["code"] == "INTERNAL_SERVER_ERROR"
        assert "deadbeef" not in r.text


class TestFrameworkErrors:
    def test_unknown_route_uses_error_envelope(self, client):
        r = client.get("/api/nothing-here")
        assert r.status_code == 404
        assert r.json() == {"success": False, "error": "Recurso não encontrado.", "code": "NOT_FOUND"}

    def test_wrong_method_keeps_allow_header(self, client):
        r = client.get("/api/upload")
        assert r.status_code == 405
        assert r.json()["code"] == "METHOD_NOT_ALLOWED"
        assert r.json()["success"] is False
        assert r.headers["allow"] == "POST"

    def test_unparseable_multipart_body(self, client, auth):
        r = client.post(
            "/api/upload",
            content=b"not really multipart",
            headers={**auth, "Content-Type": "multipart/form-data"},
        )
        assert r.status_code == 400
        assert r.json()["code"] == "BAD_REQUEST"
        assert "detail" not in r.json()
