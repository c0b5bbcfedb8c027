"""
Product API Backend: Origin Gate Tests
=======================================

What:  Tests for the single-origin admission check.
How:   The pure predicate is tested directly; the middleware is tested through
       the ASGI app with the product service mocked out.

What we test:
    ✅ Configured origin admitted, with CORS response headers
    ✅ Missing Origin header admitted (same-origin / non-browser)
    ✅ Any other origin refused with 403 before routing or body parsing
    ✅ Preflight requests answered by CORSMiddleware once admitted
    ✅ Empty Origin header treated like an absent one
    ✅ Unset configuration admits no cross-origin caller
"""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from app.config import settings
from app.middleware.origin_gate import OriginGateMiddleware, is_origin_allowed

ALLOWED_ORIGIN = settings.frontend_url


class TestIsOriginAllowed:
    """Tests for the pure admission predicate."""

    def test_exact_match_admitted(self):
        assert is_origin_allowed("http://localhost:5173", "http://localhost:5173")

    def test_missing_origin_admitted(self):
        assert is_origin_allowed(None, "http://localhost:5173")
        assert is_origin_allowed("", "http://localhost:5173")

    def test_missing_origin_admitted_without_configuration(self):
        assert is_origin_allowed(None, "")

    def test_other_origin_rejected(self):
        assert not is_origin_allowed("http://evil.example", "http://localhost:5173")

    def test_no_prefix_or_case_matching(self):
        assert not is_origin_allowed("http://localhost:5173/", "http://localhost:5173")
        assert not is_origin_allowed("http://LOCALHOST:5173", "http://localhost:5173")
        assert not is_origin_allowed("http://localhost", "http://localhost:5173")

    def test_unconfigured_rejects_every_origin(self):
        assert not is_origin_allowed("http://localhost:5173", "")
        assert not is_origin_allowed("http://localhost:5173", None)


class TestOriginGateMiddleware:
    """Tests for the gate mounted in the real app."""

    @pytest.mark.asyncio
    async def test_allowed_origin_gets_cors_headers(self, test_client, mock_product_service):
        mock_product_service.list_products.return_value = []

        response = await test_client.get("/api/products", headers={"Origin": ALLOWED_ORIGIN})

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == ALLOWED_ORIGIN
        assert "Origin" in response.headers["vary"]

    @pytest.mark.asyncio
    async def test_request_without_origin_is_admitted(self, test_client, mock_product_service):
        mock_product_service.list_products.return_value = []

        response = await test_client.get("/api/products")

        assert response.status_code == 200
        assert "access-control-allow-origin" not in response.headers

    @pytest.mark.asyncio
    async def test_foreign_origin_rejected_before_routing(self, test_client, mock_product_service):
        response = await test_client.post(
            "/api/products",
            json={"name": "Monitor", "price": 300},
            headers={"Origin": "http://evil.example"},
        )

        assert response.status_code == 403
        body = response.json()
        assert body["error"] == "cors_error"
        assert "access-control-allow-origin" not in response.headers
        mock_product_service.create_product.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_foreign_origin_with_invalid_body_is_cors_error_not_400(
        self, test_client, mock_product_service
    ):
        # The gate runs before validation: no field errors are ever computed
        response = await test_client.post(
            "/api/products",
            content=b"{not json",
            headers={"Origin": "http://evil.example", "Content-Type": "application/json"},
        )

        assert response.status_code == 403
        assert "errors" not in response.json()

    @pytest.mark.asyncio
    async def test_foreign_origin_rejected_on_unknown_path(self, test_client):
        response = await test_client.get("/nope", headers={"Origin": "http://evil.example"})
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_preflight_from_allowed_origin(self, test_client, mock_product_service):
        response = await test_client.options(
            "/api/products/1",
            headers={
                "Origin": ALLOWED_ORIGIN,
                "Access-Control-Request-Method": "PUT",
                "Access-Control-Request-Headers": "content-type",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == ALLOWED_ORIGIN
        assert "PUT" in response.headers["access-control-allow-methods"]
        assert "content-type" in response.headers["access-control-allow-headers"].lower()
        mock_product_service.update_product.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_allowed_origin_sees_request_id_header(self, test_client, mock_product_service):
        mock_product_service.list_products.return_value = []

        response = await test_client.get("/api/products", headers={"Origin": ALLOWED_ORIGIN})

        assert "X-Request-ID" in response.headers["access-control-expose-headers"]

    @pytest.mark.asyncio
    async def test_empty_origin_admitted_without_allow_origin_header(
        self, test_client, mock_product_service
    ):
        mock_product_service.list_products.return_value = []

        response = await test_client.get("/api/products", headers={"Origin": ""})

        assert response.status_code == 200
        assert "access-control-allow-origin" not in response.headers
        mock_product_service.list_products.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_preflight_from_foreign_origin(self, test_client):
        response = await test_client.options(
            "/api/products",
            headers={
                "Origin": "http://evil.example",
                "Access-Control-Request-Method": "POST",
            },
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_rejection_carries_request_id(self, test_client):
        response = await test_client.get(
            "/api/products",
            headers={"Origin": "http://evil.example", "X-Request-ID": "trace123"},
        )
        assert response.status_code == 403
        assert response.headers["x-request-id"] == "trace123"
        assert response.json()["request_id"] == "trace123"


@pytest.mark.asyncio
async def test_unconfigured_gate_rejects_cross_origin_requests():
    app = FastAPI()

    @app.get("/ping")
    async def ping():
        return {"ok": True}

    app.add_middleware(OriginGateMiddleware, allowed_origin="")
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        same_origin = await client.get("/ping")
        cross_origin = await client.get("/ping", headers={"Origin": ALLOWED_ORIGIN})

    assert same_origin.status_code == 200
    assert cross_origin.status_code == 403
