"""
Smoke tests for the app wiring.
"""
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

async def test_database_session(async_session: AsyncSession):
    """Test that database session works."""
    from sqlalchemy import text
    result = await async_session.execute(text("SELECT 1"))
    assert result.scalar() == 1

async def test_openapi_docs(client: AsyncClient):
    response = await client.get("/openapi.json")
    assert response.status_code == 200
    schema = response.json()
    assert schema["info"]["title"].endswith("Doc - V1")
    assert "/api/v1/catalog/products" in schema["paths"]
    assert "/api/v1/inventory/transactions" in schema["paths"]

async def test_trace_id_is_echoed(client: AsyncClient):
    response = await client.get("/openapi.json", headers={"X-Trace-ID": "trace-123"})
    assert response.headers["X-Trace-ID"] == "trace-123"

async def test_cors_allows_any_origin_with_credentials(client: AsyncClient):
    response = await client.options(
        "/api/v1/catalog/products",
        headers={
            "Origin": "http://shop.example.com",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://shop.example.com"
    assert response.headers["access-control-allow-credentials"] == "true"

async def test_protected_route_requires_token(client: AsyncClient):
    response = await client.get("/api/v1/catalog/products")
    assert response.status_code == 401

async def test_hsts_header_outside_development():
    from fastapi import FastAPI
    from httpx import ASGITransport
    from framework.middleware.security_headers import HSTSMiddleware

    app = FastAPI()
    app.add_middleware(HSTSMiddleware, max_age=600)

    @app.get("/ping")
    async def ping():
        return {"ok": True}

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.get("/ping")
    assert response.headers["strict-transport-security"] == "max-age=600; includeSubDomains"
