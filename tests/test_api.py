"""Tests for the analytics HTTP API."""
import pytest
import pytest_asyncio
from aiohttp.test_utils import TestClient, TestServer

from api.app import create_app
from api.auth import resolve_token_user

TOKEN = "test-token"
AUTH = {"Authorization": f"Bearer {TOKEN}"}


@pytest_asyncio.fixture
async def client(studio_store):
    app = create_app(store_factory=studio_store.scope, api_token=TOKEN, batch_size=5)
    async with TestClient(TestServer(app)) as test_client:
        yield test_client


def test_resolve_token_user():
    """Test bearer token matching."""
    user = resolve_token_user(f"Bearer {TOKEN}", TOKEN)

    assert user is not None
    assert user.role == "admin"
    assert resolve_token_user(f"bearer {TOKEN}", TOKEN) is not None
    assert resolve_token_user("Bearer wrong", TOKEN) is None
    assert resolve_token_user(f"Basic {TOKEN}", TOKEN) is None
    assert resolve_token_user("Bearer ", TOKEN) is None
    assert resolve_token_user(None, TOKEN) is None


def test_no_configured_token_rejects_everyone():
    assert resolve_token_user(f"Bearer {TOKEN}", None) is None
    assert resolve_token_user("Bearer ", "") is None


@pytest.mark.asyncio
async def test_health_is_public(client):
    resp = await client.get("/health")

    assert resp.status == 200
    assert await resp.json() == {"status": "ok"}


@pytest.mark.asyncio
@pytest.mark.parametrize("headers", [{}, {"Authorization": "Bearer nope"}])
async def test_dashboard_requires_token(client, studio_store, headers):
    """Test requests without a valid token get 401 and never reach the store."""
    resp = await client.get("/api/analytics", headers=headers)

    assert resp.status == 401
    assert await resp.json() == {"error": "Not authenticated"}
    assert studio_store.scopes_opened == 0


@pytest.mark.asyncio
async def test_dashboard_uses_camel_case(client):
    """Test the dashboard payload is serialized with camelCase keys."""
    resp = await client.get("/api/analytics", headers=AUTH)

    assert resp.status == 200
    data = await resp.json()
    assert data["errors"] == {}
    assert data["revenueGoal"] == 15000
    assert set(data["kpiStats"]) >= {"revenueMtd", "revenueMtdDelta", "noShowRate", "fillRate", "avgTicket"}
    assert "byHour" in data["peakTimes"]
    assert "clientLtv" in data
    assert "appointmentGaps" in data


@pytest.mark.asyncio
async def test_dashboard_reports_failed_sections(client, studio_store):
    studio_store.failures["get_setting"] = RuntimeError("settings unavailable")

    resp = await client.get("/api/analytics", headers=AUTH)

    assert resp.status == 200
    data = await resp.json()
    assert data["revenueGoal"] is None
    assert data["errors"] == {"revenue_goal": "settings unavailable"}


@pytest.mark.asyncio
async def test_single_section(client):
    resp = await client.get("/api/analytics/revenue_goal", headers=AUTH)

    assert resp.status == 200
    assert await resp.json() == {"section": "revenue_goal", "data": 15000}


@pytest.mark.asyncio
async def test_list_section_serializes_items(client):
    resp = await client.get("/api/analytics/cancellation_reasons", headers=AUTH)

    assert resp.status == 200
    data = await resp.json()
    assert data["data"] == [{"reason": "Sick", "count": 1, "pct": 100}]


@pytest.mark.asyncio
async def test_unknown_section_is_404(client):
    resp = await client.get("/api/analytics/weather", headers=AUTH)

    assert resp.status == 404
    assert "weather" in (await resp.json())["error"]


@pytest.mark.asyncio
async def test_failed_section_is_500(client, studio_store):
    """Test a store failure surfaces as a generic error without internals."""
    studio_store.failures["fetch_bookings"] = RuntimeError("connection reset")

    resp = await client.get("/api/analytics/top_services", headers=AUTH)

    assert resp.status == 500
    assert await resp.json() == {"error": "Section failed to load", "section": "top_services"}
