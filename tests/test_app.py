"""
Test Case Suite: Application Wiring
Test ID Range: TC-801 to TC-807
"""
import asyncio

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError
from starlette.requests import Request

import homesphere.main as main_module
import homesphere.utils.errors as errors_module
from homesphere.database.connection import get_db
from homesphere.main import app
from homesphere.utils.errors import unhandled_error_handler


class BrokenSession:
    """Stands in for an AsyncSession whose database has gone away"""
    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))


async def broken_db():
    yield BrokenSession()


class TestAppWiring:
    """
    Test Case TC-801: Root, Health and Unknown Routes
    Expected Result: Service banners answer; every error body carries a message
    """
    @pytest.mark.asyncio
    async def test_tc801_root(self, client: AsyncClient):
        """TC-801: Root banner"""
        response = await client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    @pytest.mark.asyncio
    async def test_tc802_health(self, client: AsyncClient):
        """TC-802: Health check reaches the database"""
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["database"] == "connected"

    @pytest.mark.asyncio
    async def test_tc803_unknown_route(self, client: AsyncClient):
        """TC-803: Framework errors use the same body shape"""
        response = await client.get("/nowhere")
        assert response.status_code == 404
        assert response.json() == {"message": "Not Found"}


class TestFailureResponses:
    """
    Test Case TC-804: Storage Failures, Timeouts and Unmapped Errors
    Expected Result: 503/504/500 with a message; details hidden in production
    """
    @pytest.mark.asyncio
    async def test_tc804_storage_failure_shows_details_outside_production(self, client: AsyncClient):
        """TC-804: An unreachable database is a 503 with details in development"""
        app.dependency_overrides[get_db] = broken_db
        response = await client.get("/properties")
        assert response.status_code == 503
        body = response.json()
        assert body["message"]
        assert "connection refused" in body["details"]

    @pytest.mark.asyncio
    async def test_tc805_storage_failure_hides_details_in_production(self, client: AsyncClient, monkeypatch):
        """TC-805: Production responses omit details"""
        production = errors_module.settings.model_copy(update={"ENVIRONMENT": "production"})
        monkeypatch.setattr(errors_module, "settings", production)
        app.dependency_overrides[get_db] = broken_db

        response = await client.get("/properties")
        assert response.status_code == 503
        assert "details" not in response.json()
        assert response.json()["message"]

    @pytest.mark.asyncio
    async def test_tc806_slow_request_times_out(self, client: AsyncClient, db_session, monkeypatch):
        """TC-806: A handler slower than REQUEST_TIMEOUT_SECONDS answers 504"""
        impatient = main_module.settings.model_copy(update={"REQUEST_TIMEOUT_SECONDS": 0.05})
        monkeypatch.setattr(main_module, "settings", impatient)

        async def slow_db():
            await asyncio.sleep(0.5)
            yield db_session

        app.dependency_overrides[get_db] = slow_db
        response = await client.get("/properties")
        assert response.status_code == 504
        assert response.json() == {"message": "Request timed out"}

    @pytest.mark.asyncio
    async def test_tc807_unmapped_error_keeps_message_body(self):
        """TC-807: Errors no other handler knows still answer JSON with a message"""
        request = Request({"type": "http", "method": "GET", "path": "/boom", "headers": [], "query_string": b""})
        response = await unhandled_error_handler(request, OverflowError("too large"))
        assert response.status_code == 500
        assert b'"message":"Internal server error"' in response.body
