"""
Unit tests for the application module.

Covers the health and root endpoints, the request id middleware and the
error envelope rendered by the exception handlers.
"""

import pytest
from fastapi import APIRouter, FastAPI, status
from httpx import ASGITransport, AsyncClient

from sacredsix.exceptions import CapacityExceededError, NotFoundError
from sacredsix.main import create_app, setup_exception_handlers


@pytest.fixture
def error_app():
    """Bare app with the production exception handlers and failing routes."""
    app = FastAPI()
    setup_exception_handlers(app)
    router = APIRouter()

    @router.get("/missing")
    async def missing():
        raise NotFoundError("Nothing here", details={"id": "42"})

    @router.get("/full")
    async def full():
        raise CapacityExceededError()

    @router.get("/typed/{number}")
    async def typed(number: int):
        return {"number": number}

    app.include_router(router)
    return app


class TestMainApp:
    @pytest.mark.asyncio
    async def test_root_and_health(self, test_db):
        app = create_app()
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            root = await client.get("/")
            health = await client.get("/health")

        assert root.json()["name"] == "Sacred Six API"
        assert health.status_code == status.HTTP_200_OK
        assert health.json()["services"]["database"] == "healthy"
        assert "X-Request-ID" in health.headers

    def test_routes_registered(self):
        paths = {route.path for route in create_app().routes}

        for path in (
            "/api/projects/",
            "/api/projects/{project_id}/sacred",
            "/api/tasks/today/select",
            "/api/goals/{goal_id}/tasks",
            "/api/sharing/invitations/{invitation_id}/accept",
            "/api/daily-completion/stats",
            "/api/users/me",
        ):
            assert path in paths


class TestErrorEnvelope:
    @pytest.mark.asyncio
    async def test_application_error(self, error_app):
        async with AsyncClient(transport=ASGITransport(app=error_app), base_url="http://test") as client:
            response = await client.get("/missing")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        data = response.json()
        assert data["status"] == "error"
        assert data["message"] == "Nothing here"
        assert data["error_code"] == "NOT_FOUND"
        assert data["details"] == {"id": "42"}
        assert "timestamp" in data

    @pytest.mark.asyncio
    async def test_capacity_error(self, error_app):
        async with AsyncClient(transport=ASGITransport(app=error_app), base_url="http://test") as client:
            response = await client.get("/full")

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["error_code"] == "SACRED_CAPACITY_EXCEEDED"

    @pytest.mark.asyncio
    async def test_request_validation_error(self, error_app):
        async with AsyncClient(transport=ASGITransport(app=error_app), base_url="http://test") as client:
            response = await client.get("/typed/not-a-number")

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        data = response.json()
        assert data["error_code"] == "VALIDATION_ERROR"
        assert data["details"][0]["loc"] == ["path", "number"]

    @pytest.mark.asyncio
    async def test_unknown_route(self, error_app):
        async with AsyncClient(transport=ASGITransport(app=error_app), base_url="http://test") as client:
            response = await client.get("/nowhere")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error_code"] == "HTTP_ERROR"
