"""API tests for the current-user and daily completion endpoints."""

import pytest
from fastapi import status
from httpx import AsyncClient

from models.enums import TaskStatus
from sacredsix.core.security import TokenAuthenticator
from tests.factories import create_task


class TestUserController:
    @pytest.mark.asyncio
    async def test_get_me(self, client: AsyncClient, auth_headers, owner):
        response = await client.get("/api/users/me", headers=auth_headers(owner))

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["email"] == "owner@example.com"

    @pytest.mark.asyncio
    async def test_first_request_registers_user(self, client: AsyncClient):
        token = TokenAuthenticator().issue_token("auth|newcomer", email="New.Comer@Example.com", name="Nia")

        response = await client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["email"] == "new.comer@example.com"
        assert data["name"] == "Nia"

    @pytest.mark.asyncio
    async def test_update_me(self, client: AsyncClient, auth_headers, owner):
        response = await client.put("/api/users/me", json={"name": "  Liv  "}, headers=auth_headers(owner))

        assert response.json()["data"]["name"] == "Liv"


class TestDailyCompletionController:
    @pytest.mark.asyncio
    async def test_update_and_stats(self, client: AsyncClient, auth_headers, store, project, owner):
        await create_task(store, project, is_selected_for_today=True, status=TaskStatus.done)
        await create_task(store, project, is_selected_for_today=True)
        headers = auth_headers(owner)

        recorded = await client.post("/api/daily-completion/update", json={"date": "2024-06-03"}, headers=headers)
        stats = await client.get("/api/daily-completion/stats", headers=headers)

        assert recorded.status_code == status.HTTP_200_OK
        record = recorded.json()["data"]
        assert (record["tasks_selected"], record["tasks_completed"]) == (2, 1)
        assert record["fully_completed"] is False

        data = stats.json()["data"]
        assert data["total_days"] == 1
        assert data["completion_rate"] == 0
        assert data["series"] == [
            {"date": "2024-06-03", "tasks_completed": 1, "tasks_selected": 2, "completion_percentage": 50}
        ]

    @pytest.mark.asyncio
    async def test_update_defaults_to_today(self, client: AsyncClient, auth_headers, owner):
        response = await client.post("/api/daily-completion/update", headers=auth_headers(owner))

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["tasks_selected"] == 0

    @pytest.mark.asyncio
    async def test_stats_without_records(self, client: AsyncClient, auth_headers, owner):
        response = await client.get("/api/daily-completion/stats?since=2024-01-01", headers=auth_headers(owner))

        data = response.json()["data"]
        assert data["total_days"] == 0
        assert data["average_tasks_completed"] == 0.0
