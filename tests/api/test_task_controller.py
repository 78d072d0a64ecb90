"""
API tests for Task and Goal controllers.

This module contains API endpoint tests for task CRUD, the today-selection and
goal links.
"""

import uuid

import pytest
from fastapi import status
from httpx import AsyncClient

from models.enums import TaskStatus
from tests.factories import create_goal, create_project, create_task


class TestTaskController:
    """Test cases for Task API endpoints."""

    @pytest.mark.asyncio
    async def test_create_task(self, client: AsyncClient, auth_headers, project, owner):
        task_data = {"project_id": str(project.id), "name": "Draft outline", "priority": "high"}

        response = await client.post("/api/tasks/", json=task_data, headers=auth_headers(owner))

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()["data"]
        assert data["name"] == "Draft outline"
        assert data["status"] == "todo"
        assert data["priority"] == "high"

    @pytest.mark.asyncio
    async def test_create_task_whitespace_name(self, client: AsyncClient, auth_headers, project, owner):
        response = await client.post(
            "/api/tasks/", json={"project_id": str(project.id), "name": "   "}, headers=auth_headers(owner)
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio
    async def test_viewer_cannot_create_task(self, client: AsyncClient, auth_headers, shared_project, viewer_user):
        response = await client.post(
            "/api/tasks/",
            json={"project_id": str(shared_project.id), "name": "Sneaky"},
            headers=auth_headers(viewer_user),
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_complete_task(self, client: AsyncClient, auth_headers, store, project, owner):
        task = await create_task(store, project)

        response = await client.put(f"/api/tasks/{task.id}", json={"status": "done"}, headers=auth_headers(owner))

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["status"] == "done"
        assert data["completed_at"] is not None
        assert data["last_completed_date"] is not None

    @pytest.mark.asyncio
    async def test_list_and_get_tasks(self, client: AsyncClient, auth_headers, store, shared_project, editor_user):
        task = await create_task(store, shared_project)
        headers = auth_headers(editor_user)

        listed = await client.get(f"/api/tasks/project/{shared_project.id}", headers=headers)
        fetched = await client.get(f"/api/tasks/{task.id}", headers=headers)

        assert listed.json()["data"]["total"] == 1
        assert fetched.json()["data"]["id"] == str(task.id)

    @pytest.mark.asyncio
    async def test_task_not_found(self, client: AsyncClient, auth_headers, owner):
        response = await client.get(f"/api/tasks/{uuid.uuid4()}", headers=auth_headers(owner))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_delete_task(self, client: AsyncClient, auth_headers, store, project, owner):
        task = await create_task(store, project)

        response = await client.delete(f"/api/tasks/{task.id}", headers=auth_headers(owner))

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"] is None


class TestTodaySelection:
    @pytest.mark.asyncio
    async def test_select_and_list_today(self, client: AsyncClient, auth_headers, store, project, owner):
        tasks = [await create_task(store, project) for _ in range(3)]
        headers = auth_headers(owner)

        selected = await client.put(
            "/api/tasks/today/select", json={"task_ids": [str(t.id) for t in tasks[:2]]}, headers=headers
        )
        today = await client.get("/api/tasks/today", headers=headers)

        assert selected.status_code == status.HTTP_200_OK
        assert selected.json()["data"]["total"] == 2
        assert {t["id"] for t in today.json()["data"]["tasks"]} == {str(t.id) for t in tasks[:2]}

    @pytest.mark.asyncio
    async def test_select_more_than_six(self, client: AsyncClient, auth_headers, owner):
        response = await client.put(
            "/api/tasks/today/select",
            json={"task_ids": [str(uuid.uuid4()) for _ in range(7)]},
            headers=auth_headers(owner),
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


class TestGoalController:
    @pytest.mark.asyncio
    async def test_create_and_list_goals(self, client: AsyncClient, auth_headers, project, owner):
        headers = auth_headers(owner)

        created = await client.post(
            "/api/goals/", json={"project_id": str(project.id), "name": "Beta launch"}, headers=headers
        )
        listed = await client.get(f"/api/goals/project/{project.id}", headers=headers)

        assert created.status_code == status.HTTP_201_CREATED
        assert created.json()["data"]["status"] == "not_started"
        assert listed.json()["data"]["total"] == 1

    @pytest.mark.asyncio
    async def test_link_task_to_goal(self, client: AsyncClient, auth_headers, store, project, owner):
        goal = await create_goal(store, project)
        task = await create_task(store, project, status=TaskStatus.done)

        response = await client.put(
            f"/api/tasks/{task.id}/goal", json={"goal_id": str(goal.id)}, headers=auth_headers(owner)
        )
        fetched = await client.get(f"/api/goals/{goal.id}", headers=auth_headers(owner))

        assert response.json()["data"]["goal_id"] == str(goal.id)
        assert fetched.json()["data"]["progress"] == 100
        assert fetched.json()["data"]["status"] == "completed"

    @pytest.mark.asyncio
    async def test_link_to_goal_of_other_project(self, client: AsyncClient, auth_headers, store, project, owner):
        goal = await create_goal(store, await create_project(store, owner))
        task = await create_task(store, project)

        response = await client.put(
            f"/api/tasks/{task.id}/goal", json={"goal_id": str(goal.id)}, headers=auth_headers(owner)
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["error_code"] == "CONFLICT"

    @pytest.mark.asyncio
    async def test_relink_reports_skips(self, client: AsyncClient, auth_headers, store, project, owner):
        goal = await create_goal(store, project)
        task = await create_task(store, project)
        missing = uuid.uuid4()

        response = await client.put(
            f"/api/goals/{goal.id}/tasks",
            json={"task_ids": [str(task.id), str(missing)]},
            headers=auth_headers(owner),
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["linked"] == [str(task.id)]
        assert data["skipped"] == [{"task_id": str(missing), "reason": "not_found"}]

    @pytest.mark.asyncio
    async def test_delete_goal_unlinks(self, client: AsyncClient, auth_headers, store, project, owner):
        goal = await create_goal(store, project)
        await create_task(store, project, goal_id=goal.id)

        response = await client.delete(f"/api/goals/{goal.id}", headers=auth_headers(owner))

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"] == {"tasks_unlinked": 1}
