"""Unit tests for GoalService."""

from datetime import date

import pytest

from models.enums import GoalStatus, TaskStatus
from sacredsix.domains.goal.service import GoalService, derive_progress
from sacredsix.exceptions import AuthorizationError
from sacredsix.schemas.goal import GoalCreate, GoalUpdate
from tests.factories import TaskFactory, create_goal, create_task


@pytest.fixture
def service(store, engine):
    return GoalService(store, engine)


class TestDeriveProgress:
    @pytest.mark.parametrize(
        "statuses,expected",
        [
            ([], (0, GoalStatus.not_started)),
            ([TaskStatus.todo, TaskStatus.todo], (0, GoalStatus.not_started)),
            ([TaskStatus.in_progress, TaskStatus.todo], (0, GoalStatus.in_progress)),
            ([TaskStatus.done, TaskStatus.todo, TaskStatus.todo], (33, GoalStatus.in_progress)),
            ([TaskStatus.done, TaskStatus.done], (100, GoalStatus.completed)),
        ],
    )
    def test_derive_progress(self, statuses, expected):
        tasks = [TaskFactory.build(status=status) for status in statuses]
        assert derive_progress(tasks) == expected


class TestGoalService:
    @pytest.mark.asyncio
    async def test_create_goal(self, service, owner, project):
        goal = await service.create_goal(
            GoalCreate(project_id=project.id, name=" Ship v1 ", target_date=date(2024, 9, 1)), owner.id
        )

        assert goal.name == "Ship v1"
        assert goal.status is GoalStatus.not_started
        assert goal.progress == 0

    @pytest.mark.asyncio
    async def test_viewer_cannot_create_goal(self, service, shared_project, viewer_user):
        project_id, viewer_id = shared_project.id, viewer_user.id

        with pytest.raises(AuthorizationError):
            await service.create_goal(GoalCreate(project_id=project_id, name="Nope"), viewer_id)

    @pytest.mark.asyncio
    async def test_get_goal_refreshes_progress(self, service, store, shared_project, viewer_user):
        goal = await create_goal(store, shared_project)
        await create_task(store, shared_project, goal_id=goal.id, status=TaskStatus.done)
        await create_task(store, shared_project, goal_id=goal.id)

        result = await service.get_goal(goal.id, viewer_user.id)

        assert result.progress == 50
        assert result.status is GoalStatus.in_progress

    @pytest.mark.asyncio
    async def test_list_project_goals_and_tasks(self, service, store, owner, project):
        first = await create_goal(store, project)
        second = await create_goal(store, project)
        task = await create_task(store, project, goal_id=first.id)

        goals = await service.list_project_goals(project.id, owner.id)
        tasks = await service.list_goal_tasks(first.id, owner.id)

        assert {goal.id for goal in goals} == {first.id, second.id}
        assert [t.id for t in tasks] == [task.id]

    @pytest.mark.asyncio
    async def test_update_goal_ignores_blank_name(self, service, store, owner, project):
        goal = await create_goal(store, project, name="Original")

        updated = await service.update_goal(
            goal.id, GoalUpdate(description="Refined"), owner.id
        )

        assert updated.name == "Original"
        assert updated.description == "Refined"

    @pytest.mark.asyncio
    async def test_link_and_delete_through_service(self, service, store, owner, project):
        goal = await create_goal(store, project)
        task = await create_task(store, project)

        linked = await service.link_task(task.id, goal.id, owner.id)
        assert linked.goal_id == goal.id

        assert await service.delete_goal(goal.id, owner.id) == 1

    @pytest.mark.asyncio
    async def test_relink_updates_progress(self, service, store, owner, project):
        goal = await create_goal(store, project)
        done = await create_task(store, project, status=TaskStatus.done)

        result = await service.relink_tasks(goal.id, [done.id], owner.id)
        refreshed = await service.get_goal(goal.id, owner.id)

        assert result.linked == [done.id]
        assert refreshed.progress == 100
        assert refreshed.status is GoalStatus.completed
