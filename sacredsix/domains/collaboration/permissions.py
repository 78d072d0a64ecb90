"""Project-scoped actions and the minimum role each one requires."""

from enum import Enum

from models.enums import ProjectRole


class ProjectAction(str, Enum):
    view = "view"
    edit_content = "edit_content"  # create/edit/delete tasks and goals
    edit_project = "edit_project"
    manage_collaborators = "manage_collaborators"
    change_collaborator_role = "change_collaborator_role"
    delete_project = "delete_project"


REQUIRED_ROLE: dict[ProjectAction, ProjectRole] = {
    ProjectAction.view: ProjectRole.viewer,
    ProjectAction.edit_content: ProjectRole.editor,
    ProjectAction.edit_project: ProjectRole.admin,
    ProjectAction.manage_collaborators: ProjectRole.admin,
    ProjectAction.change_collaborator_role: ProjectRole.admin,
    ProjectAction.delete_project: ProjectRole.owner,
}


def is_allowed(role: ProjectRole, action: ProjectAction) -> bool:
    return role.at_least(REQUIRED_ROLE[action])
