"""Errors raised by the assignment engine and its collaborators."""

from typing import List, Optional


class AssignmentError(Exception):
    """Base class for task assignment failures."""


class InvalidTaskError(AssignmentError):
    """Task request is missing fields required for assignment."""

    def __init__(self, missing_fields: List[str]):
        self.missing_fields = missing_fields
        super().__init__(f"Task request is missing required fields: {', '.join(missing_fields)}")


class NoCandidatesError(AssignmentError):
    """Project has no eligible members to auto-assign to."""

    def __init__(self, project_id: Optional[str] = None):
        self.project_id = project_id
        where = f"Project {project_id}" if project_id else "Project"
        super().__init__(f"{where} has no eligible members. Add members before auto-assigning.")


class ProjectNotFoundError(AssignmentError):
    """Referenced project does not exist."""

    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__(f"Project not found: {project_id}")


class TaskNotFoundError(AssignmentError):
    """Referenced task does not exist."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task not found: {task_id}")


class DependenciesIncompleteError(AssignmentError):
    """Task depends on tasks that are not completed yet."""

    def __init__(self, pending: List[str]):
        self.pending = pending
        super().__init__(f"Blocking tasks are not completed: {', '.join(pending)}")


class AlreadyAssignedError(AssignmentError):
    """Task was assigned by another writer."""

    def __init__(self, task_id: str, assigned_to: Optional[str] = None):
        self.task_id = task_id
        self.assigned_to = assigned_to
        super().__init__(f"Task {task_id} is already assigned to {assigned_to or 'another member'}")
