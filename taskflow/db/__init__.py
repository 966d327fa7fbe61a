"""Database package for projects, members and tasks."""

from taskflow.db.database import get_db, init_db, get_session
from taskflow.db.models import (
    Base, User, Skill, UserSkill, Project, ProjectMember, Task, TaskDependency
)
from taskflow.db.repository import TaskRepository

__all__ = [
    "get_db",
    "init_db",
    "get_session",
    "Base",
    "User",
    "Skill",
    "UserSkill",
    "Project",
    "ProjectMember",
    "Task",
    "TaskDependency",
    "TaskRepository",
]
