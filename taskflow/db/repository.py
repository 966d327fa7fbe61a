"""
Task repository and member directory.

Provides the persistence side of auto-assignment: project lookup, candidate
snapshots for the scorer, dependency checks and the assign-once update.
"""

import logging
from datetime import datetime
from typing import Optional, List, Dict
from sqlalchemy.orm import Session
from sqlalchemy import and_, func

from taskflow.assignment.errors import (
    AlreadyAssignedError,
    ProjectNotFoundError,
    TaskNotFoundError,
)
from taskflow.assignment.models import ExperienceLevel, Member, SkillLevel, TaskRequest
from taskflow.db.models import (
    COMPLETED_STATUS, PROJECT_ROLES, TASK_STATUSES,
    Project, ProjectMember, Skill, Task, TaskDependency, User, UserSkill
)
from taskflow.policy.permissions import Role

logger = logging.getLogger(__name__)

# Account and project roles eligible for auto-assignment
ASSIGNABLE_USER_ROLE = "member"
ASSIGNABLE_PROJECT_ROLE = "member"


class TaskRepository:
    """Repository for projects, members and tasks."""

    def __init__(self, db: Session):
        self.db = db

    # =============================================================================
    # Projects and members
    # =============================================================================

    def create_project(
        self,
        name: str,
        description: Optional[str] = None,
        deadline: Optional[datetime] = None
    ) -> Project:
        project = Project(name=name, description=description, deadline=deadline)
        self.db.add(project)
        self.db.commit()
        self.db.refresh(project)
        return project

    def get_project(self, project_id: str) -> Project:
        """Get a project or raise ProjectNotFoundError."""
        project = self.db.query(Project).filter(Project.id == project_id).first()
        if not project:
            raise ProjectNotFoundError(project_id)
        return project

    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def add_user(
        self,
        username: str,
        email: str,
        role: str = "member",
        experience_level: str = "mid-level",
        available: bool = True,
        slack_user_id: Optional[str] = None
    ) -> User:
        """
        Create a user account.

        Raises:
            ValueError: if role or experience_level is not a known value
        """
        if role not in {r.value for r in Role}:
            raise ValueError(f"Invalid role: {role!r}")
        if experience_level not in {level.value for level in ExperienceLevel}:
            raise ValueError(f"Invalid experience level: {experience_level!r}")

        user = User(
            username=username,
            email=email,
            role=role,
            experience_level=experience_level,
            available=available,
            slack_user_id=slack_user_id
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def set_skill(self, user_id: str, skill_name: str, proficiency: int) -> UserSkill:
        """Create or update a user's proficiency in a skill."""
        skill = self.db.query(Skill).filter(Skill.name == skill_name).first()
        if not skill:
            skill = Skill(name=skill_name)
            self.db.add(skill)
            self.db.flush()

        user_skill = self.db.query(UserSkill).filter(
            and_(UserSkill.user_id == user_id, UserSkill.skill_id == skill.id)
        ).first()

        if user_skill:
            user_skill.proficiency = proficiency
        else:
            user_skill = UserSkill(user_id=user_id, skill_id=skill.id, proficiency=proficiency)
            self.db.add(user_skill)

        self.db.commit()
        self.db.refresh(user_skill)
        return user_skill

    def add_to_project(self, project_id: str, user_id: str, role: str = "member") -> ProjectMember:
        if role not in PROJECT_ROLES:
            raise ValueError(f"Invalid project role: {role!r}. Expected one of {PROJECT_ROLES}")
        self.get_project(project_id)
        membership = ProjectMember(project_id=project_id, user_id=user_id, role=role)
        self.db.add(membership)
        self.db.commit()
        self.db.refresh(membership)
        return membership

    def open_task_counts(self, user_ids: List[str]) -> Dict[str, int]:
        """Count tasks assigned to each user that are not completed."""
        if not user_ids:
            return {}
        rows = self.db.query(Task.assigned_to, func.count(Task.id)).filter(
            and_(
                Task.assigned_to.in_(user_ids),
                Task.status != COMPLETED_STATUS
            )
        ).group_by(Task.assigned_to).all()
        counts = {user_id: 0 for user_id in user_ids}
        counts.update({user_id: count for user_id, count in rows})
        return counts

    def list_candidates(self, project_id: str) -> List[Member]:
        """
        Snapshot of a project's assignable members for the scorer.

        Project admins, team leaders and account admins are excluded. Order
        follows membership insertion order.

        Raises:
            ProjectNotFoundError: if the project does not exist
        """
        project = self.get_project(project_id)

        users = [
            membership.user
            for membership in project.members
            if membership.user is not None
            and membership.role == ASSIGNABLE_PROJECT_ROLE
            and membership.user.role == ASSIGNABLE_USER_ROLE
        ]
        excluded = len(project.members) - len(users)
        if excluded:
            logger.debug(f"Excluded {excluded} non-assignable members from project {project_id}")

        counts = self.open_task_counts([user.id for user in users])

        return [
            Member(
                id=user.id,
                name=user.username,
                skills=[
                    SkillLevel(name=user_skill.skill.name, proficiency=user_skill.proficiency)
                    for user_skill in user.skills
                ],
                open_tasks=counts.get(user.id, 0),
                available=user.available,
                experience_level=user.experience_level,
                slack_user_id=user.slack_user_id,
            )
            for user in users
        ]

    # =============================================================================
    # Tasks
    # =============================================================================

    def get_task(self, task_id: str) -> Task:
        """Get a task or raise TaskNotFoundError."""
        task = self.db.query(Task).filter(Task.id == task_id).first()
        if not task:
            raise TaskNotFoundError(task_id)
        return task

    def pending_dependencies(self, task_ids: List[str]) -> List[str]:
        """
        Return the ids of dependency tasks that are not completed.

        Unknown ids are ignored.
        """
        if not task_ids:
            return []
        tasks = self.db.query(Task).filter(Task.id.in_(task_ids)).all()
        if len(tasks) < len(set(task_ids)):
            found = {task.id for task in tasks}
            missing = [task_id for task_id in task_ids if task_id not in found]
            logger.warning(f"Ignoring unknown dependency tasks: {missing}")
        return [task.id for task in tasks if task.status != COMPLETED_STATUS]

    def create_task(self, request: TaskRequest) -> Task:
        """Store a new, unassigned task."""
        self.get_project(request.project_id)

        task = Task(
            title=request.title,
            description=request.description,
            project_id=request.project_id,
            task_type=request.task_type,
            priority=request.priority.value,
            complexity=request.complexity,
            estimated_hours=request.estimated_hours,
            due_date=request.due_date,
        )
        self.db.add(task)
        self.db.flush()

        existing = self.db.query(Task.id).filter(Task.id.in_(request.dependencies)).all() if request.dependencies else []
        for (depends_on_id,) in existing:
            self.db.add(TaskDependency(task_id=task.id, depends_on_id=depends_on_id))

        self.db.commit()
        self.db.refresh(task)
        return task

    def dependency_ids(self, task_id: str) -> List[str]:
        rows = self.db.query(TaskDependency.depends_on_id).filter(
            TaskDependency.task_id == task_id
        ).all()
        return [row[0] for row in rows]

    def assign_task(
        self,
        task_id: str,
        user_id: str,
        score: Optional[float] = None,
        rationale: Optional[str] = None,
        auto: bool = True
    ) -> Task:
        """
        Assign a task if it is still unassigned.

        The update only matches an unassigned row, so concurrent writers for
        the same task cannot both succeed.

        Raises:
            TaskNotFoundError: if the task does not exist
            AlreadyAssignedError: if the task already has an assignee
        """
        updated = self.db.query(Task).filter(
            and_(Task.id == task_id, Task.assigned_to.is_(None))
        ).update(
            {
                Task.assigned_to: user_id,
                Task.auto_assigned: auto,
                Task.score: score,
                Task.rationale: rationale,
            },
            synchronize_session=False
        )
        self.db.commit()

        task = self.get_task(task_id)
        if updated == 0:
            raise AlreadyAssignedError(task_id, task.assigned_to)

        self.db.refresh(task)
        logger.info(f"Task {task_id} assigned to {user_id}")
        return task

    def update_status(self, task_id: str, status: str) -> Task:
        if status not in TASK_STATUSES:
            raise ValueError(f"Invalid task status: {status!r}. Expected one of {TASK_STATUSES}")
        task = self.get_task(task_id)
        task.status = status
        self.db.commit()
        self.db.refresh(task)
        return task
