"""
Database models for projects, members, skills and tasks.
"""

import uuid
from sqlalchemy import (
    Column, Integer, String, Text, DateTime, Boolean,
    Float, ForeignKey, UniqueConstraint
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


# Task statuses that still count towards a member's workload
COMPLETED_STATUS = "completed"
TASK_STATUSES = [
    "pending", "in-progress", "in-review", "to-do",
    "backlog", "no-status", COMPLETED_STATUS,
]

# Roles a user can hold within a single project
PROJECT_ROLES = ["admin", "member"]


class User(Base):
    """A user account. Only role 'member' is eligible for auto-assignment."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    username = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    role = Column(String(50), nullable=False, default="member")  # 'admin', 'TeamLeader', 'member'
    experience_level = Column(String(50), nullable=False, default="mid-level")
    available = Column(Boolean, nullable=False, default=True)
    slack_user_id = Column(String(64), nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)

    # Relationships
    skills = relationship("UserSkill", back_populates="user", cascade="all, delete-orphan")
    memberships = relationship("ProjectMember", back_populates="user", cascade="all, delete-orphan")


class Skill(Base):
    """A named skill (e.g. 'React', 'Docker')."""
    __tablename__ = "skills"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    category = Column(String(50), nullable=False, default="technical")  # 'technical', 'soft', 'domain', 'other'


class UserSkill(Base):
    """Proficiency (1-5) of a user in a skill."""
    __tablename__ = "user_skills"
    __table_args__ = (UniqueConstraint("user_id", "skill_id"),)

    id = Column(Integer, primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    skill_id = Column(Integer, ForeignKey("skills.id"), nullable=False, index=True)
    proficiency = Column(Integer, nullable=False, default=1)

    # Relationships
    user = relationship("User", back_populates="skills")
    skill = relationship("Skill")


class Project(Base):
    """A project owning tasks and a member pool."""
    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    deadline = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)

    # Relationships
    members = relationship(
        "ProjectMember",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="ProjectMember.id",
    )
    tasks = relationship("Task", back_populates="project")


class ProjectMember(Base):
    """Membership of a user in a project. Insertion order is the candidate order."""
    __tablename__ = "project_members"
    __table_args__ = (UniqueConstraint("project_id", "user_id"),)

    id = Column(Integer, primary_key=True)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    role = Column(String(50), nullable=False, default="member")  # 'admin', 'member'
    added_at = Column(DateTime, default=func.now(), nullable=False)

    # Relationships
    project = relationship("Project", back_populates="members")
    user = relationship("User", back_populates="memberships")


class Task(Base):
    """A task, optionally assigned to a user."""
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=_new_id)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=True)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    task_type = Column(String(50), nullable=False, default="development")
    status = Column(String(50), nullable=False, default="pending", index=True)
    priority = Column(String(20), nullable=False, default="medium")
    complexity = Column(Integer, nullable=False, default=5)
    estimated_hours = Column(Float, nullable=False, default=8)
    due_date = Column(DateTime, nullable=True)
    assigned_to = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)
    auto_assigned = Column(Boolean, nullable=False, default=False)
    score = Column(Float, nullable=True)  # Assignment score when auto-assigned
    rationale = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False, index=True)

    # Relationships
    project = relationship("Project", back_populates="tasks")
    assignee = relationship("User")
    dependencies = relationship(
        "TaskDependency",
        foreign_keys="TaskDependency.task_id",
        back_populates="task",
        cascade="all, delete-orphan",
    )


class TaskDependency(Base):
    """A task that must be completed before another can be assigned."""
    __tablename__ = "task_dependencies"
    __table_args__ = (UniqueConstraint("task_id", "depends_on_id"),)

    id = Column(Integer, primary_key=True)
    task_id = Column(String(36), ForeignKey("tasks.id"), nullable=False, index=True)
    depends_on_id = Column(String(36), ForeignKey("tasks.id"), nullable=False, index=True)

    # Relationships
    task = relationship("Task", foreign_keys=[task_id], back_populates="dependencies")
    depends_on = relationship("Task", foreign_keys=[depends_on_id])
