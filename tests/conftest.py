"""Pytest configuration and fixtures for test suite."""

import os

import pytest

# Set test environment BEFORE any taskflow imports
os.environ.setdefault("DATABASE_URL", "sqlite://")

from taskflow.assignment.models import Member, SkillLevel, TaskRequest
from taskflow.db.database import create_db_engine, init_db, make_session_factory
from taskflow.db.models import Base
from taskflow.db.repository import TaskRepository


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep scoring weights and Slack credentials out of tests unless set explicitly."""
    monkeypatch.delenv("TASKFLOW_SCORING_WEIGHTS", raising=False)
    monkeypatch.delenv("SLACK_BOT_TOKEN", raising=False)


@pytest.fixture
def db_session():
    """In-memory SQLite session with all tables created."""
    engine = create_db_engine("sqlite://")
    init_db(bind=engine)
    session = make_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def repo(db_session):
    return TaskRepository(db_session)


@pytest.fixture
def project(repo):
    return repo.create_project("Website relaunch", description="Marketing site rebuild")


@pytest.fixture
def staffed_project(repo, project):
    """Project with a leader (admin role) and three assignable members."""
    leader = repo.add_user("leila", "leila@example.com", role="TeamLeader", experience_level="lead")
    repo.set_skill(leader.id, "React", 5)
    repo.add_to_project(project.id, leader.id, role="admin")

    senior = repo.add_user("sami", "sami@example.com", experience_level="senior", slack_user_id="U_SAMI")
    repo.set_skill(senior.id, "React", 5)
    repo.set_skill(senior.id, "Node.js", 4)
    repo.add_to_project(project.id, senior.id)

    junior = repo.add_user("jade", "jade@example.com", experience_level="junior")
    repo.set_skill(junior.id, "JavaScript", 2)
    repo.add_to_project(project.id, junior.id)

    designer = repo.add_user("dina", "dina@example.com", experience_level="mid-level")
    repo.set_skill(designer.id, "Figma", 5)
    repo.add_to_project(project.id, designer.id)

    return {
        "project": project,
        "leader": leader,
        "senior": senior,
        "junior": junior,
        "designer": designer,
    }


@pytest.fixture
def make_member():
    """Factory for scorer-level member snapshots."""
    def _make(member_id, skills=None, open_tasks=0, **kwargs):
        return Member(
            id=member_id,
            name=member_id,
            skills=[SkillLevel(name=name, proficiency=level) for name, level in (skills or {}).items()],
            open_tasks=open_tasks,
            **kwargs
        )
    return _make


@pytest.fixture
def dev_task():
    return TaskRequest(
        title="Build login form",
        project_id="project-1",
        task_type="development",
        complexity=5,
    )
