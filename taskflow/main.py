import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import Depends, FastAPI, Header, HTTPException
from sqlalchemy.orm import Session
from dotenv import load_dotenv

from taskflow.assignment.errors import (
    AlreadyAssignedError,
    AssignmentError,
    DependenciesIncompleteError,
    InvalidTaskError,
    NoCandidatesError,
    ProjectNotFoundError,
    TaskNotFoundError,
)
from taskflow.assignment.models import TaskRequest
from taskflow.db.database import get_db, init_db
from taskflow.db.models import Task
from taskflow.db.repository import TaskRepository
from taskflow.policy.permissions import Action, Principal, Resource, check_permission

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup."""
    init_db()
    yield


app = FastAPI(
    title="taskflow",
    description="Task management API with skill-based auto-assignment",
    version="0.1.0",
    lifespan=lifespan
)


def _to_http_error(error: AssignmentError) -> HTTPException:
    """Translate a domain error into an HTTP error."""
    if isinstance(error, (ProjectNotFoundError, TaskNotFoundError)):
        status_code = 404
    elif isinstance(error, (AlreadyAssignedError, DependenciesIncompleteError)):
        status_code = 409
    elif isinstance(error, (InvalidTaskError, NoCandidatesError)):
        status_code = 422
    else:
        status_code = 400
    return HTTPException(status_code=status_code, detail=str(error))


def get_principal(
    x_user_id: Optional[str] = Header(default=None),
    db: Session = Depends(get_db)
) -> Principal:
    """Resolve the acting user from the X-User-Id header."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")

    user = TaskRepository(db).get_user(x_user_id)
    if not user:
        raise HTTPException(status_code=401, detail=f"Unknown user: {x_user_id}")

    return Principal(
        id=user.id,
        role=user.role,
        project_ids={membership.project_id for membership in user.memberships}
    )


def _authorize(user: Principal, action: Action, resource: Resource) -> None:
    result = check_permission(user, action, resource)
    if not result.allowed:
        logger.warning(f"Denied {action.value} for user {user.id}: {result.reason}")
        raise HTTPException(status_code=403, detail=result.reason)


def _task_to_dict(task: Task) -> dict:
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "project_id": task.project_id,
        "task_type": task.task_type,
        "status": task.status,
        "priority": task.priority,
        "complexity": task.complexity,
        "estimated_hours": task.estimated_hours,
        "due_date": task.due_date.isoformat() if task.due_date else None,
        "assigned_to": task.assigned_to,
        "auto_assigned": task.auto_assigned,
        "score": task.score,
        "rationale": task.rationale,
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "service": "taskflow"}


@app.post("/projects/{project_id}/tasks", status_code=201)
async def create_project_task(
    project_id: str,
    body: TaskRequest,
    user: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
):
    """Create a task. Set auto_assign=true to pick the assignee automatically."""
    from taskflow.workflows.auto_assign import create_task

    _authorize(user, Action.CREATE_TASK, Resource(project_id=project_id))
    if body.auto_assign:
        _authorize(user, Action.AUTO_ASSIGN, Resource(project_id=project_id))

    request = body.model_copy(update={"project_id": project_id})
    try:
        outcome = await create_task(db, request)
        task = TaskRepository(db).get_task(outcome.task_id)
    except AssignmentError as e:
        raise _to_http_error(e)

    return {
        "task": _task_to_dict(task),
        "assignment": outcome.decision.model_dump(exclude={"ranking"}) if outcome.decision else None,
        "notified": outcome.notified,
    }


@app.post("/tasks/{task_id}/auto-assign")
async def auto_assign_task(
    task_id: str,
    user: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
):
    """Auto-assign an existing, unassigned task."""
    from taskflow.workflows.auto_assign import auto_assign_existing

    try:
        task = TaskRepository(db).get_task(task_id)
        _authorize(user, Action.AUTO_ASSIGN, Resource(project_id=task.project_id))
        outcome = await auto_assign_existing(db, task_id)
        task = TaskRepository(db).get_task(task_id)
    except AssignmentError as e:
        raise _to_http_error(e)

    return {
        "task": _task_to_dict(task),
        "assignment": outcome.decision.model_dump(exclude={"ranking"}),
        "notified": outcome.notified,
    }


@app.post("/projects/{project_id}/assignment-preview")
async def preview_project_assignment(
    project_id: str,
    body: TaskRequest,
    user: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
):
    """Rank project members for a task without creating it."""
    from taskflow.workflows.auto_assign import preview_assignment

    _authorize(user, Action.PREVIEW_ASSIGNMENT, Resource(project_id=project_id))

    request = body.model_copy(update={"project_id": project_id})
    try:
        ranking = preview_assignment(db, request)
    except AssignmentError as e:
        raise _to_http_error(e)

    return {
        "project_id": project_id,
        "ranking": [
            {
                "member_id": result.member.id,
                "name": result.member.name,
                "score": result.score,
                "factors": result.factors.model_dump(),
                "rationale": result.rationale,
            }
            for result in ranking
        ]
    }


@app.get("/tasks/{task_id}")
async def get_task(
    task_id: str,
    user: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
):
    """Fetch a single task."""
    try:
        task = TaskRepository(db).get_task(task_id)
    except AssignmentError as e:
        raise _to_http_error(e)

    _authorize(user, Action.VIEW_TASK, Resource(project_id=task.project_id, assigned_to=task.assigned_to))
    return _task_to_dict(task)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
