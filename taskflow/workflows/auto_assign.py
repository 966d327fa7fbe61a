"""
Task-creation workflow with auto-assignment.

Steps for an auto-assigned task:
1. Validate the request (title, project, task type)
2. Resolve the project
3. Check that blocking dependencies are completed
4. Snapshot the project's assignable members
5. Select the best member with the scorer
6. Persist the task and its assignment (assign-once)
7. Notify the assignee (fire-and-forget)

Errors from any step propagate unchanged; nothing is persisted before the
selection succeeds.
"""

import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from taskflow.assignment.errors import AlreadyAssignedError, DependenciesIncompleteError
from taskflow.assignment.models import AssignmentDecision, Priority, ScoreResult, TaskRequest
from taskflow.assignment.scorer import AssignmentScorer
from taskflow.db.models import Project, Task
from taskflow.db.repository import TaskRepository
from taskflow.notifications.notifier import AssignmentNotification, notify_assignee
from taskflow.workflows.models import AssignmentOutcome

logger = logging.getLogger(__name__)


def _select_member(
    repo: TaskRepository,
    request: TaskRequest,
    scorer: AssignmentScorer
) -> AssignmentDecision:
    """Run dependency checks and the scorer for a validated request."""
    pending = repo.pending_dependencies(request.dependencies)
    if pending:
        raise DependenciesIncompleteError(pending)

    candidates = repo.list_candidates(request.project_id)
    logger.info(f"Scoring {len(candidates)} candidates for task '{request.title}'")
    return scorer.select(request, candidates)


async def _notify(project: Project, task: Task, decision: AssignmentDecision) -> bool:
    notification = AssignmentNotification(
        member=decision.member,
        task_id=task.id,
        task_title=task.title,
        project_name=project.name,
        priority=Priority(task.priority),
        score=decision.score,
        rationale=decision.rationale,
        due_date=task.due_date,
    )
    return await notify_assignee(notification)


async def create_task(
    db: Session,
    request: TaskRequest,
    scorer: Optional[AssignmentScorer] = None,
    notify: bool = True
) -> AssignmentOutcome:
    """
    Create a task, auto-assigning it when requested.

    Args:
        db: Database session
        request: Task to create
        scorer: Scorer to use (default weights if omitted)
        notify: Whether to notify the assignee

    Returns:
        AssignmentOutcome with the stored task id and, when auto-assigned,
        the assignment decision

    Raises:
        InvalidTaskError, ProjectNotFoundError, DependenciesIncompleteError,
        NoCandidatesError
    """
    request.validate_for_assignment()
    repo = TaskRepository(db)
    project = repo.get_project(request.project_id)

    if not request.auto_assign:
        task = repo.create_task(request)
        logger.info(f"Created unassigned task {task.id} in project {project.id}")
        return AssignmentOutcome(task_id=task.id)

    decision = _select_member(repo, request, scorer or AssignmentScorer())

    task = repo.create_task(request)
    task = repo.assign_task(task.id, decision.member_id, decision.score, decision.rationale)

    notified = await _notify(project, task, decision) if notify else False

    return AssignmentOutcome(
        task_id=task.id,
        assigned_to=task.assigned_to,
        decision=decision,
        notified=notified,
    )


def request_from_task(task: Task, dependencies: List[str]) -> TaskRequest:
    """Rebuild a TaskRequest from a stored task."""
    return TaskRequest(
        title=task.title,
        description=task.description,
        project_id=task.project_id,
        task_type=task.task_type,
        estimated_hours=task.estimated_hours,
        complexity=task.complexity,
        priority=Priority(task.priority),
        due_date=task.due_date,
        dependencies=dependencies,
        auto_assign=True,
    )


async def auto_assign_existing(
    db: Session,
    task_id: str,
    scorer: Optional[AssignmentScorer] = None,
    notify: bool = True
) -> AssignmentOutcome:
    """
    Auto-assign a task that was stored without an assignee.

    Raises:
        TaskNotFoundError, AlreadyAssignedError, ProjectNotFoundError,
        DependenciesIncompleteError, NoCandidatesError
    """
    repo = TaskRepository(db)
    task = repo.get_task(task_id)
    if task.assigned_to:
        raise AlreadyAssignedError(task_id, task.assigned_to)

    request = request_from_task(task, repo.dependency_ids(task_id))
    request.validate_for_assignment()
    project = repo.get_project(request.project_id)

    decision = _select_member(repo, request, scorer or AssignmentScorer())
    task = repo.assign_task(task_id, decision.member_id, decision.score, decision.rationale)

    notified = await _notify(project, task, decision) if notify else False

    return AssignmentOutcome(
        task_id=task.id,
        assigned_to=task.assigned_to,
        decision=decision,
        notified=notified,
    )


def preview_assignment(
    db: Session,
    request: TaskRequest,
    scorer: Optional[AssignmentScorer] = None
) -> List[ScoreResult]:
    """Rank a project's members for a request without persisting anything."""
    request.validate_for_assignment()
    repo = TaskRepository(db)
    candidates = repo.list_candidates(request.project_id)
    return (scorer or AssignmentScorer()).rank(request, candidates)
