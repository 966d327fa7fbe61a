"""Data models for the task-creation workflow."""

from typing import Optional
from pydantic import BaseModel

from taskflow.assignment.models import AssignmentDecision


class AssignmentOutcome(BaseModel):
    """Result of creating and/or auto-assigning a task."""
    task_id: str
    assigned_to: Optional[str] = None
    decision: Optional[AssignmentDecision] = None
    notified: bool = False
