"""Task-creation workflow with auto-assignment."""

from taskflow.workflows.auto_assign import create_task, auto_assign_existing, preview_assignment
from taskflow.workflows.models import AssignmentOutcome

__all__ = [
    "create_task",
    "auto_assign_existing",
    "preview_assignment",
    "AssignmentOutcome",
]
