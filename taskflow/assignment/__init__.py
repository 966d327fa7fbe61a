"""Assignment engine for taskflow - Ranks project members for a task."""

from taskflow.assignment.scorer import AssignmentScorer, ScoringWeights
from taskflow.assignment.models import (
    AssignmentDecision,
    ExperienceLevel,
    Member,
    Priority,
    ScoreResult,
    SkillLevel,
    TaskRequest,
)
from taskflow.assignment.errors import (
    AssignmentError,
    InvalidTaskError,
    NoCandidatesError,
    ProjectNotFoundError,
)

__all__ = [
    "AssignmentScorer",
    "ScoringWeights",
    "AssignmentDecision",
    "ExperienceLevel",
    "Member",
    "Priority",
    "ScoreResult",
    "SkillLevel",
    "TaskRequest",
    "AssignmentError",
    "InvalidTaskError",
    "NoCandidatesError",
    "ProjectNotFoundError",
]
