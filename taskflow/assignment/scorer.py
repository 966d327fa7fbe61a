"""
Member selection for task auto-assignment.

Ranks a project's members for a task based on:
- Skill match (proficiency in a skill relevant to the task type)
- Current workload (open tasks)
- Complexity fit (experience level vs. task complexity)

The scorer is a pure function of its inputs: no I/O, no randomness, and it
never mutates the member snapshots it is given.
"""

import logging
from typing import List, Optional, Sequence
from pydantic import BaseModel, Field

from taskflow.assignment import config
from taskflow.assignment.errors import NoCandidatesError
from taskflow.assignment.models import (
    AssignmentDecision,
    Member,
    ScoreFactors,
    ScoreResult,
    TaskRequest,
)

logger = logging.getLogger(__name__)


class ScoringWeights(BaseModel):
    """Relative weights of the scoring terms."""
    skill: float = Field(default=config.SKILL_WEIGHT, ge=0)
    workload: float = Field(default=config.WORKLOAD_WEIGHT, ge=0)
    complexity: float = Field(default=config.COMPLEXITY_WEIGHT, ge=0)

    @property
    def total(self) -> float:
        return self.skill + self.workload + self.complexity

    @classmethod
    def from_env(cls) -> "ScoringWeights":
        skill, workload, complexity = config.load_weights_from_env()
        return cls(skill=skill, workload=workload, complexity=complexity)


def calculate_skill_score(member: Member, task_type: Optional[str]) -> float:
    """
    Calculate skill score (0-100).

    20 points per proficiency level in the member's best skill matching the
    task type; 0 when the member has no relevant skill.
    """
    if not task_type:
        return 0.0
    proficiency = member.proficiency_in(config.skill_keywords_for(task_type))
    return float(proficiency * config.PROFICIENCY_POINTS)


def calculate_workload_score(member: Member) -> float:
    """
    Calculate workload score (0-100).

    Higher score = fewer open tasks. Reaches zero at WORKLOAD_CAPACITY.
    """
    remaining = 1 - member.open_tasks / config.WORKLOAD_CAPACITY
    return max(0.0, 100.0 * remaining)


def calculate_complexity_fit(member: Member, complexity: int) -> float:
    """
    Calculate complexity fit (0-100).

    Full marks inside the member's experience band. Hard tasks for junior
    profiles lose points quickly; trivial tasks for senior profiles lose a
    bounded amount.
    """
    floor, ceiling = config.EXPERIENCE_COMPLEXITY_BANDS[member.experience_level.value]

    if complexity > ceiling:
        penalty = config.UNDER_QUALIFIED_PENALTY * (complexity - ceiling)
        return max(0.0, 100.0 - penalty)
    if complexity < floor:
        penalty = config.OVER_QUALIFIED_PENALTY * (floor - complexity)
        return max(config.OVER_QUALIFIED_FLOOR, 100.0 - penalty)
    return 100.0


def _workload_label(open_tasks: int) -> str:
    ratio = open_tasks / config.WORKLOAD_CAPACITY
    if ratio <= 0.3:
        return "low"
    if ratio <= 0.7:
        return "moderate"
    return "high"


def _fit_label(fit: float) -> str:
    if fit >= 100:
        return "good"
    if fit >= 50:
        return "fair"
    return "poor"


def build_rationale(member: Member, factors: ScoreFactors) -> str:
    """Short explanation shown next to the assignee in the UI."""
    return (
        f"skill match {factors.skill:.0f}%, "
        f"workload {_workload_label(member.open_tasks)}, "
        f"complexity fit {_fit_label(factors.complexity_fit)}"
    )


class AssignmentScorer:
    """Ranks candidates for a task and selects the best one."""

    def __init__(self, weights: Optional[ScoringWeights] = None):
        self.weights = weights or ScoringWeights.from_env()
        if self.weights.total <= 0:
            raise ValueError("At least one scoring weight must be positive")

    def score(self, task: TaskRequest, member: Member) -> ScoreResult:
        """Score a single member for a task."""
        factors = ScoreFactors(
            skill=calculate_skill_score(member, task.task_type),
            workload=calculate_workload_score(member),
            complexity_fit=calculate_complexity_fit(member, task.complexity),
        )

        w = self.weights
        combined = (
            factors.skill * w.skill
            + factors.workload * w.workload
            + factors.complexity_fit * w.complexity
        ) / w.total
        total_score = round(min(100.0, max(0.0, combined)), 2)

        return ScoreResult(
            member=member,
            score=total_score,
            factors=factors,
            rationale=build_rationale(member, factors),
        )

    def rank(self, task: TaskRequest, candidates: Sequence[Member]) -> List[ScoreResult]:
        """
        Score and order candidates, best first.

        Ties are broken by lower open task count, then by position in the
        input list. Members flagged available are preferred; if none is, all
        candidates are ranked.
        """
        if not candidates:
            raise NoCandidatesError(task.project_id)

        pool = [member for member in candidates if member.available]
        if not pool:
            logger.warning(
                f"No available members for task '{task.title}', ranking all {len(candidates)} candidates"
            )
            pool = list(candidates)

        scored = []
        for position, member in enumerate(pool):
            result = self.score(task, member)
            logger.debug(
                f"Candidate {member.id}: score={result.score} "
                f"skill={result.factors.skill:.1f} workload={result.factors.workload:.1f} "
                f"fit={result.factors.complexity_fit:.1f}"
            )
            scored.append((position, result))

        scored.sort(key=lambda item: (-item[1].score, item[1].member.open_tasks, item[0]))
        return [result for _, result in scored]

    def select(self, task: TaskRequest, candidates: Sequence[Member]) -> AssignmentDecision:
        """
        Select the best member for a task.

        Args:
            task: Task being assigned
            candidates: Members of the task's project

        Returns:
            AssignmentDecision with the winner, its score and the full ranking

        Raises:
            NoCandidatesError: if candidates is empty
        """
        ranking = self.rank(task, candidates)
        best = ranking[0]
        logger.info(
            f"Selected member {best.member.id} for task '{task.title}' "
            f"(score: {best.score:.1f}, {best.rationale})"
        )
        return AssignmentDecision(
            member=best.member,
            score=best.score,
            rationale=best.rationale,
            ranking=ranking,
        )
