"""Data models for the assignment engine."""

from datetime import datetime
from enum import Enum
from typing import List, Optional, Iterable
from pydantic import BaseModel, Field

from taskflow.assignment.errors import InvalidTaskError


class ExperienceLevel(str, Enum):
    """Seniority of a member, used for complexity fit."""
    INTERN = "intern"
    JUNIOR = "junior"
    MID_LEVEL = "mid-level"
    SENIOR = "senior"
    EXPERT = "expert"
    LEAD = "lead"


class Priority(str, Enum):
    """Task priority."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SkillLevel(BaseModel):
    """A named skill with a proficiency from 1 (novice) to 5 (expert)."""
    name: str
    proficiency: int = Field(ge=1, le=5)


class Member(BaseModel):
    """Snapshot of a project member as seen by the scorer."""
    id: str
    name: str = ""
    skills: List[SkillLevel] = []
    open_tasks: int = Field(default=0, ge=0)  # workload
    available: bool = True
    experience_level: ExperienceLevel = ExperienceLevel.MID_LEVEL
    slack_user_id: Optional[str] = None

    def proficiency_in(self, keywords: Iterable[str]) -> int:
        """Best proficiency among skills whose name contains any keyword."""
        keywords = [k.lower() for k in keywords]
        best = 0
        for skill in self.skills:
            skill_name = skill.name.lower()
            if any(keyword in skill_name for keyword in keywords):
                best = max(best, skill.proficiency)
        return best


class TaskRequest(BaseModel):
    """A task submitted for creation and, optionally, auto-assignment."""
    title: str = ""
    description: Optional[str] = None
    project_id: Optional[str] = None
    task_type: Optional[str] = None  # "development", "design", "testing", ...
    estimated_hours: float = Field(default=8, ge=0)
    complexity: int = Field(default=5, ge=1, le=10)
    priority: Priority = Priority.MEDIUM
    due_date: Optional[datetime] = None
    dependencies: List[str] = []  # ids of tasks that must be completed first
    auto_assign: bool = False

    def validate_for_assignment(self) -> None:
        """Raise InvalidTaskError if title, project or task type is missing."""
        missing = []
        if not self.title or not self.title.strip():
            missing.append("title")
        if not self.project_id:
            missing.append("project_id")
        if not self.task_type or not self.task_type.strip():
            missing.append("task_type")
        if missing:
            raise InvalidTaskError(missing)


class ScoreFactors(BaseModel):
    """Individual scoring terms, each on a 0-100 scale."""
    skill: float
    workload: float
    complexity_fit: float


class ScoreResult(BaseModel):
    """Scored member with reasoning."""
    member: Member
    score: float  # 0-100
    factors: ScoreFactors
    rationale: str


class AssignmentDecision(BaseModel):
    """Selected member plus the full ranking it was chosen from."""
    member: Member
    score: float
    rationale: str
    ranking: List[ScoreResult]

    @property
    def member_id(self) -> str:
        return self.member.id
