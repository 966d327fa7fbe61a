"""
Scoring policy for task auto-assignment.

Weights, skill keywords and experience bands are named here so that an
assignment can be reproduced from its inputs. Values can be tuned, but the
defaults are what the tests and the API document.
"""

import os
import logging
from typing import Dict, List, Tuple

logger = logging.getLogger(__name__)


# Default weights for the three scoring terms (normalised by their sum)
SKILL_WEIGHT = 0.5
WORKLOAD_WEIGHT = 0.3
COMPLEXITY_WEIGHT = 0.2

# Open tasks at which the workload term reaches zero
WORKLOAD_CAPACITY = 10

# Points per proficiency level (1-5 -> 20-100)
PROFICIENCY_POINTS = 20

# Complexity fit penalties
UNDER_QUALIFIED_PENALTY = 25  # per complexity point above the band
OVER_QUALIFIED_PENALTY = 10  # per complexity point below the band
OVER_QUALIFIED_FLOOR = 50.0

# Skill keywords for each task type. Matching is case-insensitive substring
# on the member's skill name; the task type itself always matches too.
TASK_TYPE_SKILLS: Dict[str, List[str]] = {
    "development": [
        "JavaScript", "React", "Node.js", "MongoDB", "Express",
        "TypeScript", "API", "Backend", "Frontend",
    ],
    "design": [
        "UI/UX", "Figma", "Adobe XD", "CSS", "HTML",
        "Design", "Photoshop", "Illustrator",
    ],
    "testing": ["Testing", "QA", "Jest", "Cypress", "Selenium"],
    "documentation": ["Documentation", "Markdown", "Technical Writing", "UML"],
    "bug-fix": [
        "Debugging", "Testing", "JavaScript", "React", "Node.js",
        "Backend", "Frontend",
    ],
    "feature": [
        "JavaScript", "React", "Node.js", "MongoDB", "Express",
        "Frontend", "Backend",
    ],
    "maintenance": ["DevOps", "CI/CD", "Docker", "Kubernetes", "AWS", "Azure", "Git"],
    "devops": ["DevOps", "CI/CD", "Docker", "Kubernetes", "AWS", "Azure"],
    "java": ["Java", "Spring", "Hibernate", "JPA", "Maven", "JUnit"],
    "js": ["JavaScript", "TypeScript", "Node.js", "React"],
    "other": [],
}

# Complexity range (inclusive) each experience level handles comfortably
EXPERIENCE_COMPLEXITY_BANDS: Dict[str, Tuple[int, int]] = {
    "intern": (1, 3),
    "junior": (1, 5),
    "mid-level": (2, 7),
    "senior": (4, 9),
    "expert": (5, 10),
    "lead": (5, 10),
}


def skill_keywords_for(task_type: str) -> List[str]:
    """Keywords a member skill must contain to count for this task type."""
    key = task_type.strip().lower()
    if not key:
        return []
    keywords = [key] + TASK_TYPE_SKILLS.get(key, [])
    return [k.lower() for k in keywords]


def load_weights_from_env() -> Tuple[float, float, float]:
    """
    Read TASKFLOW_SCORING_WEIGHTS ("skill,workload,complexity").

    Falls back to the default weights when unset or malformed.
    """
    defaults = (SKILL_WEIGHT, WORKLOAD_WEIGHT, COMPLEXITY_WEIGHT)
    raw = os.getenv("TASKFLOW_SCORING_WEIGHTS")
    if not raw:
        return defaults

    try:
        skill, workload, complexity = (float(part) for part in raw.split(","))
    except ValueError:
        logger.warning(f"Ignoring malformed TASKFLOW_SCORING_WEIGHTS: {raw!r}")
        return defaults

    if min(skill, workload, complexity) < 0 or skill + workload + complexity <= 0:
        logger.warning(f"Ignoring invalid TASKFLOW_SCORING_WEIGHTS: {raw!r}")
        return defaults

    return skill, workload, complexity
