"""
Tests for the assignment scorer.

Tests:
- Scoring terms
- Selection contract
- Determinism and monotonicity
- Tie-breaking
"""

import pytest

from taskflow.assignment.errors import NoCandidatesError
from taskflow.assignment.models import ExperienceLevel, TaskRequest
from taskflow.assignment.scorer import (
    AssignmentScorer,
    ScoringWeights,
    calculate_complexity_fit,
    calculate_skill_score,
    calculate_workload_score,
)


@pytest.fixture
def scorer():
    return AssignmentScorer()


class TestScoringTerms:
    """Tests for the individual scoring terms."""

    def test_skill_score_scales_with_proficiency(self, make_member):
        """Skill term is 20 points per proficiency level."""
        assert calculate_skill_score(make_member("a", {"React": 4}), "development") == 80.0

    def test_skill_score_zero_when_absent(self, make_member):
        """Members without a relevant skill get no skill points."""
        assert calculate_skill_score(make_member("a", {"Figma": 5}), "development") == 0.0

    def test_skill_named_after_task_type_matches(self, make_member):
        """A skill literally named after the task type counts."""
        assert calculate_skill_score(make_member("a", {"development": 3}), "development") == 60.0

    def test_best_matching_skill_is_used(self, make_member):
        """The highest relevant proficiency wins."""
        member = make_member("a", {"JavaScript": 2, "React": 5, "Figma": 1})
        assert calculate_skill_score(member, "development") == 100.0

    def test_unknown_task_type_matches_own_name(self, make_member):
        """Unknown task types only match skills containing their name."""
        member = make_member("a", {"Research": 4, "React": 5})
        assert calculate_skill_score(member, "research") == 80.0

    def test_blank_task_type_matches_nothing(self, make_member):
        """A blank task type has no keywords, so no skill counts."""
        assert calculate_skill_score(make_member("a", {"Figma": 5}), "   ") == 0.0

    def test_skill_match_is_case_insensitive(self, make_member):
        assert calculate_skill_score(make_member("a", {"docker": 3}), "Maintenance") == 60.0

    def test_workload_score(self, make_member):
        """Workload term drops 10 points per open task and bottoms out at zero."""
        assert calculate_workload_score(make_member("a", open_tasks=0)) == 100.0
        assert calculate_workload_score(make_member("a", open_tasks=3)) == pytest.approx(70.0)
        assert calculate_workload_score(make_member("a", open_tasks=25)) == 0.0

    def test_complexity_fit_inside_band(self, make_member):
        member = make_member("a", experience_level=ExperienceLevel.MID_LEVEL)
        assert calculate_complexity_fit(member, 5) == 100.0

    def test_complexity_fit_under_qualified(self, make_member):
        """Hard tasks for interns are heavily penalised, never below zero."""
        intern = make_member("a", experience_level=ExperienceLevel.INTERN)
        assert calculate_complexity_fit(intern, 4) == 75.0
        assert calculate_complexity_fit(intern, 9) == 0.0

    def test_complexity_fit_over_qualified_is_bounded(self, make_member):
        """Trivial tasks for leads lose a bounded amount."""
        lead = make_member("a", experience_level=ExperienceLevel.LEAD)
        assert calculate_complexity_fit(lead, 1) == 60.0
        assert calculate_complexity_fit(lead, 1) >= 50.0


class TestSelection:
    """Tests for AssignmentScorer.select."""

    def test_selects_most_proficient_developer(self, scorer, make_member):
        """Scenario: development task, proficiency 5 vs 1, no workload."""
        task = TaskRequest(title="API", project_id="p", task_type="development", complexity=5)
        candidates = [
            make_member("strong", {"development": 5}),
            make_member("weak", {"development": 1}),
        ]

        decision = scorer.select(task, candidates)

        assert decision.member.id == "strong"
        assert decision.score == pytest.approx(100.0)
        assert decision.rationale == "skill match 100%, workload low, complexity fit good"

    def test_empty_candidates_raise(self, scorer, dev_task):
        """Scenario: no candidates raises NoCandidatesError."""
        with pytest.raises(NoCandidatesError) as exc_info:
            scorer.select(dev_task, [])
        assert exc_info.value.project_id == "project-1"

    def test_lower_workload_wins_with_equal_skill(self, scorer, dev_task, make_member):
        """Scenario: equal proficiency, workloads 3 and 0."""
        candidates = [
            make_member("busy", {"React": 4}, open_tasks=3),
            make_member("free", {"React": 4}, open_tasks=0),
        ]
        assert scorer.select(dev_task, candidates).member.id == "free"

    def test_winner_is_from_candidate_list(self, scorer, dev_task, make_member):
        candidates = [
            make_member("a", {"Figma": 2}, open_tasks=9),
            make_member("b", {}, open_tasks=4, experience_level=ExperienceLevel.INTERN),
            make_member("c", {"Docker": 5}, open_tasks=1),
        ]
        decision = scorer.select(dev_task, candidates)
        assert decision.member in candidates
        assert len(decision.ranking) == 3

    def test_ranking_is_ordered_by_score(self, scorer, dev_task, make_member):
        candidates = [
            make_member("low", {"React": 1}, open_tasks=8),
            make_member("high", {"React": 5}),
            make_member("mid", {"React": 3}, open_tasks=2),
        ]
        ranking = scorer.rank(dev_task, candidates)
        assert [r.member.id for r in ranking] == ["high", "mid", "low"]
        assert ranking[0].score >= ranking[1].score >= ranking[2].score

    def test_scores_are_within_range(self, scorer, dev_task, make_member):
        candidates = [
            make_member("a", {}, open_tasks=50, experience_level=ExperienceLevel.INTERN),
            make_member("b", {"React": 5}),
        ]
        for result in scorer.rank(dev_task, candidates):
            assert 0.0 <= result.score <= 100.0

    def test_available_members_preferred(self, scorer, dev_task, make_member):
        """Unavailable members are skipped while someone is available."""
        candidates = [
            make_member("away", {"React": 5}, available=False),
            make_member("here", {"React": 2}),
        ]
        decision = scorer.select(dev_task, candidates)
        assert decision.member.id == "here"
        assert [r.member.id for r in decision.ranking] == ["here"]

    def test_all_unavailable_still_selects(self, scorer, dev_task, make_member):
        """When nobody is available, the whole list is ranked."""
        candidates = [
            make_member("a", {"React": 2}, available=False),
            make_member("b", {"React": 5}, available=False),
        ]
        assert scorer.select(dev_task, candidates).member.id == "b"

    def test_scorer_does_not_mutate_candidates(self, scorer, dev_task, make_member):
        candidates = [make_member("a", {"React": 3}, open_tasks=2)]
        before = [c.model_dump() for c in candidates]
        scorer.select(dev_task, candidates)
        assert [c.model_dump() for c in candidates] == before


class TestDeterminismAndMonotonicity:
    """Property-style tests for the pure scoring function."""

    def test_select_is_deterministic(self, scorer, dev_task, make_member):
        candidates = [
            make_member("a", {"React": 3}, open_tasks=2),
            make_member("b", {"Node.js": 4}, open_tasks=5),
            make_member("c", {"JavaScript": 3}, open_tasks=2),
        ]
        first = scorer.select(dev_task, candidates)
        second = scorer.select(dev_task, candidates)
        assert first.member.id == second.member.id
        assert first.score == second.score

    @pytest.mark.parametrize("level", list(ExperienceLevel))
    def test_more_proficiency_never_lowers_score(self, scorer, make_member, level):
        for complexity in (1, 5, 10):
            task = TaskRequest(title="t", project_id="p", task_type="development", complexity=complexity)
            scores = [
                scorer.score(task, make_member("a", {"React": p}, open_tasks=2, experience_level=level)).score
                for p in range(1, 6)
            ]
            assert scores == sorted(scores)

    def test_more_workload_never_raises_score(self, scorer, dev_task, make_member):
        scores = [
            scorer.score(dev_task, make_member("a", {"React": 3}, open_tasks=n)).score
            for n in range(0, 15)
        ]
        assert scores == sorted(scores, reverse=True)


class TestTieBreaking:
    """Tests for deterministic tie-breaking."""

    def test_identical_candidates_resolve_to_first(self, scorer, dev_task, make_member):
        candidates = [
            make_member("first", {"React": 3}, open_tasks=1),
            make_member("second", {"React": 3}, open_tasks=1),
        ]
        assert scorer.select(dev_task, candidates).member.id == "first"

    def test_equal_scores_resolve_to_lower_workload(self, dev_task, make_member):
        """With workload weighted out, equal scores fall back to open tasks."""
        scorer = AssignmentScorer(ScoringWeights(skill=1, workload=0, complexity=0))
        candidates = [
            make_member("busy", {"React": 3}, open_tasks=4),
            make_member("idle", {"React": 3}, open_tasks=1),
            make_member("idle-too", {"React": 3}, open_tasks=1),
        ]
        decision = scorer.select(dev_task, candidates)
        assert decision.ranking[0].score == decision.ranking[2].score
        assert decision.member.id == "idle"


class TestScoringWeights:
    """Tests for weight configuration."""

    def test_defaults(self):
        weights = ScoringWeights()
        assert (weights.skill, weights.workload, weights.complexity) == (0.5, 0.3, 0.2)

    def test_all_zero_weights_rejected(self):
        with pytest.raises(ValueError):
            AssignmentScorer(ScoringWeights(skill=0, workload=0, complexity=0))

    def test_weights_are_normalised(self, dev_task, make_member):
        """Scaling all weights leaves scores unchanged."""
        member = make_member("a", {"React": 3}, open_tasks=4)
        base = AssignmentScorer(ScoringWeights(skill=0.5, workload=0.3, complexity=0.2))
        scaled = AssignmentScorer(ScoringWeights(skill=5, workload=3, complexity=2))
        assert base.score(dev_task, member).score == pytest.approx(scaled.score(dev_task, member).score)

    def test_weights_from_environment(self, monkeypatch):
        monkeypatch.setenv("TASKFLOW_SCORING_WEIGHTS", "1,0,0")
        assert AssignmentScorer().weights.skill == 1.0
        assert AssignmentScorer().weights.workload == 0.0
