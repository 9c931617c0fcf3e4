import json

import pytest

from data_designer_costar.core import (
    TRAIT_WEIGHTS,
    Hyperparameters,
    analyze_components,
    analyze_prompt,
    component_score,
    rating,
    score,
    triage,
)
from data_designer_costar.models import ComponentAnalysis, CostarComponents, Mode


BUG_FIX = "fix the login bug"

LOGIN_PAGE = (
    "You are working on a Node project. Create a login page. "
    "Provide the result as a React component with tests. "
    "Target audience: senior developers. Format the response as code with examples."
)

COMPLETE = (
    "Create a reporting dashboard. Background: the existing admin tool is slow. "
    "It must load in under a second. Success means all reports render. "
    "Format the output as a markdown table with a section per report."
)

WELL_GROUNDED = (
    "Currently the user cannot log in to the React app; the login form should return "
    "a clear error and success is measured by zero failed logins."
)


def _component(name: str, value: int) -> ComponentAnalysis:
    return ComponentAnalysis(component=name, score=value, traits={})


def _fast(context: int, objective: int, style: int) -> CostarComponents:
    return CostarComponents(
        context=_component("context", context),
        objective=_component("objective", objective),
        style=_component("style", style),
    )


class TestAnalyzeComponents:
    def test_bug_fix_prompt_scores_poor(self):
        result = analyze_components(BUG_FIX, "fast")
        assert result.context.score == 0
        assert result.objective.score == 70
        assert result.objective.has("goal_clarity")
        assert not result.objective.has("measurable")
        assert result.style.score == 0
        assert result.overall_score < 40
        assert score(result).rating == "poor"

    def test_fast_mode_omits_deep_components(self):
        result = analyze_components(BUG_FIX, Mode.FAST)
        assert result.mode is Mode.FAST
        assert result.tone is None
        assert result.audience is None
        assert result.response is None
        composite = score(result)
        assert composite.tone is None and composite.audience is None and composite.response is None
        assert set(composite.to_payload()) == {"overall", "rating", "context", "objective", "style"}

    def test_deep_mode_scores_all_six(self):
        result = analyze_components(LOGIN_PAGE, "deep")
        assert result.is_deep
        assert result.context.score == 100
        assert result.style.score == 100
        assert result.audience.score == 100
        assert result.response.score >= 70
        assert result.tone.score < result.context.score
        assert any(s.startswith("[T] ") for s in result.tone.suggestions)
        composite = score(result)
        assert composite.overall >= 60
        assert composite.rating in ("good", "excellent")

    def test_objective_stays_low_without_leading_verb(self):
        result = analyze_components(LOGIN_PAGE, "deep")
        assert not result.objective.has("goal_clarity")
        assert result.objective.score == 30

    def test_empty_prompt_does_not_raise(self):
        for mode in ("fast", "deep"):
            result = analyze_components("", mode)
            for analysis in result.components:
                assert analysis.score == (30 if analysis.component == "objective" else 0)
            assert result.changes

    def test_invalid_mode_fails_fast(self):
        with pytest.raises(ValueError, match="Unknown analysis mode"):
            analyze_components(BUG_FIX, "thorough")

    def test_suggestions_carry_component_tag(self):
        result = analyze_components("", "deep")
        for analysis in result.components:
            assert analysis.suggestions
            assert all(s.startswith(f"[{analysis.tag}] ") for s in analysis.suggestions)

    def test_complete_prompt_needs_no_gap_filling(self):
        result = analyze_components(COMPLETE, "fast")
        assert [str(c) for c in result.changes] == ["[O] Structured the prompt with COSTAR framework sections"]
        assert score(result).rating == "excellent"

    def test_details(self):
        deep = analyze_components(LOGIN_PAGE, "deep")
        assert deep.context.details["situation_clarity"] == 100
        assert deep.objective.details["clarity_score"] == 30
        assert deep.tone.details["formality_level"] == "unspecified"

    def test_unrealistic_scope(self):
        result = analyze_components("build an app", "fast")
        assert not result.objective.has("achievable")
        assert "Objective may be too broad or unrealistic" in result.objective.issues

    def test_formality_priority(self):
        result = analyze_components("Keep a professional yet casual tone throughout", "deep")
        assert result.tone.details["formality_level"] == "formal"
        assert result.tone.has("voice_consistency")
        assert result.tone.score == 100

    def test_payload_is_json_ready(self):
        payload = analyze_prompt(LOGIN_PAGE, "deep")
        encoded = json.loads(json.dumps(payload))
        assert encoded["mode"] == "deep"
        assert set(encoded["components"]) == {"context", "objective", "style", "tone", "audience", "response"}
        assert encoded["score"]["overall"] == encoded["overall_score"]
        assert encoded["triage"]["needs_deep_analysis"] == bool(encoded["triage"]["reasons"])


class TestComponentScore:
    def test_flipping_a_trait_never_lowers_the_score(self):
        for component, weights in TRAIT_WEIGHTS.items():
            names = [name for name, _ in weights]
            for name in names:
                for others in (False, True):
                    base = {n: others for n in names}
                    base[name] = False
                    flipped = dict(base, **{name: True})
                    assert component_score(component, flipped) >= component_score(component, base)

    def test_all_traits_sum_to_one_hundred(self):
        for component, weights in TRAIT_WEIGHTS.items():
            assert component_score(component, {name: True for name, _ in weights}) == 100
            assert component_score(component, {}) == 0


class TestScore:
    def test_fast_weights(self):
        composite = score(_fast(50, 80, 40))
        assert composite.overall == 58
        assert composite.rating == "needs-improvement"

    def test_perfect_fast(self):
        composite = score(_fast(100, 100, 100))
        assert composite.overall == 100
        assert composite.rating == "excellent"

    def test_deep_weights(self):
        components = CostarComponents(
            context=_component("context", 100),
            objective=_component("objective", 0),
            style=_component("style", 100),
            tone=_component("tone", 0),
            audience=_component("audience", 100),
            response=_component("response", 0),
        )
        composite = score(components)
        assert composite.overall == 50
        assert composite.tone == 0 and composite.audience == 100

    def test_rounds_half_up(self):
        # 30 * 0.35 = 10.5
        assert score(_fast(30, 0, 0)).overall == 11

    def test_score_is_idempotent(self):
        result = analyze_components(LOGIN_PAGE, "deep")
        assert score(result) == score(result)

    def test_partial_deep_components_rejected(self):
        with pytest.raises(ValueError):
            CostarComponents(
                context=_component("context", 0),
                objective=_component("objective", 0),
                style=_component("style", 0),
                tone=_component("tone", 0),
            )

    def test_rating_bands(self):
        assert rating(80) == "excellent"
        assert rating(79) == "good"
        assert rating(60) == "good"
        assert rating(59) == "needs-improvement"
        assert rating(40) == "needs-improvement"
        assert rating(39) == "poor"

    def test_custom_hyperparameters(self):
        lenient = Hyperparameters(band_excellent_min=50)
        assert score(_fast(50, 80, 40), lenient).rating == "excellent"


class TestTriage:
    def test_score_based_reasons(self):
        result = analyze_components(BUG_FIX, "fast")
        outcome = triage(BUG_FIX, result)
        assert outcome.needs_deep_analysis
        assert len(outcome.reasons) == 2
        assert outcome.reasons[0].startswith("Context score below 60%")
        assert outcome.reasons[1].startswith("Style score below 50%")

    def test_fallback_reasons(self):
        outcome = triage(BUG_FIX)
        assert outcome.needs_deep_analysis
        assert outcome.reasons == (
            "Prompt is very short (< 20 characters)",
            "Missing 5 critical elements",
        )

    def test_fallback_passes_grounded_prompt(self):
        outcome = triage(WELL_GROUNDED)
        assert not outcome.needs_deep_analysis
        assert outcome.reasons == ()

    def test_score_based_passes_strong_scores(self):
        outcome = triage("", _fast(60, 60, 50))
        assert not outcome.needs_deep_analysis
        assert outcome.reasons == ()

    def test_needs_deep_analysis_matches_reasons(self):
        for prompt in ("", BUG_FIX, LOGIN_PAGE, COMPLETE, WELL_GROUNDED):
            for outcome in (triage(prompt), triage(prompt, analyze_components(prompt, "fast"))):
                assert outcome.needs_deep_analysis == bool(outcome.reasons)
