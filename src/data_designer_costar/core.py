# COSTAR prompt analyzer: Context, Objective, Style, Tone, Audience, Response.
#
# Scores a free-text instruction against the six COSTAR components using
# keyword/phrase cues, combines the component scores into a weighted composite
# with a rating band, decides whether deep analysis is warranted, and synthesizes
# a restructured prompt. Pure and synchronous: no I/O, no model calls, no state.

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable

from data_designer_costar import cues
from data_designer_costar.models import (
    CORE_COMPONENTS,
    COMPONENT_ORDER,
    ComponentAnalysis,
    CostarComponents,
    CostarResult,
    CostarScore,
    Mode,
    TriageResult,
)
from data_designer_costar.synthesis import record_changes, synthesize_prompt

# ---------------------------------------------------------------------------
# Hyperparameters
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Hyperparameters:
    """Aggregation weights, rating bands and triage thresholds."""

    fast_weights: tuple[tuple[str, float], ...] = field(
        default_factory=lambda: (("context", 0.35), ("objective", 0.35), ("style", 0.30))
    )
    deep_weights: tuple[tuple[str, float], ...] = field(
        default_factory=lambda: (
            ("context", 0.20), ("objective", 0.20), ("style", 0.15),
            ("tone", 0.15), ("audience", 0.15), ("response", 0.15),
        )
    )

    score_min: int = 0
    score_max: int = 100
    band_excellent_min: int = 80
    band_good_min: int = 60
    band_needs_improvement_min: int = 40

    triage_context_min: int = 60
    triage_objective_min: int = 60
    triage_style_min: int = 50
    short_prompt_chars: int = 20
    critical_missing_min: int = 3

    broad_scope_max_chars: int = 30


DEFAULT_HYPERPARAMETERS = Hyperparameters()

# ---------------------------------------------------------------------------
# Trait weights
# ---------------------------------------------------------------------------

TRAIT_WEIGHTS: dict[str, tuple[tuple[str, int], ...]] = {
    "context": (("has_background", 50), ("has_constraints", 30), ("has_technical_details", 20)),
    "objective": (("goal_clarity", 40), ("measurable", 30), ("achievable", 30)),
    "style": (("format_specified", 40), ("structure_defined", 35), ("presentation_clear", 25)),
    "tone": (("tone_specified", 50), ("voice_consistency", 25), ("formality_known", 25)),
    "audience": (("audience_specified", 40), ("skill_level_defined", 35), ("needs_addressed", 25)),
    "response": (("output_format_clear", 40), ("deliverables_specified", 40), ("examples_provided", 20)),
}


def component_score(component: str, traits: dict[str, bool], hp: Hyperparameters | None = None) -> int:
    """Sum of the weights of the true traits, clamped to the score range."""
    hp = hp or DEFAULT_HYPERPARAMETERS
    total = sum(weight for name, weight in TRAIT_WEIGHTS[component] if traits.get(name))
    return max(hp.score_min, min(hp.score_max, total))


@dataclass
class _Findings:
    tag: str
    issues: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)

    def flag(self, issue: str | None, suggestion: str) -> None:
        if issue:
            self.issues.append(issue)
        self.suggestions.append(f"[{self.tag}] {suggestion}")


def _build(component: str, traits: dict[str, bool], findings: _Findings, hp: Hyperparameters,
           details: dict[str, object] | None = None) -> ComponentAnalysis:
    return ComponentAnalysis(
        component=component,
        score=component_score(component, traits, hp),
        traits=traits,
        issues=tuple(findings.issues),
        suggestions=tuple(findings.suggestions),
        details=details or {},
    )


# ---------------------------------------------------------------------------
# Component analyzers
# ---------------------------------------------------------------------------


def analyze_context(prompt: str, hp: Hyperparameters | None = None) -> ComponentAnalysis:
    """Context (C): background, situation and constraints."""
    hp = hp or DEFAULT_HYPERPARAMETERS
    findings = _Findings("C")
    traits = {
        "has_background": cues.detect(prompt, cues.BACKGROUND, cues.FRAMING),
        "has_constraints": cues.detect(prompt, cues.CONSTRAINTS, cues.STACK_PHRASING),
        "has_technical_details": cues.has_technical_details(prompt),
    }
    if not traits["has_background"]:
        findings.flag("No background or situational context provided",
                      "Add background: Explain the current situation or problem context")
    if not traits["has_constraints"]:
        findings.flag("Constraints or requirements not specified",
                      "Specify constraints: Technologies, limitations, or requirements that apply")
    situation_clarity = component_score("context", traits, hp)
    return _build("context", traits, findings, hp, {"situation_clarity": situation_clarity})


def analyze_objective(prompt: str, hp: Hyperparameters | None = None) -> ComponentAnalysis:
    """Objective (O): a clear, measurable, achievable goal."""
    hp = hp or DEFAULT_HYPERPARAMETERS
    findings = _Findings("O")
    traits = {
        "goal_clarity": cues.starts_with_action(prompt) or cues.detect(prompt, cues.OBJECTIVE),
        "measurable": cues.has_success_criteria(prompt) or cues.detect(prompt, cues.COMPLETION),
        "achievable": not cues.has_unrealistic_scope(prompt, hp.broad_scope_max_chars),
    }
    if not traits["goal_clarity"]:
        findings.flag("Goal or objective not clearly stated",
                      "State objective clearly: Use action verbs (create, build, implement)")
    if not traits["measurable"]:
        findings.flag("Objective not measurable",
                      "Make objective measurable: Define what success looks like")
    if not traits["achievable"]:
        findings.flag("Objective may be too broad or unrealistic",
                      "Refine scope: Break down into achievable, focused goal")
    clarity_score = component_score("objective", traits, hp)
    return _build("objective", traits, findings, hp, {"clarity_score": clarity_score})


def analyze_style(prompt: str, hp: Hyperparameters | None = None) -> ComponentAnalysis:
    """Style (S): output format, structure and presentation."""
    hp = hp or DEFAULT_HYPERPARAMETERS
    findings = _Findings("S")
    format_specified = cues.detect(prompt, cues.FORMAT, cues.FORMAT_PHRASING)
    structure_defined = cues.detect(prompt, cues.STRUCTURE, cues.INCLUSION)
    traits = {
        "format_specified": format_specified,
        "structure_defined": structure_defined,
        "presentation_clear": format_specified and (
            structure_defined or cues.detect(prompt, cues.EXAMPLE_HINT)
        ),
    }
    if not format_specified:
        findings.flag("Output format not specified",
                      "Specify format: Define how output should be presented (markdown, code, list)")
    if not structure_defined:
        findings.flag("Structure or organization not defined",
                      "Define structure: Specify how information should be organized")
    if not traits["presentation_clear"]:
        findings.flag(None, "Clarify presentation: Add examples or specify organization preferences")
    return _build("style", traits, findings, hp)


def formality_level(prompt: str) -> str:
    """First matching formality level: formal, casual, technical, else unspecified."""
    for level, level_cues in cues.FORMALITY_LEVELS:
        if cues.detect(prompt, level_cues):
            return level
    return "unspecified"


def analyze_tone(prompt: str, hp: Hyperparameters | None = None) -> ComponentAnalysis:
    """Tone (T): voice and formality. Deep mode only."""
    hp = hp or DEFAULT_HYPERPARAMETERS
    findings = _Findings("T")
    tone_specified = cues.detect(prompt, cues.TONE)
    level = formality_level(prompt)
    traits = {
        "tone_specified": tone_specified,
        "voice_consistency": tone_specified and cues.detect(prompt, cues.CONSISTENCY),
        "formality_known": level != "unspecified",
    }
    if not tone_specified:
        findings.flag("Tone or voice not specified",
                      "Specify tone: Define desired communication style (professional, casual, technical)")
    elif level == "unspecified":
        findings.flag(None, "Clarify formality: Specify whether formal, casual, or technical tone is preferred")
    return _build("tone", traits, findings, hp, {"formality_level": level})


def analyze_audience(prompt: str, hp: Hyperparameters | None = None) -> ComponentAnalysis:
    """Audience (A): target users and their skill level. Deep mode only."""
    hp = hp or DEFAULT_HYPERPARAMETERS
    findings = _Findings("A")
    audience_specified = cues.detect(prompt, cues.AUDIENCE, cues.AUDIENCE_PHRASING)
    skill_level_defined = audience_specified and cues.detect(prompt, cues.SKILL_LEVEL, cues.ASSUMED_KNOWLEDGE)
    traits = {
        "audience_specified": audience_specified,
        "skill_level_defined": skill_level_defined,
        "needs_addressed": audience_specified and (skill_level_defined or cues.detect(prompt, cues.NEEDS)),
    }
    if not audience_specified:
        findings.flag("Target audience not specified",
                      "Define audience: Specify who will use this (developers, beginners, experts)")
    else:
        if not skill_level_defined:
            findings.flag(None, "Specify skill level: Define expertise level of target audience")
        if not traits["needs_addressed"]:
            findings.flag(None, "Address needs: Consider specific needs of the target audience")
    return _build("audience", traits, findings, hp)


def analyze_response(prompt: str, hp: Hyperparameters | None = None) -> ComponentAnalysis:
    """Response (R): expected output, deliverables and examples. Deep mode only."""
    hp = hp or DEFAULT_HYPERPARAMETERS
    findings = _Findings("R")
    traits = {
        "output_format_clear": cues.detect(prompt, cues.OUTPUT) or cues.has_expected_output(prompt),
        "deliverables_specified": (
            cues.detect(prompt, cues.DELIVERABLE_INCLUSION) and cues.detect(prompt, cues.ARTIFACTS)
        ),
        "examples_provided": cues.detect(prompt, cues.EXAMPLES),
    }
    if not traits["output_format_clear"]:
        findings.flag("Expected output format not clear",
                      "Clarify output: Specify what should be returned or delivered")
    if not traits["deliverables_specified"]:
        findings.flag("Specific deliverables not listed",
                      "List deliverables: Specify concrete outputs (code, docs, tests, examples)")
    if not traits["examples_provided"]:
        findings.flag(None, "Provide examples: Include sample outputs or references")
    return _build("response", traits, findings, hp)


_Analyzer = Callable[[str, Hyperparameters], ComponentAnalysis]

_ANALYZERS: dict[str, _Analyzer] = {
    "context": analyze_context,
    "objective": analyze_objective,
    "style": analyze_style,
    "tone": analyze_tone,
    "audience": analyze_audience,
    "response": analyze_response,
}

# ---------------------------------------------------------------------------
# Score aggregation
# ---------------------------------------------------------------------------


def _round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def rating(overall: int, hp: Hyperparameters | None = None) -> str:
    hp = hp or DEFAULT_HYPERPARAMETERS
    if overall >= hp.band_excellent_min:
        return "excellent"
    if overall >= hp.band_good_min:
        return "good"
    if overall >= hp.band_needs_improvement_min:
        return "needs-improvement"
    return "poor"


def _components_of(analysis: CostarResult | CostarComponents) -> CostarComponents:
    if isinstance(analysis, CostarResult):
        return analysis.components
    return analysis


def score(analysis: CostarResult | CostarComponents, hyperparameters: Hyperparameters | None = None) -> CostarScore:
    """Weighted composite score and rating for a COSTAR analysis.

    Uses the deep weights when tone/audience/response are present, the fast
    weights otherwise. The weighted sum is rounded half-up before rating.
    """
    hp = hyperparameters or DEFAULT_HYPERPARAMETERS
    components = _components_of(analysis)
    weights = hp.deep_weights if components.is_deep else hp.fast_weights
    weighted = sum(
        (Decimal(str(weight)) * getattr(components, name).score for name, weight in weights),
        Decimal(0),
    )
    overall = max(hp.score_min, min(hp.score_max, _round_half_up(weighted)))
    scores = {a.component: a.score for a in components}
    return CostarScore(overall=overall, rating=rating(overall, hp), **scores)


# ---------------------------------------------------------------------------
# Triage
# ---------------------------------------------------------------------------


def _score_reasons(components: CostarComponents, hp: Hyperparameters) -> list[str]:
    reasons = []
    if components.context.score < hp.triage_context_min:
        reasons.append(f"Context score below {hp.triage_context_min}% - needs richer background information")
    if components.objective.score < hp.triage_objective_min:
        reasons.append(f"Objective score below {hp.triage_objective_min}% - goal needs clarification")
    if components.style.score < hp.triage_style_min:
        reasons.append(f"Style score below {hp.triage_style_min}% - output format not well-defined")
    return reasons


def _fallback_reasons(prompt: str, hp: Hyperparameters) -> list[str]:
    reasons = []
    if len(prompt.strip()) < hp.short_prompt_chars:
        reasons.append(f"Prompt is very short (< {hp.short_prompt_chars} characters)")
    missing = len(cues.missing_critical_elements(prompt))
    if missing >= hp.critical_missing_min:
        reasons.append(f"Missing {missing} critical elements")
    return reasons


def triage(prompt: str, analysis: CostarResult | CostarComponents | None = None,
           hyperparameters: Hyperparameters | None = None) -> TriageResult:
    """Decide whether deep analysis should be recommended.

    With an analysis, the Context/Objective/Style scores are checked against the
    triage thresholds. Without one, the raw prompt is checked for length and for
    missing critical elements. The two paths are independent and may disagree.
    """
    hp = hyperparameters or DEFAULT_HYPERPARAMETERS
    if analysis is not None:
        reasons = _score_reasons(_components_of(analysis), hp)
    else:
        reasons = _fallback_reasons(prompt, hp)
    return TriageResult.from_reasons(reasons)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def analyze_components(prompt: str, mode: Mode | str = Mode.FAST,
                       hyperparameters: Hyperparameters | None = None) -> CostarResult:
    """Run the COSTAR analysis of a prompt.

    Args:
        prompt: The instruction to analyze. Any string, including the empty string.
        mode: ``"fast"`` (Context/Objective/Style) or ``"deep"`` (all six components).
        hyperparameters: Optional tuning overrides.

    Returns:
        CostarResult with the component analyses, the overall score, the
        synthesized prompt and the change records.

    Raises:
        ValueError: If ``mode`` is not a known analysis mode.
    """
    hp = hyperparameters or DEFAULT_HYPERPARAMETERS
    mode = Mode.coerce(mode)
    names = COMPONENT_ORDER if mode is Mode.DEEP else CORE_COMPONENTS
    components = CostarComponents(**{name: _ANALYZERS[name](prompt, hp) for name in names})
    return CostarResult(
        prompt=prompt,
        components=components,
        overall_score=score(components, hp).overall,
        synthesized_prompt=synthesize_prompt(prompt, components),
        changes=tuple(record_changes(components)),
    )


def analyze_prompt(prompt: str, mode: Mode | str = Mode.FAST,
                   hyperparameters: Hyperparameters | None = None) -> dict:
    """Analyze a prompt and return one JSON-ready payload.

    Returns:
        Dict with keys: mode, components, overall_score, synthesized_prompt,
        changes, score (overall, rating and per-component scores), triage.
    """
    hp = hyperparameters or DEFAULT_HYPERPARAMETERS
    result = analyze_components(prompt, mode, hp)
    payload = result.to_payload()
    payload["score"] = score(result, hp).to_payload()
    payload["triage"] = triage(prompt, result, hp).to_payload()
    return payload
