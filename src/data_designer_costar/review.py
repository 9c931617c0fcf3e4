"""Prompt review helpers that sit beside the COSTAR analysis.

Gap/ambiguity review, a four-criteria quality assessment, strength summaries of
a COSTAR result, and the extra insights shown for deep-mode analyses.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from data_designer_costar import cues
from data_designer_costar.core import DEFAULT_HYPERPARAMETERS, Hyperparameters, triage
from data_designer_costar.cues import CueSet
from data_designer_costar.models import CostarResult, TriageResult

_VAGUE_TERMS = ("some", "maybe", "probably", "should", "could", "nice to have")
_VAGUE_TERM_CUES = [(term, CueSet(term, (term,))) for term in _VAGUE_TERMS]
_REFERENCE_RE = re.compile(r"(this|that|these|those|it)\s+", re.IGNORECASE)
_QUANTITIES = CueSet("quantities", ("many", "several", "few", "some"))
_EXAMPLE_MENTION_RE = re.compile(r"example|such as|like|e\.g\.", re.IGNORECASE)

_CLEAR_GOAL_RE = re.compile(
    r"^(create|build|develop|implement|add|update|fix|refactor|design|make|write)\b", re.IGNORECASE
)
_GOAL_MENTION_RE = re.compile(r"objective|goal|purpose", re.IGNORECASE)
_ACTIONABLE = CueSet("actionable", (
    "create", "build", "implement", "add", "update", "remove", "fix", "test", "deploy", "configure", "setup",
))
_VAGUE_SCOPE_RE = re.compile(r"^(build an? app|create a system|make a platform)$", re.IGNORECASE)
_MAX_REASONABLE_CHARS = 1000
_REFERENCE_CHECK_MAX_CHARS = 100
_SHORT_PROMPT_CHARS = 50
_DETAILED_PROMPT_CHARS = 200

_LEADING_VERB_RE = re.compile(r"^(create|build|develop|implement|add)", re.IGNORECASE)
_CORE_REQUIREMENT_RE = re.compile(r"^(create|build|develop|implement|add|update|fix)\s+", re.IGNORECASE)
_AUTH_RE = re.compile(r"user|login|auth", re.IGNORECASE)
_API_RE = re.compile(r"api|endpoint|request", re.IGNORECASE)
_FORM_RE = re.compile(r"form|input|data", re.IGNORECASE)


@dataclass(frozen=True)
class PromptReview:
    gaps: tuple[str, ...]
    ambiguities: tuple[str, ...]
    strengths: tuple[str, ...]
    suggestions: tuple[str, ...]

    def to_payload(self) -> dict[str, object]:
        return {
            "gaps": list(self.gaps),
            "ambiguities": list(self.ambiguities),
            "strengths": list(self.strengths),
            "suggestions": list(self.suggestions),
        }


@dataclass(frozen=True)
class QualityAssessment:
    criteria: dict[str, bool]
    min_criteria_met: int = 3

    @property
    def criteria_met_count(self) -> int:
        return sum(self.criteria.values())

    @property
    def total_criteria(self) -> int:
        return len(self.criteria)

    @property
    def is_already_good(self) -> bool:
        return self.criteria_met_count >= self.min_criteria_met

    def to_payload(self) -> dict[str, object]:
        return {
            "is_already_good": self.is_already_good,
            "criteria_met_count": self.criteria_met_count,
            "total_criteria": self.total_criteria,
            "criteria": dict(self.criteria),
        }


@dataclass(frozen=True)
class DeepInsights:
    alternative_phrasings: tuple[str, ...]
    edge_cases: tuple[str, ...]
    potential_issues: tuple[str, ...]
    alternative_structures: tuple[tuple[str, str], ...]
    good_examples: tuple[str, ...] = field(default=(
        "Clear, specific requirements with measurable outcomes",
        "Includes context about why this is needed",
        "Specifies technical constraints and success criteria",
    ))
    bad_examples: tuple[str, ...] = field(default=(
        "Vague requirements without context",
        "No success criteria or expected output",
        "Missing technical constraints and user perspective",
    ))

    def to_payload(self) -> dict[str, object]:
        return {
            "alternative_phrasings": list(self.alternative_phrasings),
            "edge_cases": list(self.edge_cases),
            "potential_issues": list(self.potential_issues),
            "alternative_structures": [
                {"structure": structure, "benefits": benefits}
                for structure, benefits in self.alternative_structures
            ],
            "implementation_examples": {"good": list(self.good_examples), "bad": list(self.bad_examples)},
        }


ALTERNATIVE_STRUCTURES: tuple[tuple[str, str], ...] = (
    ("User Story Format: As a [user], I want [goal] so that [benefit]",
     "Focuses on user needs and value delivery"),
    ("Job Story Format: When [situation], I want to [motivation], so I can [expected outcome]",
     "Emphasizes context and outcomes over personas"),
    ("COSTAR Format: Context, Objective, Style, Tone, Audience, Response",
     "Comprehensive framework covering all critical aspects"),
)

# ---------------------------------------------------------------------------
# Review
# ---------------------------------------------------------------------------


def _gaps(prompt: str) -> list[str]:
    gaps = []
    if not cues.has_context(prompt):
        gaps.append("Missing context: What is the background or current situation?")
    if not cues.has_success_criteria(prompt):
        gaps.append("No success criteria: How will you know when this is complete?")
    if not cues.has_technical_details(prompt):
        gaps.append("Missing technical details: What technologies or constraints apply?")
    if not cues.has_user_needs(prompt):
        gaps.append("No user perspective: Who will use this and what do they need?")
    if not cues.has_expected_output(prompt):
        gaps.append("Unclear expected output: What should the final deliverable look like?")
    return gaps


def _ambiguities(prompt: str) -> list[str]:
    found = [f'Vague term: "{term}" - be more specific' for term, term_cue in _VAGUE_TERM_CUES
             if cues.detect(prompt, term_cue)]
    if _REFERENCE_RE.search(prompt) and len(prompt) < _REFERENCE_CHECK_MAX_CHARS:
        found.append('Undefined references: What does "this" or "it" refer to?')
    if cues.detect(prompt, _QUANTITIES):
        found.append("Unspecified quantities: How many exactly?")
    return found


def _strengths(prompt: str) -> list[str]:
    strengths = []
    if cues.has_context(prompt):
        strengths.append("Clear context provided")
    if cues.has_technical_details(prompt):
        strengths.append("Technical constraints specified")
    if cues.has_success_criteria(prompt):
        strengths.append("Success criteria defined")
    if len(prompt) > _DETAILED_PROMPT_CHARS:
        strengths.append("Comprehensive detail provided")
    if _EXAMPLE_MENTION_RE.search(prompt):
        strengths.append("Includes examples for clarity")
    return strengths


def _suggestions(prompt: str) -> list[str]:
    suggestions = []
    if not cues.has_context(prompt):
        suggestions.append("Add background: Explain the current situation or problem")
    if not cues.has_success_criteria(prompt):
        suggestions.append("Define success: Specify measurable criteria for completion")
    if not cues.has_technical_details(prompt):
        suggestions.append("Add constraints: Specify technologies, integrations, or performance needs")
    if len(prompt) < _SHORT_PROMPT_CHARS:
        suggestions.append("Expand detail: Add more specific requirements and context")
    if not cues.has_user_needs(prompt):
        suggestions.append("Consider users: Who will use this and what do they need?")
    return suggestions


def review_prompt(prompt: str) -> PromptReview:
    """Gaps, ambiguities, strengths and suggestions for a raw prompt."""
    return PromptReview(
        gaps=tuple(_gaps(prompt)),
        ambiguities=tuple(_ambiguities(prompt)),
        strengths=tuple(_strengths(prompt)),
        suggestions=tuple(_suggestions(prompt)),
    )


def assess_quality(prompt: str) -> QualityAssessment:
    """Check clear goal, sufficient context, actionable language and reasonable scope."""
    stripped = prompt.strip()
    return QualityAssessment(criteria={
        "clear_goal": bool(_CLEAR_GOAL_RE.match(stripped) or _GOAL_MENTION_RE.search(prompt)),
        "sufficient_context": cues.has_context(prompt),
        "actionable_language": cues.detect(prompt, _ACTIONABLE),
        "reasonable_scope": not _VAGUE_SCOPE_RE.match(stripped) and len(prompt) <= _MAX_REASONABLE_CHARS,
    })


def summarize_strengths(result: CostarResult, min_score: int = 80) -> tuple[str, ...]:
    labels = {
        "context": "Rich context with background and constraints",
        "objective": "Clear, measurable objective",
        "style": "Well-defined format and structure",
        "tone": "Appropriate tone and voice specified",
        "audience": "Clear audience definition and skill level",
        "response": "Clear deliverables and response format",
    }
    strengths = tuple(
        f"[{analysis.tag}] {labels[analysis.component]}"
        for analysis in result.components
        if analysis.score >= min_score
    )
    return strengths or ("Prompt has been structured with COSTAR framework",)


def to_review(result: CostarResult) -> PromptReview:
    """Map a COSTAR result onto the gaps/ambiguities/strengths/suggestions shape."""
    return PromptReview(
        gaps=result.context.issues + result.objective.issues,
        ambiguities=result.style.issues,
        strengths=summarize_strengths(result),
        suggestions=result.context.suggestions + result.objective.suggestions + result.style.suggestions,
    )


def needs_escalation(prompt: str, result: CostarResult,
                     hyperparameters: Hyperparameters | None = None) -> TriageResult:
    """Fast-mode escalation check: score-based reasons plus the raw-prompt heuristics."""
    hp = hyperparameters or DEFAULT_HYPERPARAMETERS
    reasons = triage(prompt, result, hp).reasons + triage(prompt, None, hp).reasons
    return TriageResult.from_reasons(list(reasons))


# ---------------------------------------------------------------------------
# Deep-mode insights
# ---------------------------------------------------------------------------


def core_requirement(prompt: str) -> str:
    cleaned = _CORE_REQUIREMENT_RE.sub("", prompt.strip(), count=1)
    return cleaned.split(".")[0] or cleaned[:100]


def _edge_cases(prompt: str) -> list[str]:
    edge_cases = []
    if _AUTH_RE.search(prompt):
        edge_cases += ["What happens when user is not authenticated?", "How to handle expired sessions?"]
    if _API_RE.search(prompt):
        edge_cases += ["How to handle network failures or timeouts?", "What validation is needed for input data?"]
    if _FORM_RE.search(prompt):
        edge_cases += ["How to handle invalid or malformed input?", "What happens with empty or missing fields?"]
    return edge_cases or ["Consider error states and failure scenarios", "Think about boundary conditions and limits"]


def _potential_issues(prompt: str) -> list[str]:
    issues = []
    if len(prompt) < DEFAULT_HYPERPARAMETERS.broad_scope_max_chars:
        issues.append("Prompt may be too vague - could be interpreted in multiple ways")
    if not cues.has_success_criteria(prompt):
        issues.append("Without success criteria, it will be hard to know when the task is complete")
    if not cues.has_technical_details(prompt):
        issues.append("Missing technical details may lead to incorrect technology choices")
    if not cues.has_user_needs(prompt):
        issues.append("Without user perspective, solution may not meet actual needs")
    return issues


def deep_insights(prompt: str) -> DeepInsights:
    """Alternative phrasings, edge cases, potential issues and prompt structures."""
    verb = _LEADING_VERB_RE.match(prompt.strip())
    action = verb.group(0) if verb else "Implement"
    requirement = core_requirement(prompt)
    return DeepInsights(
        alternative_phrasings=(
            f"{action} a solution that {requirement}",
            f"Design and implement {requirement}",
            f"Build a system to {requirement}",
        ),
        edge_cases=tuple(_edge_cases(prompt)),
        potential_issues=tuple(_potential_issues(prompt)),
        alternative_structures=ALTERNATIVE_STRUCTURES,
    )
