"""Result records produced by the COSTAR prompt analyzer.

Every record is a frozen dataclass created fresh per call, with a ``to_payload``
method returning JSON-ready builtins for the column generator and any caller
that persists or renders results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator


class Mode(str, Enum):
    """Analysis depth: ``fast`` covers C/O/S, ``deep`` adds T/A/R."""

    FAST = "fast"
    DEEP = "deep"

    @classmethod
    def coerce(cls, value: Mode | str) -> Mode:
        try:
            return cls(value)
        except ValueError:
            accepted = ", ".join(repr(m.value) for m in cls)
            raise ValueError(f"Unknown analysis mode {value!r}; expected one of {accepted}") from None


CORE_COMPONENTS = ("context", "objective", "style")
DEEP_COMPONENTS = ("tone", "audience", "response")
COMPONENT_ORDER = CORE_COMPONENTS + DEEP_COMPONENTS
COMPONENT_TAGS = {
    "context": "C",
    "objective": "O",
    "style": "S",
    "tone": "T",
    "audience": "A",
    "response": "R",
}


@dataclass(frozen=True)
class ComponentAnalysis:
    """Analysis of one COSTAR component.

    ``traits`` maps each detected trait to a bool, in scoring order. ``score`` is
    the clamped sum of the weights of the true traits. ``details`` carries
    component-specific derived values (situation clarity, formality level, ...).
    """

    component: str
    score: int
    traits: dict[str, bool]
    issues: tuple[str, ...] = ()
    suggestions: tuple[str, ...] = ()
    details: dict[str, object] = field(default_factory=dict)

    @property
    def tag(self) -> str:
        return COMPONENT_TAGS[self.component]

    def has(self, trait: str) -> bool:
        return self.traits.get(trait, False)

    def to_payload(self) -> dict[str, object]:
        return {
            "type": "ComponentAnalysis",
            "component": self.component,
            "tag": self.tag,
            "score": self.score,
            "traits": dict(self.traits),
            "issues": list(self.issues),
            "suggestions": list(self.suggestions),
            **self.details,
        }


@dataclass(frozen=True)
class CostarComponents:
    """The component analyses of one prompt.

    Fast analyses carry only context/objective/style. Deep analyses carry all six;
    the three deep components are all present or all absent.
    """

    context: ComponentAnalysis
    objective: ComponentAnalysis
    style: ComponentAnalysis
    tone: ComponentAnalysis | None = None
    audience: ComponentAnalysis | None = None
    response: ComponentAnalysis | None = None

    def __post_init__(self) -> None:
        present = [getattr(self, name) is not None for name in DEEP_COMPONENTS]
        if any(present) and not all(present):
            raise ValueError("tone, audience and response analyses must be supplied together")

    @property
    def is_deep(self) -> bool:
        return self.tone is not None

    @property
    def mode(self) -> Mode:
        return Mode.DEEP if self.is_deep else Mode.FAST

    def __iter__(self) -> Iterator[ComponentAnalysis]:
        names = COMPONENT_ORDER if self.is_deep else CORE_COMPONENTS
        for name in names:
            yield getattr(self, name)


@dataclass(frozen=True)
class ChangeRecord:
    component: str
    change: str

    def __str__(self) -> str:
        return f"[{self.component}] {self.change}"

    def to_payload(self) -> dict[str, object]:
        return {"component": self.component, "change": self.change}


@dataclass(frozen=True)
class CostarScore:
    overall: int
    rating: str
    context: int
    objective: int
    style: int
    tone: int | None = None
    audience: int | None = None
    response: int | None = None

    def to_payload(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "overall": self.overall,
            "rating": self.rating,
            "context": self.context,
            "objective": self.objective,
            "style": self.style,
        }
        for name in DEEP_COMPONENTS:
            value = getattr(self, name)
            if value is not None:
                payload[name] = value
        return payload


@dataclass(frozen=True)
class TriageResult:
    needs_deep_analysis: bool
    reasons: tuple[str, ...]

    @classmethod
    def from_reasons(cls, reasons: list[str]) -> TriageResult:
        return cls(needs_deep_analysis=bool(reasons), reasons=tuple(reasons))

    def to_payload(self) -> dict[str, object]:
        return {"needs_deep_analysis": self.needs_deep_analysis, "reasons": list(self.reasons)}


@dataclass(frozen=True)
class CostarResult:
    """Full COSTAR analysis of one prompt: components, score, rewrite and changes."""

    prompt: str
    components: CostarComponents
    overall_score: int
    synthesized_prompt: str
    changes: tuple[ChangeRecord, ...]

    @property
    def mode(self) -> Mode:
        return self.components.mode

    @property
    def is_deep(self) -> bool:
        return self.components.is_deep

    @property
    def context(self) -> ComponentAnalysis:
        return self.components.context

    @property
    def objective(self) -> ComponentAnalysis:
        return self.components.objective

    @property
    def style(self) -> ComponentAnalysis:
        return self.components.style

    @property
    def tone(self) -> ComponentAnalysis | None:
        return self.components.tone

    @property
    def audience(self) -> ComponentAnalysis | None:
        return self.components.audience

    @property
    def response(self) -> ComponentAnalysis | None:
        return self.components.response

    def to_payload(self) -> dict[str, object]:
        return {
            "type": "CostarResult",
            "mode": self.mode.value,
            "components": {a.component: a.to_payload() for a in self.components},
            "overall_score": self.overall_score,
            "synthesized_prompt": self.synthesized_prompt,
            "changes": [c.to_payload() for c in self.changes],
        }
