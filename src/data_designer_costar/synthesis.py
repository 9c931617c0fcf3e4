"""Prompt synthesis and change recording for COSTAR analyses.

The synthesizer rewrites a prompt into one section per active COSTAR component
followed by a Requirements block. A section repeats what the prompt already
states when the component's trait was detected, and fills the gap with inferred
or templated text when it was not. The change recorder walks the same gap table,
so every recorded change corresponds to text the synthesizer wrote.
"""

from __future__ import annotations

from data_designer_costar import cues
from data_designer_costar.cues import CueSet
from data_designer_costar.models import COMPONENT_TAGS, ChangeRecord, ComponentAnalysis, CostarComponents

DEFAULT_CONTEXT = "Development project requiring implementation of new functionality"
DEFAULT_OBJECTIVE = "Define the specific outcome this work should deliver"
DEFAULT_CONSTRAINTS = "- [Specify technologies, integrations, performance requirements]"
DEFAULT_SUCCESS_CRITERIA = (
    "- Implementation matches requirements\n"
    "- All edge cases handled\n"
    "- Code is tested and documented"
)
DEFAULT_FORMAT = "Format: Provide response as structured, well-organized output"
DEFAULT_STRUCTURE = "Structure: Organize with clear sections and headings"
DEFAULT_TONE = "Use a professional, technical tone appropriate for developers"
DEFAULT_AUDIENCE = "Target audience: Intermediate to advanced developers familiar with the relevant technology stack"
DEFAULT_OUTPUT = "Output: Return the complete result in the format described under STYLE"
DEFAULT_DELIVERABLES = "- Complete implementation\n- Documentation\n- Test coverage"
REQUIREMENTS_PLACEHOLDER = "- [Add specific requirements based on objective]"
FALLBACK_CHANGE = ChangeRecord("O", "Structured the prompt with COSTAR framework sections")

# Substring cues: "reactive" and "nodejs" still name the stack.
_STACK_NAMES: tuple[tuple[str, CueSet], ...] = (
    ("React", CueSet("react", ("react",), whole_word=False)),
    ("TypeScript", CueSet("typescript", ("typescript",), whole_word=False)),
    ("Node.js", CueSet("node", ("node",), whole_word=False)),
    ("Python", CueSet("python", ("python",), whole_word=False)),
)
_DELIVERABLE_NAMES: tuple[tuple[str, CueSet], ...] = (
    ("Complete code implementation", CueSet("code", ("code",), whole_word=False)),
    ("Documentation", CueSet("docs", ("documentation", "docs"), whole_word=False)),
    ("Test coverage", CueSet("test", ("test",), whole_word=False)),
    ("Usage examples", CueSet("example", ("example",), whole_word=False)),
)

# (component, trait, change description) for every gap the synthesizer fills.
_GAPS: tuple[tuple[str, str, str], ...] = (
    ("context", "has_background", "Added background context and situational details"),
    ("context", "has_constraints", "Specified constraints and requirements"),
    ("objective", "goal_clarity", "Clarified objective with clear goal statement"),
    ("objective", "measurable", "Made objective measurable with success criteria"),
    ("style", "format_specified", "Specified output format and presentation style"),
    ("style", "structure_defined", "Defined structure and organization approach"),
    ("tone", "tone_specified", "Added tone guidance for appropriate communication style"),
    ("audience", "audience_specified", "Defined target audience and skill level"),
    ("response", "output_format_clear", "Specified expected deliverables and response format"),
    ("response", "deliverables_specified", "Listed concrete deliverables for the response"),
)

# ---------------------------------------------------------------------------
# Template helpers
# ---------------------------------------------------------------------------


def _first_sentence(text: str, *cue_sets: CueSet) -> str | None:
    for cue_set in cue_sets:
        sentence = cues.cue_sentence(text, cue_set)
        if sentence:
            return sentence
    return None


def stack_names(prompt: str) -> list[str]:
    return [name for name, stack_cue in _STACK_NAMES if cues.detect(prompt, stack_cue)]


def infer_technical_stack(prompt: str) -> str:
    names = stack_names(prompt)
    if names:
        return f"- Technology stack: {', '.join(names)}\n- [Add other constraints]"
    return DEFAULT_CONSTRAINTS


def infer_context(prompt: str) -> str:
    labeled = cues.LABELED_CONTEXT_RE.search(prompt)
    if labeled:
        return labeled.group(2).strip()
    if cues.has_technical_details(prompt):
        names = stack_names(prompt)
        if names:
            return f"Working in a development environment with {', '.join(names)}"
        return "Working in a development environment with the technologies named below"
    return DEFAULT_CONTEXT


def infer_objective(prompt: str) -> str:
    """Leading action clause, labeled objective, objective sentence or first line."""
    stripped = prompt.strip()
    action = cues.LEADING_ACTION_CLAUSE_RE.match(stripped)
    if action:
        return f"{action.group(1)} {action.group(2).strip()}"
    labeled = cues.LABELED_OBJECTIVE_RE.search(stripped)
    if labeled:
        return labeled.group(2).strip()
    sentence = _first_sentence(stripped, cues.OBJECTIVE)
    if sentence:
        return sentence
    for line in stripped.split("\n"):
        line = cues.strip_heading(line)
        if line:
            return line[:100]
    return DEFAULT_OBJECTIVE


def infer_requirements(prompt: str) -> str:
    lines = [line for line in map(cues.strip_heading, prompt.split("\n")) if line]
    if len(lines) > 1:
        return "\n".join(f"- {line}" for line in lines[1:])
    if lines:
        return f"- {lines[0]}\n{REQUIREMENTS_PLACEHOLDER}"
    return REQUIREMENTS_PLACEHOLDER


def tone_guidance(prompt: str) -> str:
    return _first_sentence(prompt, cues.TONE) or DEFAULT_TONE


def audience_definition(prompt: str) -> str:
    return _first_sentence(prompt, cues.AUDIENCE_PHRASING, cues.SKILL_LEVEL, cues.AUDIENCE) or DEFAULT_AUDIENCE


def list_deliverables(prompt: str) -> str:
    found = [f"- {name}" for name, deliverable_cue in _DELIVERABLE_NAMES if cues.detect(prompt, deliverable_cue)]
    return "\n".join(found) if found else DEFAULT_DELIVERABLES


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


def _context_section(prompt: str, analysis: ComponentAnalysis) -> list[str]:
    lines = []
    if analysis.has("has_background"):
        labeled = cues.LABELED_CONTEXT_RE.search(prompt)
        lines.append(labeled.group(2).strip() if labeled else _first_sentence(prompt, cues.BACKGROUND, cues.FRAMING))
    else:
        lines.append(f"Background: {infer_context(prompt)}")
    if analysis.has("has_constraints"):
        lines.append(f"Constraints: {_first_sentence(prompt, cues.CONSTRAINTS, cues.STACK_PHRASING)}")
    else:
        lines.append(f"Constraints:\n{infer_technical_stack(prompt)}")
    return lines


def _objective_section(prompt: str, analysis: ComponentAnalysis) -> list[str]:
    objective = infer_objective(prompt)
    lines = [objective if analysis.has("goal_clarity") else f"Goal: {objective}"]
    if analysis.has("measurable"):
        lines.append(f"Success criteria: {_first_sentence(prompt, cues.COMPLETION, cues.SUCCESS_CRITERIA)}")
    else:
        lines.append(f"Success criteria:\n{DEFAULT_SUCCESS_CRITERIA}")
    return lines


def _style_section(prompt: str, analysis: ComponentAnalysis) -> list[str]:
    lines = []
    if analysis.has("format_specified"):
        lines.append(_first_sentence(prompt, cues.FORMAT, cues.FORMAT_PHRASING))
    else:
        lines.append(DEFAULT_FORMAT)
    if analysis.has("structure_defined"):
        structure = _first_sentence(prompt, cues.STRUCTURE, cues.INCLUSION)
        if structure not in lines:
            lines.append(structure)
    else:
        lines.append(DEFAULT_STRUCTURE)
    return lines


def _tone_section(prompt: str, analysis: ComponentAnalysis) -> list[str]:
    return [tone_guidance(prompt) if analysis.has("tone_specified") else DEFAULT_TONE]


def _audience_section(prompt: str, analysis: ComponentAnalysis) -> list[str]:
    return [audience_definition(prompt) if analysis.has("audience_specified") else DEFAULT_AUDIENCE]


def _response_section(prompt: str, analysis: ComponentAnalysis) -> list[str]:
    lines = []
    if analysis.has("output_format_clear"):
        lines.append(_first_sentence(prompt, cues.OUTPUT, cues.EXPECTED_OUTPUT))
    else:
        lines.append(DEFAULT_OUTPUT)
    deliverables = list_deliverables(prompt) if analysis.has("deliverables_specified") else DEFAULT_DELIVERABLES
    lines.append(f"Expected deliverables:\n{deliverables}")
    return lines


_SECTIONS = {
    "context": _context_section,
    "objective": _objective_section,
    "style": _style_section,
    "tone": _tone_section,
    "audience": _audience_section,
    "response": _response_section,
}


def synthesize_prompt(prompt: str, components: CostarComponents) -> str:
    """Rewrite ``prompt`` as one ``## <COMPONENT>`` section per active component.

    Sections are followed by a ``# Requirements`` block built from the prompt's
    remaining lines. The input prompt is not modified.
    """
    blocks = []
    for analysis in components:
        body = "\n".join(_SECTIONS[analysis.component](prompt, analysis))
        blocks.append(f"## {analysis.component.upper()}\n\n{body}")
    blocks.append("---")
    blocks.append(f"# Requirements\n\n{infer_requirements(prompt)}")
    return "\n\n".join(blocks).strip()


def record_changes(components: CostarComponents) -> list[ChangeRecord]:
    """One tagged record per gap the synthesizer filled; never empty."""
    changes = []
    for component, trait, change in _GAPS:
        analysis = getattr(components, component)
        if analysis is not None and not analysis.has(trait):
            changes.append(ChangeRecord(COMPONENT_TAGS[component], change))
    return changes or [FALLBACK_CHANGE]
