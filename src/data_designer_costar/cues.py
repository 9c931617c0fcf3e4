# Lexical cue sets shared by the COSTAR analyzers and the prompt synthesizer.
#
# Each cue set is a hand-curated list of keywords/phrases compiled into a single
# case-insensitive alternation. Detection is a plain regex search: no match means
# the cue is absent, never an error.

from __future__ import annotations

import re
from dataclasses import dataclass, field


@dataclass(frozen=True)
class CueSet:
    """A named, case-insensitive keyword/phrase pattern.

    Whole-word sets require that no word character touches either end of the
    match, so phrases ending in punctuation (``e.g.``) still match before a space.
    """

    name: str
    terms: tuple[str, ...]
    whole_word: bool = True
    pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        body = "|".join(re.escape(t) for t in self.terms)
        if self.whole_word:
            body = r"(?<!\w)(?:" + body + r")(?!\w)"
        else:
            body = r"(?:" + body + r")"
        object.__setattr__(self, "pattern", re.compile(body, re.IGNORECASE))


def detect(text: str, *cue_sets: CueSet) -> bool:
    """True if any of the cue sets matches somewhere in ``text``."""
    return any(cues.pattern.search(text) for cues in cue_sets)


def find(text: str, cues: CueSet) -> re.Match[str] | None:
    return cues.pattern.search(text)


_SENTENCE_END_RE = re.compile(r"[.!?](?=\s|$)|\n")
_HEADING_MARKER_RE = re.compile(r"^#+[ \t]*")


def strip_heading(line: str) -> str:
    """Drop leading markdown heading markers from a line."""
    return _HEADING_MARKER_RE.sub("", line.strip())


def cue_sentence(text: str, cues: CueSet) -> str | None:
    """Return the sentence of ``text`` holding the first match of ``cues``."""
    m = find(text, cues)
    if m is None:
        return None
    start = 0
    for end_m in _SENTENCE_END_RE.finditer(text, 0, m.start()):
        start = end_m.end()
    end_m = _SENTENCE_END_RE.search(text, m.end())
    if end_m is None:
        end = len(text)
    elif end_m.group(0) == "\n":
        end = end_m.start()
    else:
        end = end_m.end()
    return strip_heading(text[start:end])


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------

BACKGROUND = CueSet("background", (
    "background", "context", "currently", "existing", "situation", "given that", "considering",
))
FRAMING = CueSet("framing", ("you are", "you're working", "the project", "this is"))
CONSTRAINTS = CueSet("constraints", (
    "constraint", "limitation", "requirement", "must", "cannot", "should not", "restricted",
))
STACK_PHRASING = CueSet("stack_phrasing", ("using", "with", "without", "requires", "needs"))
TECH_TERMS = CueSet("tech_terms", (
    "react", "vue", "angular", "node", "python", "java", "typescript", "api", "database",
    "sql", "nosql", "aws", "docker", "kubernetes",
))
QUALITY_ATTRIBUTES = CueSet("quality_attributes", ("integrate", "performance", "scale", "security"))

# Labeled context lines such as "Background: legacy PHP monolith".
LABELED_CONTEXT_RE = re.compile(r"(background|context|currently|given|situation):[ \t]*([^\n]+)", re.IGNORECASE)

# ---------------------------------------------------------------------------
# Objective
# ---------------------------------------------------------------------------

ACTION_VERBS = (
    "create", "build", "develop", "implement", "add", "update", "fix", "refactor", "design", "generate",
)
LEADING_ACTION_RE = re.compile(r"^(" + "|".join(ACTION_VERBS) + r")\b", re.IGNORECASE)
LEADING_ACTION_CLAUSE_RE = re.compile(r"^(" + "|".join(ACTION_VERBS) + r")\s+([^\n]+)", re.IGNORECASE)
OBJECTIVE = CueSet("objective", ("objective", "goal", "purpose", "aim", "want to", "need to"))
LABELED_OBJECTIVE_RE = re.compile(r"(objective|goal|purpose):[ \t]*([^\n]+)", re.IGNORECASE)
SUCCESS_CRITERIA = CueSet("success_criteria", (
    "success", "complete", "done", "measure", "metric", "goal", "should be able to",
))
COMPLETION = CueSet("completion", ("complete when", "done when"))
UNREALISTIC_RE = re.compile(r"^(build an? app|create a system|make a platform|develop everything)$", re.IGNORECASE)
BROAD_SCOPE = CueSet("broad_scope", ("app", "system", "platform"))

# ---------------------------------------------------------------------------
# Style
# ---------------------------------------------------------------------------

FORMAT = CueSet("format", (
    "format", "markdown", "json", "code", "list", "table", "bullet", "numbered", "xml", "yaml",
))
FORMAT_PHRASING = CueSet("format_phrasing", ("provide as", "structure as", "present as", "organize"))
STRUCTURE = CueSet("structure", ("section", "heading", "organize", "structure", "step", "phase", "part"))
INCLUSION = CueSet("inclusion", ("include", "contain", "with", "having"))
EXAMPLE_HINT = CueSet("example_hint", ("example", "sample", "like", "such as"))

# ---------------------------------------------------------------------------
# Tone
# ---------------------------------------------------------------------------

TONE = CueSet("tone", (
    "tone", "voice", "style", "formal", "informal", "casual", "professional", "friendly", "technical",
))
CONSISTENCY = CueSet("consistency", ("consistent", "throughout", "maintain", "keep"))
FORMALITY_LEVELS: tuple[tuple[str, CueSet], ...] = (
    ("formal", CueSet("formal", ("formal", "professional", "business"))),
    ("casual", CueSet("casual", ("casual", "friendly", "conversational", "informal"))),
    ("technical", CueSet("technical", ("technical", "precise", "expert", "developer"))),
)

# ---------------------------------------------------------------------------
# Audience
# ---------------------------------------------------------------------------

AUDIENCE = CueSet("audience", (
    "for", "target", "audience", "user", "developer", "beginner", "expert", "senior", "junior", "team",
))
AUDIENCE_PHRASING = CueSet("audience_phrasing", ("who will", "intended for", "designed for"))
SKILL_LEVEL = CueSet("skill_level", (
    "beginner", "intermediate", "advanced", "expert", "senior", "junior", "novice", "experienced",
))
ASSUMED_KNOWLEDGE = CueSet("assumed_knowledge", ("familiar with", "knowledge of", "assumes"))
NEEDS = CueSet("needs", ("needs", "requires", "wants", "looking for"))

# ---------------------------------------------------------------------------
# Response
# ---------------------------------------------------------------------------

OUTPUT = CueSet("output", ("output", "result", "deliverable", "return", "provide", "generate"))
EXPECTED_OUTPUT = CueSet("expected_output", (
    "output", "result", "deliverable", "should", "look like", "include", "contain", "provide", "return",
))
DELIVERABLE_INCLUSION = CueSet("deliverable_inclusion", (
    "deliverable", "include", "provide", "contain", "with", "having",
))
ARTIFACTS = CueSet("artifacts", ("code", "documentation", "test", "example", "file"))
EXAMPLES = CueSet("examples", (
    "example", "sample", "such as", "like", "e.g.", "for instance", "similar to",
))

# ---------------------------------------------------------------------------
# Critical elements (fallback triage and prompt review)
# ---------------------------------------------------------------------------

CONTEXT_ELEMENT = CueSet("context_element", (
    "background", "context", "currently", "existing", "problem", "issue", "because", "given", "situation",
))
USER_NEEDS = CueSet("user_needs", (
    "user", "customer", "client", "team", "developer", "admin", "visitor", "audience",
))


# ---------------------------------------------------------------------------
# Shared predicates
# ---------------------------------------------------------------------------


def has_context(text: str) -> bool:
    return detect(text, CONTEXT_ELEMENT)


def has_technical_details(text: str) -> bool:
    return detect(text, TECH_TERMS, QUALITY_ATTRIBUTES)


def has_success_criteria(text: str) -> bool:
    return detect(text, SUCCESS_CRITERIA)


def has_user_needs(text: str) -> bool:
    return detect(text, USER_NEEDS)


def has_expected_output(text: str) -> bool:
    return detect(text, EXPECTED_OUTPUT)


def starts_with_action(text: str) -> bool:
    return LEADING_ACTION_RE.match(text.strip()) is not None


def has_unrealistic_scope(text: str, max_chars: int = 30) -> bool:
    """A bare one-line request for a whole app/system/platform."""
    if UNREALISTIC_RE.match(text.strip()):
        return True
    return len(text) < max_chars and detect(text, BROAD_SCOPE)


def missing_critical_elements(text: str) -> list[str]:
    """Names of the critical prompt elements absent from ``text``."""
    checks = (
        ("context", has_context),
        ("technical details", has_technical_details),
        ("success criteria", has_success_criteria),
        ("user needs", has_user_needs),
        ("expected output", has_expected_output),
    )
    return [name for name, check in checks if not check(text)]
