from data_designer_costar.core import analyze_components
from data_designer_costar.models import ComponentAnalysis, CostarComponents
from data_designer_costar.synthesis import (
    DEFAULT_AUDIENCE,
    DEFAULT_CONTEXT,
    DEFAULT_DELIVERABLES,
    DEFAULT_FORMAT,
    DEFAULT_OBJECTIVE,
    DEFAULT_STRUCTURE,
    DEFAULT_TONE,
    REQUIREMENTS_PLACEHOLDER,
    infer_context,
    infer_objective,
    infer_requirements,
    infer_technical_stack,
    list_deliverables,
    record_changes,
    synthesize_prompt,
)


LOGIN_PAGE = (
    "You are working on a Node project. Create a login page. "
    "Provide the result as a React component with tests. "
    "Target audience: senior developers. Format the response as code with examples."
)


def _headers(text: str) -> list[str]:
    return [line for line in text.splitlines() if line.startswith("## ")]


class TestSynthesizePrompt:
    def test_fast_mode_has_three_sections(self):
        result = analyze_components("fix the login bug", "fast")
        assert _headers(result.synthesized_prompt) == ["## CONTEXT", "## OBJECTIVE", "## STYLE"]
        assert "# Requirements" in result.synthesized_prompt

    def test_deep_mode_has_six_sections(self):
        result = analyze_components(LOGIN_PAGE, "deep")
        assert _headers(result.synthesized_prompt) == [
            "## CONTEXT", "## OBJECTIVE", "## STYLE", "## TONE", "## AUDIENCE", "## RESPONSE",
        ]

    def test_empty_prompt_is_all_template(self):
        result = analyze_components("", "deep")
        text = result.synthesized_prompt
        assert len(_headers(text)) == 6
        for filler in (DEFAULT_CONTEXT, DEFAULT_OBJECTIVE, DEFAULT_FORMAT, DEFAULT_STRUCTURE,
                       DEFAULT_TONE, DEFAULT_AUDIENCE, DEFAULT_DELIVERABLES, REQUIREMENTS_PLACEHOLDER):
            assert filler in text

    def test_keeps_what_the_prompt_states(self):
        text = analyze_components(LOGIN_PAGE, "deep").synthesized_prompt
        assert "You are working on a Node project." in text
        assert "Format the response as code with examples." in text
        assert "Target audience: senior developers." in text
        assert DEFAULT_AUDIENCE not in text
        assert "- Complete code implementation" in text

    def test_markdown_headings_are_not_echoed(self):
        prompt = "## Background\nWe ship a React dashboard.\n## Task\nAdd a CSV export."
        fast = analyze_components(prompt, "fast").synthesized_prompt
        assert _headers(fast) == ["## CONTEXT", "## OBJECTIVE", "## STYLE"]
        deep = analyze_components(prompt, "deep").synthesized_prompt
        assert len(_headers(deep)) == 6
        assert "- Add a CSV export." in deep

    def test_fills_missing_tone(self):
        text = analyze_components(LOGIN_PAGE, "deep").synthesized_prompt
        assert DEFAULT_TONE in text

    def test_does_not_mutate_input(self):
        prompt = "fix the login bug"
        result = analyze_components(prompt, "fast")
        assert result.prompt == "fix the login bug"
        assert synthesize_prompt(prompt, result.components) == result.synthesized_prompt


class TestTemplateHelpers:
    def test_technical_stack(self):
        assert infer_technical_stack("A React app in TypeScript") == (
            "- Technology stack: React, TypeScript\n- [Add other constraints]"
        )
        assert infer_technical_stack("a shell script").startswith("- [Specify technologies")

    def test_context(self):
        assert infer_context("Situation: the cache is stale\nFix it") == "the cache is stale"
        assert infer_context("Add caching to the python service") == (
            "Working in a development environment with Python"
        )
        assert infer_context("") == DEFAULT_CONTEXT

    def test_context_label_does_not_span_lines(self):
        assert infer_context("Background:\nAdd a CSV export") == DEFAULT_CONTEXT
        assert infer_objective("Goal:\nthe parser is slow") == "Goal:"

    def test_objective(self):
        assert infer_objective("Refactor the parser\nKeep the API stable") == "Refactor the parser"
        assert infer_objective("Goal: ship the beta") == "ship the beta"
        assert infer_objective("the parser is slow") == "the parser is slow"
        assert infer_objective("   ") == DEFAULT_OBJECTIVE

    def test_requirements(self):
        assert infer_requirements("Create a page\nwith a form\n\nand a button") == "- with a form\n- and a button"
        assert infer_requirements("Create a page") == f"- Create a page\n{REQUIREMENTS_PLACEHOLDER}"
        assert infer_requirements("") == REQUIREMENTS_PLACEHOLDER

    def test_deliverables(self):
        assert list_deliverables("include docs and a test suite") == "- Documentation\n- Test coverage"
        assert list_deliverables("nothing concrete") == DEFAULT_DELIVERABLES


class TestRecordChanges:
    def test_bug_fix_changes(self):
        result = analyze_components("fix the login bug", "fast")
        assert [str(c) for c in result.changes] == [
            "[C] Added background context and situational details",
            "[C] Specified constraints and requirements",
            "[O] Made objective measurable with success criteria",
            "[S] Specified output format and presentation style",
            "[S] Defined structure and organization approach",
        ]

    def test_deep_gaps_are_recorded(self):
        result = analyze_components(LOGIN_PAGE, "deep")
        tags = [c.component for c in result.changes]
        assert "T" in tags
        assert "A" not in tags
        assert "R" not in tags

    def test_never_empty(self):
        complete = (
            "Create a reporting dashboard. Background: the existing admin tool is slow. "
            "It must load in under a second. Success means all reports render. "
            "Format the output as a markdown table with a section per report."
        )
        changes = record_changes(analyze_components(complete, "fast").components)
        assert len(changes) == 1
        assert changes[0].component == "O"

    def test_missing_traits_count_as_gaps(self):
        components = CostarComponents(
            context=ComponentAnalysis("context", 0, traits={}),
            objective=ComponentAnalysis("objective", 0, traits={}),
            style=ComponentAnalysis("style", 0, traits={}),
        )
        assert len(record_changes(components)) == 6
        assert DEFAULT_FORMAT in synthesize_prompt("fix the login bug", components)
