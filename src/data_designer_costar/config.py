from __future__ import annotations

from typing import Literal

from pydantic import Field

from data_designer.config.column_configs import SingleColumnConfig


class CostarColumnConfig(SingleColumnConfig):
    """Score prompt columns against the COSTAR framework using keyword/phrase analysis.

    Analyzes each row's prompt text for Context, Objective and Style (plus Tone,
    Audience and Response in deep mode) and produces a composite score (0-100), a
    rating, triage reasons, and optionally the synthesized COSTAR prompt.

    Attributes:
        target_columns: Columns whose text content will be concatenated and analyzed.
        mode: ``fast`` analyzes C/O/S, ``deep`` analyzes all six components.
        min_score: Minimum composite score (0-100) for ``is_valid=True``. Defaults to 60
            (the lower bound of the "good" rating).
        include_suggestions: Include per-component issues and ``[tag]`` suggestions.
        include_synthesized_prompt: Include the restructured prompt and its change records.
        include_triage: Include the reasons deep analysis is recommended.
        include_review: Include the prompt review, the COSTAR-derived review and the
            quality assessment.
        include_deep_insights: Include edge cases, alternative phrasings and
            implementation examples. Deep mode only.
    """

    target_columns: list[str]
    mode: Literal["fast", "deep"] = Field(default="fast", description="COSTAR analysis depth")
    min_score: int = Field(default=60, ge=0, le=100, description="Minimum COSTAR score for is_valid=True")
    include_suggestions: bool = Field(default=True, description="Include issues and suggestions in output")
    include_synthesized_prompt: bool = Field(default=False, description="Include the synthesized COSTAR prompt")
    include_triage: bool = Field(default=True, description="Include deep-analysis triage reasons in output")
    include_review: bool = Field(default=False, description="Include prompt review and quality assessment")
    include_deep_insights: bool = Field(default=False, description="Include deep-mode insights in output")
    column_type: Literal["costar-analysis"] = "costar-analysis"

    @staticmethod
    def get_column_emoji() -> str:
        return "\U0001f3af"

    @property
    def required_columns(self) -> list[str]:
        return self.target_columns

    @property
    def side_effect_columns(self) -> list[str]:
        return []
