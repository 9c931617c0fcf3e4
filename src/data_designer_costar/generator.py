from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from data_designer.engine.column_generators.generators.base import ColumnGeneratorFullColumn

from data_designer_costar.config import CostarColumnConfig
from data_designer_costar.core import analyze_components, score
from data_designer_costar.models import CostarResult, Mode
from data_designer_costar.review import assess_quality, deep_insights, needs_escalation, review_prompt, to_review

if TYPE_CHECKING:
    import pandas as pd

logger = logging.getLogger(__name__)


def build_row_output(text: str, config: CostarColumnConfig) -> dict:
    """Analyze one row's text and shape the column value per the config flags."""
    result: CostarResult = analyze_components(text, config.mode)
    composite = score(result)
    output: dict = {
        "is_valid": composite.overall >= config.min_score,
        "costar_score": composite.overall,
        "costar_rating": composite.rating,
        "component_scores": {a.component: a.score for a in result.components},
    }
    if config.include_suggestions:
        output["costar_issues"] = [issue for a in result.components for issue in a.issues]
        output["costar_suggestions"] = [s for a in result.components for s in a.suggestions]
    if config.include_synthesized_prompt:
        output["synthesized_prompt"] = result.synthesized_prompt
        output["costar_changes"] = [str(change) for change in result.changes]
    if config.include_triage and result.mode is Mode.FAST:
        escalation = needs_escalation(text, result)
        output["needs_deep_analysis"] = escalation.needs_deep_analysis
        output["triage_reasons"] = list(escalation.reasons)
    if config.include_review:
        output["prompt_review"] = review_prompt(text).to_payload()
        output["costar_review"] = to_review(result).to_payload()
        output["quality_assessment"] = assess_quality(text).to_payload()
    if config.include_deep_insights and result.mode is Mode.DEEP:
        output["deep_insights"] = deep_insights(text).to_payload()
    return output


class CostarColumnGenerator(ColumnGeneratorFullColumn[CostarColumnConfig]):
    """Column generator that scores prompt text against the COSTAR framework."""

    def generate(self, data: pd.DataFrame) -> pd.DataFrame:
        logger.info(f"\U0001f3af Scoring column {self.config.name!r} with COSTAR analysis")
        logger.info(f"   target columns: {self.config.target_columns}")
        logger.info(f"   mode: {self.config.mode}")
        logger.info(f"   min_score: {self.config.min_score}")

        results = []
        for index, row in data[self.config.target_columns].iterrows():
            text = " ".join(str(v) for v in row.values if v is not None)
            output = build_row_output(text, self.config)
            if output.get("needs_deep_analysis"):
                logger.debug(f"   row {index}: deep analysis recommended ({len(output['triage_reasons'])} reasons)")
            results.append(output)

        data = data.copy()
        data[self.config.name] = results
        return data
