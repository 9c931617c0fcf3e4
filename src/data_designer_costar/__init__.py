# SPDX-License-Identifier: Apache-2.0
"""COSTAR prompt analysis plugin for NeMo Data Designer.

Adds a ``costar-analysis`` column type that scores prompt text against the COSTAR
framework (Context, Objective, Style, Tone, Audience, Response) using keyword and
phrase cues, and synthesizes a restructured prompt. No LLM calls, no API dependencies.

Usage::

    from data_designer_costar import CostarColumnConfig

    builder.add_column(CostarColumnConfig(
        name="prompt_quality",
        target_columns=["prompt"],
        mode="deep",
        min_score=60,
    ))

The engine is also usable on its own::

    from data_designer_costar import analyze_components, score, triage

    result = analyze_components("Create a login page", mode="fast")
    score(result).rating
"""

from data_designer_costar.config import CostarColumnConfig
from data_designer_costar.core import Hyperparameters, analyze_components, analyze_prompt, score, triage
from data_designer_costar.models import Mode

__all__ = [
    "CostarColumnConfig",
    "Hyperparameters",
    "Mode",
    "analyze_components",
    "analyze_prompt",
    "score",
    "triage",
]
