"""Prompt templates for the AI coach.

This module contains:
- Formatting instructions shared by all coach prompts
- Templates for turn responses, topic summaries and the holistic report

Usage:
    from innercompass.agents.prompts import build_turn_prompt

    prompt = build_turn_prompt(topic, history, user_context="小明")
"""

from innercompass.agents.prompts.formatting_instructions import (
    CHAT_FORMATTING,
    INSIGHT_FORMATTING,
    REPLY_LANGUAGE,
)
from innercompass.agents.prompts.coach_prompts import (
    build_report_prompt,
    build_summary_prompt,
    build_turn_prompt,
    serialize_history,
)

__all__ = [
    # Formatting
    "CHAT_FORMATTING",
    "INSIGHT_FORMATTING",
    "REPLY_LANGUAGE",
    # Coach templates
    "build_turn_prompt",
    "build_summary_prompt",
    "build_report_prompt",
    "serialize_history",
]
