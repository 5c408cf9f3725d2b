"""
Coach prompt templates.

One template per generation use-case:
- Turn response (follow-up during a topic conversation)
- Topic summary (insight paired with the user's own summary)
- Holistic report (across all completed topics)

Each template is sent as a single user-role prompt.
"""

import json
from collections.abc import Iterable
from typing import Any

from innercompass.agents.prompts.formatting_instructions import (
    CHAT_FORMATTING,
    INSIGHT_FORMATTING,
    REPLY_LANGUAGE,
)
from innercompass.content.catalog import Topic
from innercompass.models.conversation import Message


def serialize_history(messages: Iterable[Message]) -> str:
    """Render a conversation as ``ROLE: content`` lines in append order."""
    return "\n".join(f"{m.role.upper()}: {m.content}" for m in messages)


def build_turn_prompt(topic: Topic, history: list[Message], user_context: str) -> str:
    """Prompt for the coach's reply to the latest user turn."""
    return f"""You are an empathetic, insightful, and professional Life Coach.
The user is currently working on a self-discovery module.

Current Topic: "{topic.title}"
Main Question: "{topic.main_prompt}"

The user has been provided with a list of reflecting questions to guide their thinking.

User Context/Background: {user_context}

Recent Conversation History:
{serialize_history(history)}

YOUR GOAL:
1. Acknowledge the user's latest input with empathy.
2. Identify key patterns, emotions, or strengths in what they said.
3. Ask ONE or TWO powerful, probing follow-up questions to help them dig deeper into the current topic.
4. Do NOT simply repeat their answer. Synthesize it.
5. Keep the tone warm, encouraging, but professional.
{CHAT_FORMATTING}
{REPLY_LANGUAGE}"""


def build_summary_prompt(topic: Topic, history: list[Message], user_summary: str) -> str:
    """Prompt for the AI insight that accompanies the user's own summary."""
    return f"""You are an expert Life Coach. The user has completed a reflection session on the topic: "{topic.title}".

Session Transcript:
{serialize_history(history)}

User's Own Summary:
"{user_summary}"

TASK:
Write a concise but profound summary (in Chinese) of the user's insights for this topic.
1. Highlight the core discovery they made.
2. Point out a "blind spot" or a "hidden potential" they might have missed based on their answers.
3. Connect this insight to their broader self-discovery journey (Values/Talents/Passions).
{INSIGHT_FORMATTING}"""


def build_report_prompt(completed_data: dict[str, dict[str, Any]]) -> str:
    """Prompt for the cross-module self-discovery report."""
    data_str = json.dumps(completed_data, ensure_ascii=False, indent=2)
    return f"""You are a master architect of human potential. The user has completed several self-discovery modules.

Here is the data from their completed sessions (Values, Talents, Passions):
{data_str}

TASK:
Generate a comprehensive "Self-Discovery Report" in Chinese.

Structure:
1. **核心价值观 (Core Values)**: Synthesize their value drivers.
2. **天赋原力 (Native Superpowers)**: Identify their natural talents and flow states.
3. **热情罗盘 (Passion Compass)**: Summarize what gives them energy.
4. **整合建议 (Integration)**: How can they combine their Values, Talents, and Passions to live a more fulfilling life? Provide actionable advice.
{INSIGHT_FORMATTING}"""
