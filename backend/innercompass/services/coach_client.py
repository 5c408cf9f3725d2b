"""Coach client: the three generation use-cases on top of the language model."""

import logging
from dataclasses import dataclass
from typing import Any

from innercompass.agents.prompts import (
    build_report_prompt,
    build_summary_prompt,
    build_turn_prompt,
)
from innercompass.content.catalog import Topic
from innercompass.errors import ServiceError
from innercompass.models.conversation import Message
from innercompass.services.base import BaseLLMService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CoachResult:
    """Outcome of one generation call: generated text, or the failure reason."""

    text: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, text: str) -> "CoachResult":
        return cls(text=text)

    @classmethod
    def failure(cls, error: str) -> "CoachResult":
        return cls(error=error)


class CoachClient(BaseLLMService):
    """
    Formats prompts for the language model and reports typed results.

    Failures never turn into user-facing text here; callers decide what to
    show and whether to let the user retry.
    """

    async def turn_response(
        self, topic: Topic, history: list[Message], user_display_name: str
    ) -> CoachResult:
        """Coach reply to the latest user turn, given the full history."""
        prompt = build_turn_prompt(topic, history, user_display_name)
        return await self._generate(prompt, f"turn response for {topic.id}")

    async def topic_summary(
        self, topic: Topic, history: list[Message], user_summary: str
    ) -> CoachResult:
        """Insight summary for a finished topic."""
        prompt = build_summary_prompt(topic, history, user_summary)
        return await self._generate(prompt, f"topic summary for {topic.id}")

    async def holistic_report(self, completed_data: dict[str, dict[str, Any]]) -> CoachResult:
        """Cross-module report over every completed topic."""
        prompt = build_report_prompt(completed_data)
        return await self._generate(
            prompt, f"holistic report over {len(completed_data)} topics"
        )

    async def _generate(self, prompt: str, context: str) -> CoachResult:
        try:
            text = await self._call_model(prompt)
        except ServiceError as e:
            logger.error(f"[CoachClient] Error generating {context}: {e}")
            return CoachResult.failure(str(e))
        except (AttributeError, IndexError) as e:
            # Provider response did not have the expected shape
            logger.error(f"[CoachClient] Malformed response generating {context}: {e}")
            return CoachResult.failure(str(e))
        logger.info(f"[CoachClient] Generated {context} ({len(text)} chars)")
        return CoachResult.success(text)
