"""Base class for services that call the language model."""

import logging
from typing import Any

import anthropic
import openai
from anthropic import AsyncAnthropic

from innercompass.config import settings
from innercompass.errors import ServiceError

logger = logging.getLogger(__name__)


class BaseLLMService:
    """
    Base class for language-model-backed services.

    Provides common functionality for:
    - Client initialization for the configured provider
    - A single request/response call primitive with a bounded timeout
    - Translating every provider failure into ``ServiceError``

    Calls are never retried here; retrying is up to the caller.
    """

    def __init__(
        self,
        client: Any | None = None,
        provider: str | None = None,
        model: str | None = None,
    ) -> None:
        self.provider = provider or settings.llm_provider
        self.model = model or settings.model_coach
        self.temperature = settings.coach_temperature
        self.timeout = settings.coach_timeout_seconds
        self.client = client if client is not None else self._build_client()
        logger.info(f"[{self.__class__.__name__}] Using {self.provider} model: {self.model}")

    def _build_client(self) -> Any:
        if self.provider == "anthropic":
            api_key = settings.anthropic_api_key
            if not api_key:
                logger.error(f"[{self.__class__.__name__}] No ANTHROPIC_API_KEY found!")
                raise ValueError("ANTHROPIC_API_KEY is not set in environment variables")
            # Strip quotes if present (common .env issue)
            api_key = api_key.strip('"').strip("'")
            return AsyncAnthropic(api_key=api_key, timeout=self.timeout, max_retries=0)

        api_key = settings.llm_api_key
        if not api_key:
            logger.error(f"[{self.__class__.__name__}] No LLM_API_KEY found!")
            raise ValueError("LLM_API_KEY is not set in environment variables")
        api_key = api_key.strip('"').strip("'")
        return openai.AsyncOpenAI(
            api_key=api_key,
            base_url=settings.llm_base_url,
            timeout=self.timeout,
            max_retries=0,
        )

    async def _call_model(self, prompt: str, max_tokens: int | None = None) -> str:
        """
        Send one user-role prompt and return the generated text.

        Args:
            prompt: The full prompt
            max_tokens: Maximum tokens to generate

        Returns:
            The stripped response text

        Raises:
            ServiceError: on timeout, HTTP/connection errors or empty content
        """
        max_tokens = max_tokens or settings.coach_max_tokens
        try:
            if self.provider == "anthropic":
                response = await self.client.messages.create(
                    model=self.model,
                    max_tokens=max_tokens,
                    temperature=self.temperature,
                    messages=[{"role": "user", "content": prompt}],
                )
                content = response.content[0].text if response.content else ""
            else:
                response = await self.client.chat.completions.create(
                    model=self.model,
                    messages=[{"role": "user", "content": prompt}],
                    temperature=self.temperature,
                    max_tokens=max_tokens,
                )
                content = response.choices[0].message.content if response.choices else ""
        except (openai.APITimeoutError, anthropic.APITimeoutError) as e:
            raise ServiceError(f"Language model timed out after {self.timeout}s") from e
        except (openai.APIError, anthropic.APIError) as e:
            raise ServiceError(f"Language model request failed: {e}") from e

        if not content or not content.strip():
            raise ServiceError("Language model returned empty content")
        return content.strip()
