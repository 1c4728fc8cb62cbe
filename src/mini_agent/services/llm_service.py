from __future__ import annotations

import logging

from openai import AsyncOpenAI

from mini_agent.config import ModelConfig, get_model_config, settings

logger = logging.getLogger(__name__)


def _create_openai_client(base_url: str = "") -> AsyncOpenAI:
    """Create an async OpenAI-compatible client."""
    return AsyncOpenAI(
        api_key=settings.llm_api_key,
        base_url=base_url or settings.llm_base_url,
        max_retries=0,
    )


class LLMService:
    def __init__(self, config: ModelConfig | None = None) -> None:
        if config is None:
            config = get_model_config()
        self._config = config
        self.client = _create_openai_client(config.base_url)
        self.model = config.model or settings.llm_model
        self._temperature = config.temperature
        self._max_tokens = config.max_tokens

    def _get_temperature(self) -> float:
        return self._temperature if self._temperature is not None else 0.2

    async def generate(self, prompt: str, system_prompt: str = "") -> str:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        kwargs: dict = {
            "model": self.model,
            "messages": messages,
            "temperature": self._get_temperature(),
        }
        if self._max_tokens is not None:
            kwargs["max_tokens"] = self._max_tokens

        response = await self.client.chat.completions.create(**kwargs)
        if response.usage:
            logger.debug(
                "Tokens: prompt=%d, completion=%d",
                response.usage.prompt_tokens,
                response.usage.completion_tokens,
            )
        return response.choices[0].message.content or ""
