"""Anthropic Claude provider."""

from typing import Any

import anthropic

from knotable.llm.errors import ProviderError, ProviderTimeoutError
from knotable.llm.providers.base import DEFAULT_TIMEOUT_SECONDS, LLMProvider
from knotable.llm.schemas import GenerationParams, ProviderReply


class AnthropicProvider(LLMProvider):
    """Anthropic provider using official SDK."""

    provider_name = "anthropic"

    def __init__(
        self,
        api_key: str,
        default_model: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        super().__init__(default_model, timeout_seconds)
        self._client = anthropic.AsyncAnthropic(
            api_key=api_key,
            timeout=timeout_seconds,
            max_retries=0,
        )

    async def _generate(self, prompt: str, params: GenerationParams) -> ProviderReply:
        """Generate text via the Messages API."""
        kwargs: dict[str, Any] = {
            "model": self._default_model,
            "max_tokens": params.max_tokens,
            "temperature": params.temperature,
            "messages": [{"role": "user", "content": prompt}],
            "timeout": params.timeout_seconds,
        }
        if params.system_prompt:
            kwargs["system"] = params.system_prompt

        response = await self._client.messages.create(**kwargs)

        text = "".join(
            block.text for block in response.content if block.type == "text"
        )
        usage = response.usage
        return ProviderReply(
            text=text,
            model=response.model or self._default_model,
            tokens_used=usage.input_tokens + usage.output_tokens if usage else None,
        )

    def _classify_error(self, exc: Exception, timeout: float) -> ProviderError:
        if isinstance(exc, anthropic.APITimeoutError):
            return ProviderTimeoutError(self.provider_name, timeout)
        return super()._classify_error(exc, timeout)
