"""OpenAI-compatible provider (OpenAI + Groq)."""

import openai

from knotable.llm.errors import ProviderError, ProviderTimeoutError
from knotable.llm.providers.base import DEFAULT_TIMEOUT_SECONDS, LLMProvider
from knotable.llm.schemas import GenerationParams, ProviderReply


class OpenAICompatProvider(LLMProvider):
    """Provider for OpenAI API and compatible services (Groq).

    Groq uses the same chat-completions format with a different base_url.
    """

    def __init__(
        self,
        api_key: str,
        default_model: str,
        provider_name: str = "openai",
        base_url: str | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        super().__init__(default_model, timeout_seconds)
        self.provider_name = provider_name
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
            max_retries=0,
        )

    async def _generate(self, prompt: str, params: GenerationParams) -> ProviderReply:
        """Generate text via the chat-completions endpoint."""
        messages: list[dict[str, str]] = []
        if params.system_prompt:
            messages.append({"role": "system", "content": params.system_prompt})
        messages.append({"role": "user", "content": prompt})

        response = await self._client.chat.completions.create(
            model=self._default_model,
            # OpenAI SDK expects union of typed message params, but accepts
            # plain dicts at runtime.
            messages=messages,  # type: ignore[arg-type]
            temperature=params.temperature,
            max_tokens=params.max_tokens,
            timeout=params.timeout_seconds,
        )

        content = ""
        if response.choices:
            content = response.choices[0].message.content or ""
        usage = response.usage
        return ProviderReply(
            text=content,
            model=response.model or self._default_model,
            tokens_used=usage.total_tokens if usage else None,
        )

    def _classify_error(self, exc: Exception, timeout: float) -> ProviderError:
        if isinstance(exc, openai.APITimeoutError):
            return ProviderTimeoutError(self.provider_name, timeout)
        return super()._classify_error(exc, timeout)
