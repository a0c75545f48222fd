"""Google Gemini provider via google-genai SDK."""

from google import genai
from google.genai import types

from knotable.llm.providers.base import DEFAULT_TIMEOUT_SECONDS, LLMProvider
from knotable.llm.schemas import GenerationParams, ProviderReply


class GeminiProvider(LLMProvider):
    """Gemini provider using the direct Gemini API (no Vertex AI)."""

    provider_name = "gemini"

    def __init__(
        self,
        api_key: str,
        default_model: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        super().__init__(default_model, timeout_seconds)
        self._client = genai.Client(api_key=api_key)

    async def _generate(self, prompt: str, params: GenerationParams) -> ProviderReply:
        """Generate text via Gemini."""
        config = types.GenerateContentConfig(
            temperature=params.temperature,
            max_output_tokens=params.max_tokens,
            system_instruction=params.system_prompt,
        )
        response = await self._client.aio.models.generate_content(
            model=self._default_model,
            contents=prompt,
            config=config,
        )

        usage = response.usage_metadata
        return ProviderReply(
            # .text is None when the response carries no candidates
            text=response.text or "",
            model=self._default_model,
            tokens_used=usage.total_token_count if usage else None,
        )
