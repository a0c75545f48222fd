"""Shared schemas for the generation core."""

from pydantic import BaseModel, Field

AUTO = "auto"


class GenerationParams(BaseModel):
    """Per-call knobs handed to a provider adapter."""

    temperature: float = 0.7
    max_tokens: int = 2000
    system_prompt: str | None = None
    timeout_seconds: float | None = None  # None -> adapter default


class GenerationRequest(BaseModel):
    """Input for ProviderRouter.generate()."""

    prompt_text: str
    system_prompt: str | None = None
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=2000, gt=0)
    preferred_provider: str = AUTO  # provider name or "auto"
    timeout_seconds: float | None = Field(default=None, gt=0)

    def to_params(self) -> GenerationParams:
        return GenerationParams(
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            system_prompt=self.system_prompt,
            timeout_seconds=self.timeout_seconds,
        )


class ProviderReply(BaseModel):
    """Normalized output of a single provider round trip."""

    text: str
    model: str
    tokens_used: int | None = None


class GenerationResult(BaseModel):
    """Unified result returned to callers."""

    content: str
    provider_used: str  # gemini, openai, groq, anthropic
    model_used: str
    tokens_used: int | None = None
    estimated_cost: float | None = None
    elapsed_ms: int = 0
    fallback_from: str | None = None  # primary provider, when a fallback answered
