"""Tests for ContentGenerator."""

from unittest.mock import AsyncMock

import pytest

from knotable.content.generator import ContentGenerator
from knotable.content.prompts import CampaignBrief, build_quiz_prompt
from knotable.llm.errors import (
    AllProvidersFailedError,
    MalformedGenerationResponseError,
    NoProvidersAvailableError,
)
from knotable.llm.router import ProviderRouter
from knotable.llm.schemas import GenerationRequest, GenerationResult


def _result(content: str = '{"ok": true}', provider: str = "groq") -> GenerationResult:
    return GenerationResult(
        content=content,
        provider_used=provider,
        model_used="m",
        tokens_used=10,
        estimated_cost=0.0001,
        elapsed_ms=5,
    )


def _router(result: GenerationResult | None = None) -> ProviderRouter:
    router = AsyncMock(spec=ProviderRouter)
    router.generate = AsyncMock(return_value=result or _result())
    return router  # type: ignore[return-value]


def _sent_request(router: ProviderRouter) -> GenerationRequest:
    return router.generate.await_args.args[0]  # type: ignore[attr-defined]


class TestContentGenerator:
    async def test_quiz_sends_template_params(self) -> None:
        router = _router(_result('{"questions": []}'))
        generated = await ContentGenerator(router).generate_quiz("SQL", 2)

        assert generated.data == {"questions": []}
        assert generated.prompt == build_quiz_prompt("SQL", 2)
        request = _sent_request(router)
        assert request.prompt_text == generated.prompt.user_prompt
        assert request.system_prompt == generated.prompt.system_prompt
        assert request.temperature == 0.5
        assert request.max_tokens == 1500
        assert request.preferred_provider == "auto"

    async def test_embedded_json_extracted(self) -> None:
        router = _router(
            _result('Here is your result: {"milestones": [{"title": "Basics"}]}')
        )
        brief = CampaignBrief(title="T", topic="React")

        generated = await ContentGenerator(router).generate_campaign(brief)

        assert generated.data == {"milestones": [{"title": "Basics"}]}
        assert generated.result.provider_used == "groq"

    async def test_prose_raises_malformed(self) -> None:
        router = _router(_result("I could not produce JSON today."))

        with pytest.raises(MalformedGenerationResponseError) as exc_info:
            await ContentGenerator(router).generate_objective("SQL", 1, [])

        assert exc_info.value.raw_text == "I could not produce JSON today."
        router.generate.assert_awaited_once()  # type: ignore[attr-defined]

    async def test_prompt_override_replaces_user_prompt(self) -> None:
        router = _router()
        generated = await ContentGenerator(router).generate_resources(
            "Rust", ["video"], prompt_override="My own prompt"
        )

        assert _sent_request(router).prompt_text == "My own prompt"
        assert generated.prompt.user_prompt == "My own prompt"
        assert generated.prompt.kind == "resources"

    async def test_provider_timeout_and_overrides_forwarded(self) -> None:
        router = _router()
        generator = ContentGenerator(router, timeout_seconds=12.5)

        await generator.generate_quiz(
            "Go", 3, provider="gemini", disabled_overrides={"groq": True}
        )

        request = _sent_request(router)
        assert request.preferred_provider == "gemini"
        assert request.timeout_seconds == 12.5
        assert router.generate.await_args.args[1] == {"groq": True}  # type: ignore[attr-defined]

    @pytest.mark.parametrize(
        "error",
        [
            NoProvidersAvailableError(),
            AllProvidersFailedError([("groq", "boom"), ("gemini", "bust")]),
        ],
    )
    async def test_routing_errors_propagate(self, error: Exception) -> None:
        router = _router()
        router.generate.side_effect = error  # type: ignore[attr-defined]

        with pytest.raises(type(error)):
            await ContentGenerator(router).generate_quiz("Go", 1)
