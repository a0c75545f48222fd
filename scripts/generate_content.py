"""Generate learning content from the command line.

Usage:
    uv run python scripts/generate_content.py --kind quiz --topic closures --bloom-level 3
    uv run python scripts/generate_content.py --kind objective --topic SQL \\
        --focus-area joins --focus-area indexes --provider gemini --json
    uv run python scripts/generate_content.py --kind campaign --topic React \\
        --title "React in 30 days" --prompt-only
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from knotable.config import get_settings
from knotable.content.generator import ContentGenerator, GeneratedContent
from knotable.content.prompts import (
    CampaignBrief,
    PreparedPrompt,
    build_campaign_prompt,
    build_objective_prompt,
    build_quiz_prompt,
    build_resources_prompt,
)
from knotable.llm.errors import KnotableLLMError
from knotable.llm.schemas import AUTO
from knotable.llm.setup import create_provider_router
from knotable.logging_config import configure_logging_from_settings

KINDS = ("campaign", "quiz", "objective", "resources")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(description="Generate learning content")
    parser.add_argument("--kind", choices=KINDS, required=True)
    parser.add_argument("--topic", required=True)
    parser.add_argument("--bloom-level", type=int, default=1, choices=range(1, 7))
    parser.add_argument(
        "--provider",
        default=AUTO,
        help="Provider name, or 'auto' to pick by priority (default: auto)",
    )
    parser.add_argument("--title", help="Campaign title (defaults to the topic)")
    parser.add_argument(
        "--target-bloom-level",
        type=int,
        choices=range(1, 7),
        help="Campaign target level (defaults to --bloom-level + 2, max 6)",
    )
    parser.add_argument(
        "--focus-area",
        action="append",
        default=[],
        dest="focus_areas",
        help="Focus area; repeat for several",
    )
    parser.add_argument(
        "--resource-type",
        action="append",
        default=[],
        dest="resource_types",
        help="Resource type; repeat for several",
    )
    parser.add_argument(
        "--prompt-only",
        action="store_true",
        help="Print the prompt without calling any provider",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output as JSON",
    )
    return parser.parse_args(argv)


def build_prompt(args: argparse.Namespace) -> PreparedPrompt:
    """Build the prompt selected by ``--kind``."""
    if args.kind == "campaign":
        target = args.target_bloom_level or min(6, args.bloom_level + 2)
        brief = CampaignBrief(
            title=args.title or args.topic,
            topic=args.topic,
            starting_bloom_level=args.bloom_level,
            target_bloom_level=target,
            focus_areas=args.focus_areas,
        )
        return build_campaign_prompt(brief)
    if args.kind == "quiz":
        return build_quiz_prompt(args.topic, args.bloom_level)
    if args.kind == "objective":
        return build_objective_prompt(args.topic, args.bloom_level, args.focus_areas)
    return build_resources_prompt(args.topic, args.resource_types)


def format_prompt_output(prepared: PreparedPrompt, *, as_json: bool) -> str:
    if as_json:
        return json.dumps(prepared._asdict(), indent=2, ensure_ascii=False)
    return (
        f"--- system ({prepared.kind} {prepared.prompt_version}) ---\n"
        f"{prepared.system_prompt}\n"
        f"--- user ---\n"
        f"{prepared.user_prompt}"
    )


def _format_optional(value: int | None) -> str:
    return "n/a" if value is None else str(value)


def _format_cost(cost: float | None) -> str:
    return "n/a" if cost is None else f"${cost:.6f}"


def format_generated_output(generated: GeneratedContent, *, as_json: bool) -> str:
    result = generated.result
    if as_json:
        return json.dumps(
            {"data": generated.data, "result": result.model_dump()},
            indent=2,
            ensure_ascii=False,
        )
    lines = [
        json.dumps(generated.data, indent=2, ensure_ascii=False),
        "",
        f"provider: {result.provider_used} ({result.model_used})",
        f"tokens:   {_format_optional(result.tokens_used)}",
        f"cost:     {_format_cost(result.estimated_cost)}",
        f"elapsed:  {result.elapsed_ms} ms",
    ]
    if result.fallback_from:
        lines.append(f"fallback: {result.fallback_from} failed")
    return "\n".join(lines)


async def run(args: argparse.Namespace) -> GeneratedContent:
    """Send the prompt through a router built from settings."""
    settings = get_settings()
    generator = ContentGenerator(
        create_provider_router(settings),
        timeout_seconds=settings.llm_timeout_seconds,
    )
    return await generator.generate_prepared(build_prompt(args), provider=args.provider)


def main(argv: list[str] | None = None) -> int:
    """Run the content generation CLI."""
    args = parse_args(argv)

    if args.prompt_only:
        print(format_prompt_output(build_prompt(args), as_json=args.json_output))
        return 0

    configure_logging_from_settings(get_settings())
    try:
        generated = asyncio.run(run(args))
    except KnotableLLMError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(format_generated_output(generated, as_json=args.json_output))
    return 0


if __name__ == "__main__":
    sys.exit(main())
