"""Extraction of the JSON payload embedded in generated text."""

import json
from collections.abc import Iterator
from typing import Any

from knotable.llm.errors import MalformedGenerationResponseError


def _balanced_end(text: str, start: int) -> int | None:
    """Index of the brace closing the object opened at ``start``, if any."""
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
    return None


def iter_json_objects(text: str) -> Iterator[str]:
    """Yield balanced ``{...}`` substrings in order of their opening brace.

    Braces inside JSON string literals (including escaped quotes) do
    not count towards the nesting depth. An opening brace that is never
    closed is skipped and the scan resumes at the next one.
    """
    start = text.find("{")
    while start != -1:
        end = _balanced_end(text, start)
        if end is not None:
            yield text[start : end + 1]
        start = text.find("{", start + 1)


def find_json_object(text: str) -> str | None:
    """Return the first balanced ``{...}`` substring of ``text``, or None."""
    return next(iter_json_objects(text), None)


def extract_json_object(text: str) -> dict[str, Any]:
    """Parse the first balanced JSON object found in ``text``.

    Models often wrap the payload in prose or markdown fences
    ("Here is your result: {...}"); only the object itself is parsed.
    Candidates that are not valid JSON, such as ``{n}`` placeholders
    echoed from the prompt, are passed over.

    Raises:
        MalformedGenerationResponseError: no object found, or no
            candidate is valid JSON. ``raw_text`` holds the full text.
    """
    first_error: json.JSONDecodeError | None = None
    for candidate in iter_json_objects(text):
        try:
            parsed: dict[str, Any] = json.loads(candidate)
        except json.JSONDecodeError as exc:
            first_error = first_error or exc
            continue
        return parsed

    if first_error is None:
        raise MalformedGenerationResponseError(text, "no JSON object found")
    raise MalformedGenerationResponseError(
        text, f"invalid JSON: {first_error.msg} at position {first_error.pos}"
    ) from first_error
