"""Recover a JSON value from free-form model output."""

import json
import logging
import re
from typing import Any

from ai_quiz.generation.errors import MalformedResponse

logger = logging.getLogger(__name__)

_FENCE_OPEN = re.compile(r"^```[\w+-]*[ \t]*\n?")
_FENCE_CLOSE = re.compile(r"\n?```$")


def strip_code_fence(text: str) -> str:
    """Remove one surrounding markdown code fence (optionally language tagged)."""
    stripped = text.strip()
    if stripped.startswith("```"):
        stripped = _FENCE_OPEN.sub("", stripped, count=1)
        stripped = _FENCE_CLOSE.sub("", stripped, count=1)
    return stripped.strip()


def extract_json(text: str) -> Any:
    """
    Parse model output into a JSON value.

    Tries the whole (unfenced) text first, then balanced ``{...}`` blocks
    from left to right, returning the first that decodes. When a block does
    not decode, scanning resumes just past its opening brace.

    Args:
        text: Raw text returned by a backend

    Returns:
        The decoded JSON value

    Raises:
        MalformedResponse: If nothing in the text decodes as JSON
    """
    if not isinstance(text, str):
        raise MalformedResponse(f"expected text, got {type(text).__name__}")

    candidate = strip_code_fence(text)
    try:
        return json.loads(candidate)
    except json.JSONDecodeError:
        pass

    pos = 0
    while True:
        found = find_object(candidate, pos)
        if found is None:
            break
        start, end = found
        try:
            return json.loads(candidate[start:end])
        except json.JSONDecodeError:
            pos = start + 1

    preview = candidate[:80].replace("\n", " ")
    logger.debug("No JSON object found in output: %r", preview)
    raise MalformedResponse(f"no JSON object found in model output: {preview!r}")


def find_object(text: str, pos: int = 0) -> tuple[int, int] | None:
    """
    Locate the first balanced ``{...}`` block starting at or after ``pos``.

    Braces inside JSON string literals do not count towards the depth. An
    opening brace whose block never closes is skipped and the scan resumes
    just after it.

    Returns:
        ``(start, end)`` slice bounds of the block, or None
    """
    start = text.find("{", pos)
    while start != -1:
        end = _block_end(text, start)
        if end is not None:
            return start, end
        start = text.find("{", start + 1)
    return None


def _block_end(text: str, start: int) -> int | None:
    depth = 0
    in_string = False
    escaped = False

    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i + 1
    return None


def iter_object_candidates(text: str):
    """Yield each balanced top-level ``{...}`` substring in order."""
    pos = 0
    while True:
        found = find_object(text, pos)
        if found is None:
            return
        start, end = found
        yield text[start:end]
        pos = end
