"""
JSON extraction from free-form model output.

Generative models wrap JSON in markdown fences, prose or trailing notes.
extract_json isolates the first balanced top-level object so it can be
parsed; braces inside string literals are not counted.

Dependencies: json, re
System role: Parsing utility for analysis engine output
"""

import json
import re
from typing import Any

from backend.core.exceptions import ParseError

_FENCE_PATTERN = re.compile(r"```(?:json)?\s*", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove markdown code fence markers, keeping their contents."""
    return _FENCE_PATTERN.sub("", text).strip()


def extract_json(text: str) -> str:
    """
    Return the first balanced JSON object substring in text.

    Args:
        text: Raw model output

    Returns:
        str: Substring from the first "{" to its matching "}"

    Raises:
        ParseError: If no balanced object exists
    """
    if not text:
        raise ParseError("No JSON object found in response", raw_text=text)

    cleaned = strip_code_fences(text)
    start = cleaned.find("{")
    while start != -1:
        end = _match_closing_brace(cleaned, start)
        if end is not None:
            return cleaned[start : end + 1]
        start = cleaned.find("{", start + 1)

    raise ParseError("No JSON object found in response", raw_text=text)


def _match_closing_brace(text: str, start: int) -> int | None:
    """Index of the brace closing the object opened at start, None if unbalanced."""
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
                return i
    return None


def parse_json_object(text: str) -> dict[str, Any]:
    """
    Extract and decode the first JSON object in text.

    Raises:
        ParseError: If no object is found, it is not valid JSON,
            or it does not decode to a dict
    """
    candidate = extract_json(text)
    try:
        value = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON object: {e.msg}", raw_text=text) from e

    if not isinstance(value, dict):
        raise ParseError("Expected a JSON object", raw_text=text)
    return value
