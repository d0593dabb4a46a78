"""
Response Parser - Pulls the JSON array out of free-form model output.

The model is asked for a bare JSON array but may wrap it in prose or
prefix a reasoning block. Only the first reasoning block is removed and
trailing commas directly before a closing bracket or brace are dropped.
"""

import json
import re
from typing import Any, Dict, List

from ..errors import TranslationError

_REASONING_BLOCK_RE = re.compile(r"<think>.*?</think>", re.DOTALL)
_JSON_ARRAY_RE = re.compile(r"\[.*\]", re.DOTALL)
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")


def extract_json_array(raw_text: str) -> List[Any]:
    """
    Extract and parse the JSON array embedded in a model response.

    Raises:
        TranslationError: no array found, invalid JSON, or not a list
    """
    cleaned = _REASONING_BLOCK_RE.sub("", raw_text, count=1).strip()

    match = _JSON_ARRAY_RE.search(cleaned)
    if not match:
        raise TranslationError(f"Failed to extract JSON array from output: {cleaned}")

    json_string = _TRAILING_COMMA_RE.sub(r"\1", match.group(0))
    try:
        data = json.loads(json_string)
    except ValueError as e:
        raise TranslationError(f"Failed to parse JSON output: {e}") from e

    if not isinstance(data, list):
        raise TranslationError("JSON output is not an array")
    return data


def parse_translation_pairs(raw_text: str) -> List[Dict[str, str]]:
    """
    Parse a model response into ``{"key", "value"}`` pairs.

    Any entry that is not an object with string ``key`` and ``value``
    fails the whole response.
    """
    pairs = []
    for entry in extract_json_array(raw_text):
        if not isinstance(entry, dict):
            raise TranslationError(f"Unexpected array entry: {entry!r}")
        key = entry.get("key")
        value = entry.get("value")
        if not isinstance(key, str) or not isinstance(value, str):
            raise TranslationError(f"Entry without string key/value: {entry!r}")
        pairs.append({"key": key, "value": value})
    return pairs
