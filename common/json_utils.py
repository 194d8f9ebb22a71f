"""
Helpers for turning noisy LLM output into JSON values and for combining them.
"""
import json
import logging
import re
from typing import Any, Iterable

from extraction.errors import JsonParseError, NoJsonFoundError

logger = logging.getLogger(__name__)

# C0 controls, DEL and C1 controls
CONTROL_CHARS = re.compile(r"[\x00-\x1F\x7F-\x9F]")
JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def strip_control_characters(text: str) -> str:
    """Replace control characters with spaces so the text survives JSON encoding."""
    return CONTROL_CHARS.sub(" ", text or "")


def extract_json_object(text: str) -> str:
    """
    Return the span from the first '{' to the last '}' of a model response.

    Models without a JSON mode like to wrap the object in prose
    ("Sure! {...} Hope that helps"); the outermost braces are what we keep.

    Raises:
        NoJsonFoundError: If the response holds no such span
    """
    match = JSON_OBJECT.search(text or "")
    if not match:
        raise NoJsonFoundError()
    return match.group(0)


def parse_json(text: str) -> Any:
    """Parse a JSON document, logging the raw text when it is not valid JSON."""
    try:
        return json.loads(text)
    except (TypeError, ValueError):
        logger.error("JSON parsing error, raw model output: %r", text)
        raise JsonParseError(text) from None


def merge_json(left: Any, right: Any) -> Any:
    """
    Fold two partial results into one.

    Arrays concatenate, objects merge key by key (recursively), and colliding
    scalars become newline-joined strings. Equal values are kept once. The
    merge is order-sensitive: left comes first.
    """
    if left is None:
        return right
    if right is None:
        return left
    if isinstance(left, dict) and isinstance(right, dict):
        merged = dict(left)
        for key, value in right.items():
            merged[key] = merge_json(merged[key], value) if key in merged else value
        return merged
    if isinstance(left, list) or isinstance(right, list):
        left_items = left if isinstance(left, list) else [left]
        right_items = right if isinstance(right, list) else [right]
        return left_items + right_items
    if left == right:
        return left
    return f"{_as_text(left)}\n{_as_text(right)}"


def merge_all(results: Iterable[Any]) -> Any:
    """Left-fold merge_json over results."""
    merged = None
    for result in results:
        merged = merge_json(merged, result)
    return merged


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)
