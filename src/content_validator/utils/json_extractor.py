"""
JSON extraction utilities for LLM responses.

Models are asked for a bare JSON object but often wrap it in a fenced
code block or surround it with prose. extract_json_object() finds the
object in any of those shapes without guessing at its contents.
"""

import json
import re
from typing import Any, Dict, Optional

from content_validator.config.logging_config import get_logger

logger = get_logger(__name__)

_FENCED_BLOCK = re.compile(r"```[ \t]*(?:json|JSON)?[ \t]*\r?\n?(.*?)```", re.DOTALL)
_TRAILING_COMMA = re.compile(r",\s*([}\]])")
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def extract_json_object(raw_response: str) -> Optional[Dict[str, Any]]:
    """
    Extract a JSON object from an LLM response.

    Tried in order:
    - the whole response as JSON
    - each fenced code block (```json or bare ```)
    - the span from the first "{" to the last "}"

    Args:
        raw_response: The raw text response from an LLM

    Returns:
        Parsed dict, or None if no JSON object could be recovered
    """
    if not raw_response or not raw_response.strip():
        return None

    text = raw_response.strip()

    candidates = [text]
    candidates.extend(block.strip() for block in _FENCED_BLOCK.findall(text))
    brace_start = text.find("{")
    brace_end = text.rfind("}")
    if 0 <= brace_start < brace_end:
        candidates.append(text[brace_start:brace_end + 1])

    for candidate in candidates:
        parsed = _loads_object(candidate)
        if parsed is not None:
            return parsed

    logger.debug("No JSON object found in response")
    return None


def _loads_object(candidate: str) -> Optional[Dict[str, Any]]:
    """Parse a candidate, with one repair attempt; only dicts are accepted."""
    if not candidate.startswith("{"):
        return None
    for attempt in (candidate, _repair(candidate)):
        try:
            value = json.loads(attempt)
        except json.JSONDecodeError:
            continue
        return value if isinstance(value, dict) else None
    return None


def _repair(json_str: str) -> str:
    """Fix trailing commas, smart quotes and stray control characters."""
    repaired = _TRAILING_COMMA.sub(r"\1", json_str)
    repaired = repaired.replace("“", '"').replace("”", '"')
    repaired = repaired.replace("‘", "'").replace("’", "'")
    return _CONTROL_CHARS.sub("", repaired)
