"""Best-effort recovery of JSON values from free-form LLM output."""

import json
import logging
import re
from typing import Any, Optional

logger = logging.getLogger(__name__)

# --- Literal-token normalisation -----------------------------------------------

_TRUE_TOKEN_RE = re.compile(r"\bTrue\b")
_FALSE_TOKEN_RE = re.compile(r"\bFalse\b")
_NONE_TOKEN_RE = re.compile(r"\bNone\b")
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")

_CLOSERS = {"{": "}", "[": "]"}


def normalize_json_string(text: str) -> str:
    """Rewrite Python-literal conventions (quotes, True/False/None, trailing commas) as JSON."""
    if not text:
        return "{}"
    normalized = text.replace("'", '"')
    normalized = _TRUE_TOKEN_RE.sub("true", normalized)
    normalized = _FALSE_TOKEN_RE.sub("false", normalized)
    normalized = _NONE_TOKEN_RE.sub("null", normalized)
    normalized = _TRAILING_COMMA_RE.sub(r"\1", normalized)
    return normalized


# --- Candidate location ----------------------------------------------------------

def _find_start(text: str) -> int:
    object_start = text.find("{")
    array_start = text.find("[")
    if object_start == -1:
        return array_start
    if array_start == -1:
        return object_start
    return min(object_start, array_start)


def extract_json_candidate(text: str) -> str:
    """Return the first balanced ``{...}`` or ``[...]`` block embedded in ``text``.

    Braces and brackets are only counted outside double-quoted string literals.
    The scan stops as soon as the delimiter type that opened the block is
    balanced again.
    """
    if not text:
        raise ValueError("Empty response text.")

    start = _find_start(text)
    if start == -1:
        raise ValueError("Response text does not contain a JSON object or array.")

    opener = text[start]
    closer = _CLOSERS[opener]
    depth = 0
    in_string = False
    escaped = False

    for index in range(start, len(text)):
        char = text[index]
        if char == '"' and not escaped:
            in_string = not in_string

        if not in_string:
            if char == opener:
                depth += 1
            elif char == closer:
                depth -= 1
                if depth == 0:
                    return text[start : index + 1]

        escaped = char == "\\" and not escaped

    raise ValueError("Unbalanced JSON structure in response text.")


# --- Public entry point -----------------------------------------------------------

def recover_json(text: Optional[str]) -> Any:
    """Parse ``text`` as JSON, digging the first JSON block out of surrounding prose if needed.

    Returns ``None`` when nothing parseable can be located. Never raises.
    """
    if not text or not isinstance(text, str):
        return None

    try:
        return json.loads(text)
    except ValueError:
        logger.debug("Direct JSON parse failed, scanning for an embedded JSON block")

    try:
        candidate = extract_json_candidate(text)
    except ValueError as exc:
        logger.debug("JSON recovery failed: %s", exc)
        return None

    try:
        return json.loads(candidate)
    except ValueError:
        pass

    try:
        return json.loads(normalize_json_string(candidate))
    except ValueError as exc:
        logger.debug("Normalised JSON candidate still unparseable: %s", exc)
        return None
