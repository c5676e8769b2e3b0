"""Per-field lookup over loosely structured analysis payloads.

Every extractor runs the same two phases against a candidate source object:

1. direct lookup of each synonym from ``field_synonyms`` in priority order;
2. a fallback over the flattened view of the object, matching synonyms
   case-insensitively as substrings of the dotted key paths.

The first value of the right shape wins. Values of the wrong shape (a string
where a list is expected, a non-numeric score) are skipped, not errors.
"""

import logging
import math
from typing import Any, Callable, Dict, List, Optional, Tuple

from field_synonyms import (
    NUMERIC_SUBFIELDS,
    RECOGNIZED_KEYS,
    RED_FLAG_SUBFIELDS,
    RED_FLAGS_KEYS,
    SCORE_KEYS,
    SKILL_SUBFIELDS,
    SKILLS_KEYS,
    SUMMARY_KEYS,
    WORK_HISTORY_KEYS,
    WORK_HISTORY_OPTIONAL_SUBFIELDS,
    WORK_HISTORY_SUBFIELDS,
)

logger = logging.getLogger(__name__)

_MISSING = object()


# --- Flattened view --------------------------------------------------------------

def flatten_object(obj: Any, prefix: str = "") -> Dict[str, Any]:
    """Project nested dicts onto a single level of dot-joined key paths.

    Only dicts are descended into; lists and scalars are stored as leaves.
    """
    result: Dict[str, Any] = {}
    if not isinstance(obj, dict):
        return result

    for key, value in obj.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            result.update(flatten_object(value, path))
        else:
            result[path] = value
    return result


def has_recognized_keys(value: Any) -> bool:
    return isinstance(value, dict) and any(key in RECOGNIZED_KEYS for key in value)


def _find_field(source: Any, synonyms: Tuple[str, ...], accept: Callable[[Any], Any]) -> Any:
    if not isinstance(source, dict):
        return _MISSING

    for key in synonyms:
        if key in source:
            value = accept(source[key])
            if value is not _MISSING:
                logger.debug("Field found under direct key %r", key)
                return value

    lowered = [synonym.lower() for synonym in synonyms]
    for path, leaf in flatten_object(source).items():
        path_lower = path.lower()
        if any(synonym in path_lower for synonym in lowered):
            value = accept(leaf)
            if value is not _MISSING:
                logger.debug("Field found under flattened path %r", path)
                return value

    return _MISSING


# --- Value acceptors --------------------------------------------------------------

def _non_empty_list(value: Any) -> Any:
    if isinstance(value, list) and value:
        return value
    return _MISSING


def _non_empty_text(value: Any) -> Any:
    if isinstance(value, str) and value.strip():
        return value
    return _MISSING


def _numeric(value: Any) -> Any:
    if value is None or isinstance(value, bool):
        return _MISSING
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return _MISSING
        return value
    if isinstance(value, str):
        text = value.strip().rstrip("%").strip()
        if not text:
            return _MISSING
        try:
            number = float(text)
        except ValueError:
            return _MISSING
        if not math.isfinite(number):
            return _MISSING
        return int(number) if number.is_integer() else number
    return _MISSING


def coerce_score(value: Any) -> Optional[float]:
    """Numeric coercion used for scores; ``None`` when ``value`` is not a usable number."""
    number = _numeric(value)
    return None if number is _MISSING else number


# --- Element shaping ----------------------------------------------------------------

def _first_truthy(item: Dict[str, Any], names: Tuple[str, ...]) -> Any:
    for name in names:
        value = item.get(name)
        if value:
            return value
    return None


def _first_present(item: Dict[str, Any], names: Tuple[str, ...]) -> Any:
    for name in names:
        if item.get(name) is not None:
            return item[name]
    return _MISSING


def _dual_case(
    item: Dict[str, Any],
    subfields: Dict[str, Tuple[str, ...]],
    optional: Optional[Dict[str, Tuple[str, ...]]] = None,
) -> Dict[str, Any]:
    shaped = dict(item)
    for name, aliases in subfields.items():
        value = _first_truthy(item, (name,) + aliases)
        if value is None:
            value = 0 if name in NUMERIC_SUBFIELDS else ""
        shaped[name] = value
        shaped[aliases[0]] = value

    for name, aliases in (optional or {}).items():
        value = _first_present(item, (name,) + aliases)
        if value is not _MISSING:
            shaped[name] = value
            shaped[aliases[0]] = value
    return shaped


def _shape_skill(item: Any) -> Any:
    if isinstance(item, dict):
        return _dual_case(item, SKILL_SUBFIELDS)
    return item


def _shape_job(item: Any) -> Any:
    if isinstance(item, dict):
        return _dual_case(item, WORK_HISTORY_SUBFIELDS, WORK_HISTORY_OPTIONAL_SUBFIELDS)
    return item


def _shape_red_flag(item: Any) -> Any:
    if isinstance(item, dict):
        return _dual_case(item, RED_FLAG_SUBFIELDS)
    if isinstance(item, str):
        return {"description": item, "Description": item}
    return item


# --- Field extractors ------------------------------------------------------------------

def extract_skills(source: Any) -> List[Any]:
    found = _find_field(source, SKILLS_KEYS, _non_empty_list)
    if found is _MISSING:
        return []
    return [_shape_skill(item) for item in found]


def extract_work_history(source: Any) -> List[Any]:
    found = _find_field(source, WORK_HISTORY_KEYS, _non_empty_list)
    if found is _MISSING:
        return []
    return [_shape_job(item) for item in found]


def extract_red_flags(source: Any) -> List[Any]:
    """Red flags as dicts; bare strings are wrapped as ``{"description": ..., "Description": ...}``."""
    found = _find_field(source, RED_FLAGS_KEYS, _non_empty_list)
    if found is _MISSING:
        return []
    return [_shape_red_flag(item) for item in found]


def extract_summary(source: Any) -> str:
    found = _find_field(source, SUMMARY_KEYS, _non_empty_text)
    return "" if found is _MISSING else found


def extract_score(source: Any) -> float:
    """Match score from the first synonym or path that coerces to a finite number, else 0."""
    found = _find_field(source, SCORE_KEYS, _numeric)
    return 0 if found is _MISSING else found
