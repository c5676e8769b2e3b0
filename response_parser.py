"""Normalise raw LLM resume-analysis responses into one canonical record.

``parse_raw_response`` is total: whatever the model returned (JSON text, JSON
buried in prose, Python-literal dicts, pre-parsed objects nested under any of
the wrapper keys the API has used) it returns a ``CanonicalAnalysis`` and never
raises. Anything it cannot make sense of degrades to empty fields.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from dotenv import load_dotenv

from field_extractors import (
    extract_red_flags,
    extract_score,
    extract_skills,
    extract_summary,
    extract_work_history,
    has_recognized_keys,
)
from json_recovery import recover_json

load_dotenv()

logger = logging.getLogger(__name__)


def env_int(name: str, default: int) -> int:
    """Integer environment setting; malformed or negative values fall back to ``default``."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring malformed %s=%r; using %d", name, raw, default)
        return default
    if value < 0:
        logger.warning("Ignoring negative %s=%d; using %d", name, value, default)
        return default
    return value


# 0 disables the bound.
RESPONSE_MAX_CHARS = env_int("RESPONSE_MAX_CHARS", 0)

STATUS_SUCCESS = "success"
STATUS_TEXT_ONLY = "text_only"
STATUS_EMPTY = "empty"
STATUS_NO_DATA = "no_data"
STATUS_FAILED = "failed"
STATUS_ERROR = "error"

WRAPPER_KEYS = ("rawResponse", "response")


@dataclass(frozen=True)
class CanonicalAnalysis:
    skills: List[Any] = field(default_factory=list)
    work_history: List[Any] = field(default_factory=list)
    red_flags: List[Any] = field(default_factory=list)
    summary: str = ""
    score: float = 0
    raw_data: Any = None

    @classmethod
    def empty(cls, summary: str = "") -> "CanonicalAnalysis":
        return cls(summary=summary)

    @property
    def has_content(self) -> bool:
        return bool(self.skills or self.work_history or self.red_flags or self.summary or self.score)

    def to_dict(self) -> Dict[str, Any]:
        """Render with the camelCase keys the dashboard reads."""
        return {
            "skills": list(self.skills),
            "workHistory": list(self.work_history),
            "redFlags": list(self.red_flags),
            "summary": self.summary,
            "score": self.score,
            "rawData": self.raw_data,
        }


# --- Nested-container unwrapping ---------------------------------------------------

def _as_container(candidate: Any) -> Any:
    if isinstance(candidate, (dict, list)):
        return candidate
    if isinstance(candidate, str):
        recovered = recover_json(candidate)
        if isinstance(recovered, (dict, list)):
            return recovered
    return None


def _parsed_json_of(holder: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(holder, dict):
        return None
    parsed = _as_container(holder.get("parsedJson"))
    return parsed if isinstance(parsed, dict) else None


def unwrap_container(value: Any) -> Any:
    """Dig the analysis object out of the wrapper shapes the API has produced over time.

    Tried in order, first match wins:
    ``parsedJson``; ``rawResponse.parsedJson``; ``extractedSections.parsedJson``
    (top level, then under ``rawResponse``); the first element of a list;
    ``rawResponse`` / ``response`` recursively when they lead to recognised
    keys; the value itself when it has recognised keys; JSON recovered from a
    ``rawText`` string. Otherwise the value is returned unchanged.
    """
    if isinstance(value, list):
        if not value:
            return value
        # the first element may itself be JSON text
        first = _as_container(value[0])
        return unwrap_container(first) if first is not None else value[0]
    if not isinstance(value, dict):
        return value

    parsed = _parsed_json_of(value)
    if parsed is not None:
        return parsed

    nested = value.get("rawResponse")
    parsed = _parsed_json_of(nested)
    if parsed is not None:
        return parsed

    for holder in (value, nested):
        if isinstance(holder, dict):
            parsed = _parsed_json_of(holder.get("extractedSections"))
            if parsed is not None:
                return parsed

    for key in WRAPPER_KEYS:
        inner = _as_container(value.get(key))
        if inner is None:
            continue
        candidate = unwrap_container(inner)
        if has_recognized_keys(candidate):
            return candidate

    if has_recognized_keys(value):
        return value

    raw_text = value.get("rawText")
    if isinstance(raw_text, str):
        recovered = recover_json(raw_text)
        if isinstance(recovered, (dict, list)):
            candidate = unwrap_container(recovered)
            if has_recognized_keys(candidate):
                return candidate

    return value


def _select_source(value: Any) -> Any:
    unwrapped = unwrap_container(value)
    if has_recognized_keys(unwrapped) or isinstance(value, list):
        return unwrapped
    # Nothing recognisable after unwrapping: let the flattened lookup see everything.
    return value


# --- Orchestration -------------------------------------------------------------------

def _build(source: Any) -> Tuple[CanonicalAnalysis, str]:
    analysis = CanonicalAnalysis(
        skills=extract_skills(source),
        work_history=extract_work_history(source),
        red_flags=extract_red_flags(source),
        summary=extract_summary(source),
        score=extract_score(source),
        raw_data=source,
    )
    logger.debug(
        "Analysis response parsed: skills=%d work_history=%d red_flags=%d has_summary=%s score=%s",
        len(analysis.skills),
        len(analysis.work_history),
        len(analysis.red_flags),
        bool(analysis.summary),
        analysis.score,
    )
    return analysis, (STATUS_SUCCESS if analysis.has_content else STATUS_EMPTY)


def _text_only(text: str) -> Tuple[CanonicalAnalysis, str]:
    return CanonicalAnalysis.empty(summary=text.strip()), STATUS_TEXT_ONLY


def _from_text(text: str) -> Tuple[CanonicalAnalysis, str]:
    if RESPONSE_MAX_CHARS and len(text) > RESPONSE_MAX_CHARS:
        logger.warning(
            "Response of %d characters exceeds RESPONSE_MAX_CHARS=%d; not parsing it",
            len(text),
            RESPONSE_MAX_CHARS,
        )
        return CanonicalAnalysis.empty(), STATUS_FAILED

    recovered = recover_json(text)
    if isinstance(recovered, str):
        # double-encoded response, or a bare JSON string of prose
        inner = recover_json(recovered)
        if inner is None:
            return _text_only(recovered) if recovered.strip() else (CanonicalAnalysis.empty(), STATUS_FAILED)
        recovered = inner

    if recovered is None:
        if text.strip():
            logger.info("No JSON found in analysis response; keeping the text as summary")
            return _text_only(text)
        return CanonicalAnalysis.empty(), STATUS_FAILED

    return _build(_select_source(recovered))


def _normalize(raw_response: Any) -> Tuple[CanonicalAnalysis, str]:
    if raw_response is None or (isinstance(raw_response, str) and not raw_response):
        return CanonicalAnalysis.empty(), STATUS_NO_DATA

    if isinstance(raw_response, str):
        return _from_text(raw_response)

    candidate = unwrap_container(raw_response)
    if has_recognized_keys(candidate):
        return _build(candidate)

    logger.debug("No recognised keys in object response; re-parsing it as JSON text")
    return _from_text(json.dumps(raw_response))


def normalize_with_status(raw_response: Any) -> Tuple[CanonicalAnalysis, str]:
    """Like ``parse_raw_response`` but also report how the record was obtained.

    Status is one of ``success``, ``text_only``, ``empty``, ``no_data``,
    ``failed`` or ``error``.
    """
    try:
        return _normalize(raw_response)
    except Exception as exc:
        logger.exception("Unexpected error while normalising analysis response: %s", exc)
        return CanonicalAnalysis.empty(), STATUS_ERROR


def parse_raw_response(raw_response: Any) -> CanonicalAnalysis:
    """Normalise one raw LLM answer into a ``CanonicalAnalysis``. Never raises."""
    analysis, _ = normalize_with_status(raw_response)
    return analysis
