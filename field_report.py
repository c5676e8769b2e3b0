"""Report which key spellings analysis payloads actually use.

Run it over a dump of stored responses to see whether the synonym tables in
``field_synonyms`` still cover what the models emit.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

from field_synonyms import RED_FLAGS_KEYS, SKILLS_KEYS, SUMMARY_KEYS, WORK_HISTORY_KEYS
from json_recovery import recover_json
from response_parser import unwrap_container

logger = logging.getLogger(__name__)

CATEGORY_SYNONYMS = {
    "skills": SKILLS_KEYS,
    "work_history": WORK_HISTORY_KEYS,
    "red_flags": RED_FLAGS_KEYS,
    "summary": SUMMARY_KEYS,
}


@dataclass
class FieldNameReport:
    records_seen: int = 0
    records_analyzed: int = 0
    top_level: Counter = field(default_factory=Counter)
    skills: Counter = field(default_factory=Counter)
    work_history: Counter = field(default_factory=Counter)
    red_flags: Counter = field(default_factory=Counter)
    summary: Counter = field(default_factory=Counter)
    nested: Counter = field(default_factory=Counter)

    def unknown_variations(self) -> Dict[str, List[str]]:
        """Category keys seen in the data that no synonym table lists yet."""
        unknown: Dict[str, List[str]] = {}
        for category, synonyms in CATEGORY_SYNONYMS.items():
            counts: Counter = getattr(self, category)
            missing = [key for key, _ in counts.most_common() if key not in synonyms]
            if missing:
                unknown[category] = missing
        return unknown


def _categories_for(key: str) -> List[str]:
    lower_key = key.lower()
    categories = []
    if "skill" in lower_key or lower_key in ("abilities", "competencies"):
        categories.append("skills")
    if (
        any(term in lower_key for term in ("history", "experience", "employment", "work"))
        or lower_key in ("jobs", "positions", "roles")
    ):
        categories.append("work_history")
    if any(term in lower_key for term in ("flag", "warning", "concern", "issue", "gap")):
        categories.append("red_flags")
    if (
        any(term in lower_key for term in ("summary", "overview"))
        or lower_key in ("profile", "abstract", "description")
    ):
        categories.append("summary")
    return categories


def _count_nested(value: Any, parent: str, counts: Counter) -> None:
    if isinstance(value, list):
        if value and isinstance(value[0], (dict, list)):
            _count_nested(value[0], parent, counts)
        return
    if not isinstance(value, dict):
        return
    for key, child in value.items():
        path = f"{parent}.{key}"
        counts[path] += 1
        if isinstance(child, (dict, list)):
            _count_nested(child, path, counts)


def _payload_object(payload: Any) -> Any:
    if isinstance(payload, str):
        payload = recover_json(payload)
    return unwrap_container(payload)


def analyze_field_names(payloads: Iterable[Any]) -> FieldNameReport:
    report = FieldNameReport()
    for payload in payloads:
        report.records_seen += 1
        obj = _payload_object(payload)
        if not isinstance(obj, dict):
            continue
        report.records_analyzed += 1

        for key, value in obj.items():
            key = str(key)
            report.top_level[key] += 1
            for category in _categories_for(key):
                getattr(report, category)[key] += 1
            if isinstance(value, (dict, list)):
                _count_nested(value, key, report.nested)

    logger.info("Analysed field names of %d/%d payloads", report.records_analyzed, report.records_seen)
    return report


def _format_counts(title: str, counts: Counter) -> List[str]:
    lines = [f"=== {title} ==="]
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    lines.extend(f"{key}: {count}" for key, count in ordered)
    if not counts:
        lines.append("(none)")
    return lines


def format_report(report: FieldNameReport) -> str:
    lines = [f"Payloads analysed: {report.records_analyzed} of {report.records_seen}", ""]
    sections = (
        ("TOP-LEVEL FIELD NAMES", report.top_level),
        ("SKILLS FIELD VARIATIONS", report.skills),
        ("WORK HISTORY FIELD VARIATIONS", report.work_history),
        ("RED FLAGS FIELD VARIATIONS", report.red_flags),
        ("SUMMARY FIELD VARIATIONS", report.summary),
        ("ALL NESTED FIELD NAMES", report.nested),
    )
    for title, counts in sections:
        lines.extend(_format_counts(title, counts))
        lines.append("")

    unknown = report.unknown_variations()
    if unknown:
        lines.append("=== NOT IN SYNONYM TABLES ===")
        for category, keys in unknown.items():
            lines.append(f"{category}: {', '.join(keys)}")
    return "\n".join(lines).rstrip() + "\n"
