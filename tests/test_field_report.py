# tests/test_field_report.py
import json

from field_report import analyze_field_names, format_report


def _payloads():
    return [
        json.dumps({"Skills": ["A"], "Work_History": [{"Title": "Dev", "Company": "X"}], "Summary": "s"}),
        {"parsedJson": {"skills": ["B"], "Red Flags": ["gap"], "employment_gaps": []}},
        "Here you go: {'key_skills': ['C'], 'overview': 'fine', 'details': {'risk': {'level': 'low'}}}",
        "no json at all",
        None,
    ]


def test_counts_top_level_and_categories():
    report = analyze_field_names(_payloads())
    assert report.records_seen == 5
    assert report.records_analyzed == 3
    assert report.top_level["Skills"] == 1
    assert report.top_level["skills"] == 1
    assert set(report.skills) == {"Skills", "skills", "key_skills"}
    assert set(report.work_history) == {"Work_History", "employment_gaps"}
    assert set(report.red_flags) == {"Red Flags", "employment_gaps"}
    assert set(report.summary) == {"Summary", "overview"}


def test_nested_paths_follow_first_list_element():
    report = analyze_field_names(_payloads())
    assert report.nested["Work_History.Title"] == 1
    assert report.nested["Work_History.Company"] == 1
    assert report.nested["details.risk"] == 1
    assert report.nested["details.risk.level"] == 1


def test_unknown_variations_lists_keys_missing_from_synonym_tables():
    unknown = analyze_field_names(_payloads()).unknown_variations()
    assert unknown["skills"] == ["key_skills"]
    assert "employment_gaps" in unknown["work_history"]
    assert "summary" not in unknown


def test_format_report_sorts_by_count():
    report = analyze_field_names([{"Skills": []}, {"Skills": [], "Summary": "x"}])
    text = format_report(report)
    assert text.startswith("Payloads analysed: 2 of 2")
    top_section = text.split("=== TOP-LEVEL FIELD NAMES ===\n", 1)[1]
    assert top_section.index("Skills: 2") < top_section.index("Summary: 1")
    assert "=== NOT IN SYNONYM TABLES ===" not in text


def test_format_report_empty():
    text = format_report(analyze_field_names([]))
    assert "Payloads analysed: 0 of 0" in text
    assert "(none)" in text
