# tests/test_field_extractors.py
import pytest

from field_extractors import (
    coerce_score,
    extract_red_flags,
    extract_score,
    extract_skills,
    extract_summary,
    extract_work_history,
    flatten_object,
    has_recognized_keys,
)


# --- flatten_object ---------------------------------------------------------------

def test_flatten_joins_nested_dict_keys_with_dots():
    data = {"a": {"b": {"c": 1}, "d": "x"}, "e": None}
    assert flatten_object(data) == {"a.b.c": 1, "a.d": "x", "e": None}


def test_flatten_keeps_lists_as_leaves():
    data = {"outer": {"Skills": [{"name": "Python"}], "tags": []}}
    assert flatten_object(data) == {"outer.Skills": [{"name": "Python"}], "outer.tags": []}


def test_flatten_with_prefix():
    assert flatten_object({"x": 1}, "root") == {"root.x": 1}


@pytest.mark.parametrize("value", [None, "text", 3, ["a"], True])
def test_flatten_non_dict_is_empty(value):
    assert flatten_object(value) == {}


# --- skills -------------------------------------------------------------------------

def test_skills_pascal_case_wins_over_lowercase():
    assert extract_skills({"skills": ["B"], "Skills": ["A"]}) == ["A"]


def test_skills_empty_list_falls_through_to_next_synonym():
    assert extract_skills({"Skills": [], "technical_skills": ["Go"]}) == ["Go"]


def test_skills_string_value_is_treated_as_missing():
    assert extract_skills({"Skills": "Python, SQL"}) == []


def test_skills_found_through_flattened_path():
    data = {"analysis": {"candidate": {"TechnicalSkills": ["Rust", "Rust"]}}}
    assert extract_skills(data) == ["Rust", "Rust"]


def test_skill_objects_expose_both_spellings():
    skills = extract_skills({"skills": [{"Name": "Python", "level": "expert", "proficiency": "high"}]})
    assert skills == [
        {
            "Name": "Python",
            "name": "Python",
            "level": "expert",
            "Level": "expert",
            "proficiency": "high",
            "category": "",
            "Category": "",
            "years": 0,
            "Years": 0,
            "relevance": "",
            "Relevance": "",
        }
    ]


def test_skill_source_element_is_not_mutated():
    element = {"name": "SQL"}
    extract_skills({"skills": [element]})
    assert element == {"name": "SQL"}


# --- work history ---------------------------------------------------------------------

def test_work_history_entry_is_dual_cased():
    data = {
        "Work_History": [
            {
                "Title": "Sales Associate",
                "Company": "HOTWORX",
                "location": "Grand Junction, Colorado",
                "startDate": "November 2024",
                "endDate": "Present",
                "durationMonths": 0,
                "isCurrentRole": True,
            }
        ]
    }
    (job,) = extract_work_history(data)
    assert job["title"] == job["Title"] == "Sales Associate"
    assert job["company"] == job["Company"] == "HOTWORX"
    assert job["location"] == job["Location"] == "Grand Junction, Colorado"
    assert job["startDate"] == job["StartDate"] == "November 2024"
    assert job["endDate"] == job["EndDate"] == "Present"
    assert job["description"] == job["Description"] == ""
    assert job["durationMonths"] == job["DurationMonths"] == 0
    assert job["isCurrentRole"] is True
    assert job["IsCurrentRole"] is True


def test_work_history_optional_fields_absent_when_missing():
    (job,) = extract_work_history({"workHistory": [{"title": "Engineer", "company": "Acme"}]})
    assert "durationMonths" not in job
    assert "isCurrentRole" not in job


def test_work_history_snake_case_sub_fields():
    (job,) = extract_work_history({"work_history": [{"position": "Analyst", "start_date": "2019"}]})
    assert job["title"] == "Analyst"
    assert job["startDate"] == "2019"


def test_work_history_space_separated_key():
    assert len(extract_work_history({"Work History": [{"title": "Nanny"}]})) == 1


def test_work_history_non_dict_entries_pass_through():
    assert extract_work_history({"jobs": ["Engineer at Acme"]}) == ["Engineer at Acme"]


# --- red flags ------------------------------------------------------------------------------

def test_red_flag_strings_are_wrapped():
    assert extract_red_flags({"Red_Flags": ["gap in 2020"]}) == [
        {"description": "gap in 2020", "Description": "gap in 2020"}
    ]


def test_red_flag_objects_are_dual_cased():
    (flag,) = extract_red_flags({"redFlags": [{"Description": "Job hopping", "severity": "high"}]})
    assert flag["description"] == flag["Description"] == "Job hopping"
    assert flag["severity"] == flag["Severity"] == "high"
    assert flag["impact"] == flag["Impact"] == ""


def test_red_flag_issue_used_as_description():
    (flag,) = extract_red_flags({"concerns": [{"issue": "No degree"}]})
    assert flag["description"] == "No degree"


def test_red_flags_found_in_nested_object():
    data = {"rawResponse": {"parsedJson": {"Red_Flags": ["gap"]}}}
    assert extract_red_flags(data) == [{"description": "gap", "Description": "gap"}]


# --- summary ------------------------------------------------------------------------------------

def test_summary_blank_string_falls_through():
    assert extract_summary({"Summary": "   ", "overview": "Strong fit"}) == "Strong fit"


def test_summary_from_nested_text_object():
    assert extract_summary({"Summary": {"text": "Nested summary"}}) == "Nested summary"


def test_summary_missing_returns_empty_string():
    assert extract_summary({"Skills": ["A"]}) == ""


# --- score -----------------------------------------------------------------------------------------

def test_score_prefers_matching_score():
    assert extract_score({"score": 10, "matching_score": 77}) == 77


def test_score_numeric_string():
    assert extract_score({"score": " 85% "}) == 85


def test_score_non_numeric_value_continues_to_next_synonym():
    assert extract_score({"matching_score": "high", "score": "62.5"}) == 62.5


def test_score_found_through_flattened_path():
    assert extract_score({"details": {"skill_match": "strong", "overall": {"final_score": 40}}}) == 40


def test_score_defaults_to_zero():
    assert extract_score({"Summary": "nothing numeric"}) == 0


@pytest.mark.parametrize(
    "value, expected",
    [
        (77, 77),
        (12.5, 12.5),
        ("90", 90),
        ("90.5", 90.5),
        ("", None),
        ("n/a", None),
        ("nan", None),
        (float("inf"), None),
        (True, None),
        (None, None),
        ([50], None),
    ],
)
def test_coerce_score(value, expected):
    assert coerce_score(value) == expected


# --- shape checks ---------------------------------------------------------------------------------

@pytest.mark.parametrize("source", [None, "Skills", 12, ["Skills"]])
def test_extractors_on_non_objects_return_zero_values(source):
    assert extract_skills(source) == []
    assert extract_work_history(source) == []
    assert extract_red_flags(source) == []
    assert extract_summary(source) == ""
    assert extract_score(source) == 0


def test_has_recognized_keys():
    assert has_recognized_keys({"Red Flags": []})
    assert not has_recognized_keys({"unrelated": 1})
    assert not has_recognized_keys(["Skills"])
