# field_synonyms.py
# Central "knowledge base" of the key spellings analysis responses have used over time.

# Each field maps to an ORDERED tuple of key names. Direct lookup tries them in
# order and the first non-empty hit wins; the flattened fallback matches them
# case-insensitively as substrings of dotted key paths.
# Order: the prompt's own spelling first, then snake_case, space separated,
# camelCase, and finally looser synonyms.

from typing import Dict, FrozenSet, Tuple

SKILLS_KEYS: Tuple[str, ...] = (
    "Skills",
    "skills",
    "technical_skills",
    "Technical_Skills",
    "Technical Skills",
    "technicalSkills",
    "soft_skills",
    "Soft_Skills",
    "softSkills",
    "competencies",
    "Competencies",
)

WORK_HISTORY_KEYS: Tuple[str, ...] = (
    "Work_History",
    "work_history",
    "Work History",
    "workHistory",
    "WorkHistory",
    "work_experience",
    "Work_Experience",
    "Work Experience",
    "workExperience",
    "employment",
    "Employment",
    "recentRoles",
    "jobs",
    "Jobs",
)

RED_FLAGS_KEYS: Tuple[str, ...] = (
    "Red_Flags",
    "red_flags",
    "Red Flags",
    "redFlags",
    "RedFlags",
    "potentialRedFlags",
    "warnings",
    "Warnings",
    "concerns",
    "Concerns",
)

SUMMARY_KEYS: Tuple[str, ...] = (
    "Summary",
    "summary",
    "executive_summary",
    "Executive_Summary",
    "executiveSummary",
    "overview",
    "Overview",
    "profile",
    "Profile",
)

SCORE_KEYS: Tuple[str, ...] = (
    "matching_score",
    "Matching_Score",
    "matchingScore",
    "MatchingScore",
    "score",
    "Score",
    "overallScore",
    "final_score",
    "match",
    "Match",
    "matching",
    "Matching",
)

FIELD_SYNONYMS: Dict[str, Tuple[str, ...]] = {
    "skills": SKILLS_KEYS,
    "workHistory": WORK_HISTORY_KEYS,
    "redFlags": RED_FLAGS_KEYS,
    "summary": SUMMARY_KEYS,
    "score": SCORE_KEYS,
}

# Any of these at the top level of an object means it already is an analysis payload.
RECOGNIZED_KEYS: FrozenSet[str] = frozenset(
    key for synonyms in FIELD_SYNONYMS.values() for key in synonyms
)

# --- Sub-field aliases for list elements --------------------------------------
# canonical lowercase name -> (Capitalized name, other accepted source spellings...)

SKILL_SUBFIELDS: Dict[str, Tuple[str, ...]] = {
    "name": ("Name", "skill", "Skill"),
    "category": ("Category",),
    "level": ("Level", "proficiency", "Proficiency"),
    "years": ("Years",),
    "relevance": ("Relevance",),
}

WORK_HISTORY_SUBFIELDS: Dict[str, Tuple[str, ...]] = {
    "title": ("Title", "position", "Position", "role", "Role"),
    "company": ("Company", "employer", "Employer"),
    "location": ("Location",),
    "startDate": ("StartDate", "start_date", "Start_Date", "start"),
    "endDate": ("EndDate", "end_date", "End_Date", "end"),
    "description": ("Description", "responsibilities", "Responsibilities"),
}

# Only carried over when the source entry has them.
WORK_HISTORY_OPTIONAL_SUBFIELDS: Dict[str, Tuple[str, ...]] = {
    "durationMonths": ("DurationMonths", "duration_months", "Duration_Months"),
    "isCurrentRole": ("IsCurrentRole", "is_current_role", "Is_Current_Role", "current"),
}

RED_FLAG_SUBFIELDS: Dict[str, Tuple[str, ...]] = {
    "description": ("Description", "issue", "Issue", "text", "Text"),
    "impact": ("Impact",),
    "severity": ("Severity",),
}

# Numeric sub-fields default to 0 instead of "".
NUMERIC_SUBFIELDS: FrozenSet[str] = frozenset({"years"})
