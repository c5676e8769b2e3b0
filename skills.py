# skills.py
# Keyword knowledge base used to split extracted skills into technical and soft skills.

# Matching is case-insensitive and by substring, so "Team Leadership" and
# "Strong Communication Skills" both land in the soft bucket.

from typing import Any, Dict, List

SOFT_SKILL_KEYWORDS = (
    # --- Interpersonal ---
    "communication",
    "teamwork",
    "collaboration",
    "interpersonal",
    "presentation",
    "negotiation",
    "conflict resolution",
    # --- Leadership & self-management ---
    "leadership",
    "time management",
    "organization",
    "adaptability",
    "flexibility",
    # --- Thinking ---
    "problem solving",
    "critical thinking",
    "creativity",
)


def _skill_label(skill: Any) -> str:
    if isinstance(skill, dict):
        return str(skill.get("name") or skill.get("Name") or "")
    if isinstance(skill, str):
        return skill
    return ""


def is_soft_skill(skill: Any) -> bool:
    label = _skill_label(skill).lower()
    return bool(label) and any(keyword in label for keyword in SOFT_SKILL_KEYWORDS)


def categorize_skills(skills: Any) -> Dict[str, List[Any]]:
    """Split a skills list into technical and soft skills, keeping order and duplicates."""
    result: Dict[str, List[Any]] = {"technical_skills": [], "soft_skills": []}
    if not isinstance(skills, list):
        return result

    for skill in skills:
        bucket = "soft_skills" if is_soft_skill(skill) else "technical_skills"
        result[bucket].append(skill)
    return result
