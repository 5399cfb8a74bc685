"""
Skill matching between a job's required skills and a jobseeker's skills.

Skills are compared lowercased and trimmed. A candidate skill matches a
required skill when they are equal or one contains the other. Each candidate
skill counts at most once: an exact match wins over a substring match, and
among substring matches the first required skill in job order wins.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class SkillMatch:
    candidate_skill: str
    required_skill: str
    exact: bool


def normalize_skills(raw) -> list[str]:
    """Clean a skills field for storage: list or comma-separated string in, trimmed non-empty strings out."""
    if not raw:
        return []
    if isinstance(raw, str):
        raw = raw.split(",")
    return [str(s).strip() for s in raw if str(s).strip()]


def normalize_for_matching(skills) -> list[str]:
    seen = []
    for skill in skills or []:
        s = str(skill).strip().lower()
        if s and s not in seen:
            seen.append(s)
    return seen


def match_skill(candidate_skill: str, required: list[str]) -> SkillMatch | None:
    """Best required skill for one normalized candidate skill, or None."""
    if candidate_skill in required:
        return SkillMatch(candidate_skill, candidate_skill, exact=True)
    for req in required:
        if req in candidate_skill or candidate_skill in req:
            return SkillMatch(candidate_skill, req, exact=False)
    return None


def compute_skill_match(required_skills, candidate_skills) -> dict:
    """
    Compare a candidate's skills against a job's required skills.
    Returns the matched candidate skills (in candidate order), the pairs that
    produced them, and counts.
    """
    required = normalize_for_matching(required_skills)
    candidate = normalize_for_matching(candidate_skills)

    pairs = []
    if required:
        for skill in candidate:
            hit = match_skill(skill, required)
            if hit:
                pairs.append(hit)

    return {
        "matched": [p.candidate_skill for p in pairs],
        "pairs": pairs,
        "match_count": len(pairs),
        "exact_count": sum(1 for p in pairs if p.exact),
    }


def job_match_message(job_title: str | None, company_name: str | None, matched: list[str]) -> str:
    head = f'A new job "{job_title or "Untitled"}" at {company_name or "a company"}'
    if len(matched) > 2:
        return f"{head} matches {len(matched)} of your skills."
    if len(matched) == 2:
        return f"{head} matches your skills: {', '.join(matched)}."
    return f"{head} matches your skill: {matched[0]}."
