"""
Matching Service - scoring, filtering and ordering of job opportunities.

Everything here is a pure function over JobOpportunity objects, so the
opportunity feed can recompute freely whenever any input changes.

MATCH SCORE (0-100, display only, never gates applying):
- GPA band           30 / 15 / 0
- AI recommendation  40
- Internship posting 15  (fixed bias, not a stored student preference)
- Recency            15 if <= 7 days, 7 if <= 30 days
"""

from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence, Set

from placement_hub.schemas.schemas import JobOpportunity


MAX_SCORE = 100

GPA_POINTS = 30
GPA_NEAR_MISS_POINTS = 15
GPA_NEAR_MISS_MARGIN = 0.5
RECOMMENDED_POINTS = 40
INTERNSHIP_POINTS = 15
FRESH_POSTING_POINTS = 15
RECENT_POSTING_POINTS = 7
FRESH_POSTING_DAYS = 7
RECENT_POSTING_DAYS = 30

ALL = "all"


# ============================================================
# MATCH SCORE
# ============================================================

def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def days_since(created_at: datetime, now: Optional[datetime] = None) -> float:
    now = _naive_utc(now) if now else datetime.now(timezone.utc).replace(tzinfo=None)
    return (now - _naive_utc(created_at)).total_seconds() / 86400


def gpa_points(min_gpa: Optional[float], student_gpa: Optional[float]) -> int:
    """Missing GPA on either side counts as "no requirement"."""
    if min_gpa is None or student_gpa is None:
        return GPA_POINTS
    if student_gpa >= min_gpa:
        return GPA_POINTS
    if student_gpa >= min_gpa - GPA_NEAR_MISS_MARGIN:
        return GPA_NEAR_MISS_POINTS
    return 0


def recency_points(created_at: datetime, now: Optional[datetime] = None) -> int:
    age = days_since(created_at, now)
    if age <= FRESH_POSTING_DAYS:
        return FRESH_POSTING_POINTS
    if age <= RECENT_POSTING_DAYS:
        return RECENT_POSTING_POINTS
    return 0


def score_job(
    job: JobOpportunity,
    student_gpa: Optional[float],
    recommended: Set[str],
    now: Optional[datetime] = None
) -> int:
    """
    Compute the 0-100 suitability score of one job for one student.

    Args:
        job: The posting being scored
        student_gpa: Student's GPA, None if the profile has none
        recommended: Job IDs the AI gateway recommended for this student
        now: Reference time for the recency band (defaults to current UTC)
    """
    score = gpa_points(job.min_gpa, student_gpa)

    if job.id in recommended:
        score += RECOMMENDED_POINTS

    # TODO: derive from a stored job-type preference once profiles carry one
    if job.job_type == "internship":
        score += INTERNSHIP_POINTS

    score += recency_points(job.created_at, now)

    return min(score, MAX_SCORE)


# ============================================================
# FILTER / SEARCH
# ============================================================

def matches_text(job: JobOpportunity, text: str) -> bool:
    """Case-insensitive substring match on title, company, description or any required skill."""
    needle = text.lower()
    return (
        needle in job.title.lower()
        or needle in job.company_name.lower()
        or needle in (job.description or "").lower()
        or any(needle in skill.lower() for skill in job.required_skills)
    )


def filter_jobs(
    jobs: Iterable[JobOpportunity],
    text: Optional[str] = None,
    job_type: Optional[str] = ALL,
    location_type: Optional[str] = ALL
) -> List[JobOpportunity]:
    """
    Narrow a job list by free text, job type and location type.

    The three filters are ANDed; "all", None and empty text pass everything.
    Text is matched as given, surrounding whitespace included.
    """
    filtered = list(jobs)

    if text:
        filtered = [job for job in filtered if matches_text(job, text)]

    if job_type and job_type != ALL:
        filtered = [job for job in filtered if job.job_type == job_type]

    if location_type and location_type != ALL:
        filtered = [job for job in filtered if job.location_type == location_type]

    return filtered


# ============================================================
# RECOMMENDATION MERGE
# ============================================================

def sanitize_recommendations(job_ids: Iterable[str], jobs: Sequence[JobOpportunity]) -> List[str]:
    """Keep only IDs of jobs in the given list, first occurrence wins, AI order kept."""
    known = {job.id for job in jobs}
    seen = set()
    cleaned = []
    for job_id in job_ids:
        job_id = str(job_id)
        if job_id in known and job_id not in seen:
            seen.add(job_id)
            cleaned.append(job_id)
    return cleaned


def merge_and_sort(jobs: Iterable[JobOpportunity], recommended: Set[str]) -> List[JobOpportunity]:
    """Recommended jobs first, newest first within each group."""
    by_recency = sorted(jobs, key=lambda job: _naive_utc(job.created_at), reverse=True)
    # sorted() is stable, so recency order survives inside each partition
    return sorted(by_recency, key=lambda job: job.id not in recommended)


# ============================================================
# HEURISTIC RECOMMENDATIONS (used when the AI answer is unusable)
# ============================================================

def meets_gpa_requirement(job: JobOpportunity, student_gpa: Optional[float]) -> bool:
    if job.min_gpa is None or student_gpa is None:
        return True
    return student_gpa >= job.min_gpa


def has_skill_overlap(job: JobOpportunity, skill_names: Iterable[str]) -> bool:
    """A required skill counts as covered when it appears inside any student skill name."""
    if not job.required_skills:
        return True
    owned = [name.lower() for name in skill_names]
    return any(
        required.lower() in name
        for required in job.required_skills
        for name in owned
    )


def heuristic_recommendations(
    jobs: Sequence[JobOpportunity],
    student_gpa: Optional[float],
    skill_names: Iterable[str],
    limit: int = 5
) -> List[str]:
    skill_names = list(skill_names)
    picked = [
        job.id for job in merge_and_sort(jobs, set())
        if meets_gpa_requirement(job, student_gpa) and has_skill_overlap(job, skill_names)
    ]
    return picked[:limit]
