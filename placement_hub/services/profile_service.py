"""
Profile Service - student profile and portfolio data.

Covers the profile row, skill catalogue / student skills, projects,
certifications and achievements, plus the profile completion score and the
student snapshot that AI prompts are built from.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from placement_hub.core.errors import DataFetchError, NotFoundError
from placement_hub.db.postgres import get_db_session, rows_to_dicts, to_db_values, utcnow
from placement_hub.db.tables import (
    achievements,
    certifications,
    new_id,
    profiles,
    projects,
    skills,
    student_skills,
)

logger = logging.getLogger(__name__)


# Profile completion weights (sum to 100)
COMPLETION_WEIGHTS = {
    "basic_info": 20,
    "bio": 10,
    "gpa": 10,
    "contact": 10,
    "projects": 20,
    "skills": 15,
    "certifications": 15,
}
MIN_BIO_LENGTH = 20


# ============================================================
# PROFILE
# ============================================================

def get_profile(user_id: str) -> Optional[dict]:
    with get_db_session() as db:
        row = db.execute(select(profiles).where(profiles.c.user_id == user_id)).mappings().first()
    return dict(row) if row else None


def require_profile(user_id: str) -> dict:
    profile = get_profile(user_id)
    if not profile:
        raise NotFoundError("Profile not found. Please complete your profile first.")
    return profile


def update_profile(user_id: str, changes: Dict[str, Any]) -> dict:
    """Apply only the provided fields."""
    if changes:
        with get_db_session() as db:
            db.execute(
                update(profiles)
                .where(profiles.c.user_id == user_id)
                .values(**to_db_values(changes), updated_at=utcnow())
            )
    return require_profile(user_id)


# ============================================================
# SKILLS
# ============================================================

def list_skill_catalogue(category: Optional[str] = None) -> List[dict]:
    query = select(skills).order_by(skills.c.name)
    if category:
        query = query.where(skills.c.category == category)
    with get_db_session() as db:
        return rows_to_dicts(db.execute(query))


def _get_or_create_skill(db, name: str, category: str) -> str:
    row = db.execute(
        select(skills.c.id).where(skills.c.name == name)
    ).first()
    if row:
        return row[0]
    skill_id = new_id()
    db.execute(insert(skills).values(id=skill_id, name=name, category=category))
    return skill_id


def get_student_skills(student_id: str) -> List[dict]:
    query = (
        select(
            skills.c.id.label("skill_id"),
            skills.c.name,
            skills.c.category,
            student_skills.c.proficiency_level,
            student_skills.c.verified,
        )
        .select_from(student_skills.join(skills, student_skills.c.skill_id == skills.c.id))
        .where(student_skills.c.student_id == student_id)
        .order_by(skills.c.name)
    )
    try:
        with get_db_session() as db:
            return rows_to_dicts(db.execute(query))
    except SQLAlchemyError as e:
        logger.exception("Failed to load skills for %s", student_id)
        raise DataFetchError("Failed to load skills") from e


def add_student_skill(student_id: str, name: str, category: str, proficiency_level: str) -> dict:
    """Add a skill (creating it in the catalogue if needed) or update its proficiency."""
    name = name.strip()
    with get_db_session() as db:
        skill_id = _get_or_create_skill(db, name, category)
        existing = db.execute(
            select(student_skills.c.id).where(
                student_skills.c.student_id == student_id,
                student_skills.c.skill_id == skill_id,
            )
        ).first()
        if existing:
            db.execute(
                update(student_skills)
                .where(student_skills.c.id == existing[0])
                .values(proficiency_level=proficiency_level)
            )
        else:
            db.execute(
                insert(student_skills).values(
                    id=new_id(),
                    student_id=student_id,
                    skill_id=skill_id,
                    proficiency_level=proficiency_level,
                    verified=False,
                )
            )
    return next(s for s in get_student_skills(student_id) if s["skill_id"] == skill_id)


def remove_student_skill(student_id: str, skill_id: str) -> None:
    with get_db_session() as db:
        result = db.execute(
            delete(student_skills).where(
                student_skills.c.student_id == student_id,
                student_skills.c.skill_id == skill_id,
            )
        )
        if result.rowcount == 0:
            raise NotFoundError("Skill not found in profile")


# ============================================================
# PORTFOLIO
# ============================================================

def list_projects(student_id: str) -> List[dict]:
    with get_db_session() as db:
        return rows_to_dicts(db.execute(
            select(projects)
            .where(projects.c.student_id == student_id)
            .order_by(projects.c.created_at.desc())
        ))


def add_project(student_id: str, data: Dict[str, Any]) -> dict:
    row = {"id": new_id(), "student_id": student_id, "created_at": utcnow(), **to_db_values(data)}
    with get_db_session() as db:
        db.execute(insert(projects).values(**row))
    return row


def list_certifications(student_id: str) -> List[dict]:
    with get_db_session() as db:
        return rows_to_dicts(db.execute(
            select(certifications)
            .where(certifications.c.student_id == student_id)
            .order_by(certifications.c.issue_date.desc())
        ))


def add_certification(student_id: str, data: Dict[str, Any]) -> dict:
    row = {"id": new_id(), "student_id": student_id, "verified": False, **to_db_values(data)}
    with get_db_session() as db:
        db.execute(insert(certifications).values(**row))
    return row


def list_achievements(student_id: str) -> List[dict]:
    with get_db_session() as db:
        return rows_to_dicts(db.execute(
            select(achievements)
            .where(achievements.c.student_id == student_id)
            .order_by(achievements.c.created_at.desc())
        ))


# ============================================================
# DERIVED VIEWS
# ============================================================

def completion_score(
    profile: dict,
    project_count: int,
    skill_count: int,
    certification_count: int
) -> Dict[str, Any]:
    """
    Weighted sum over which profile sections are filled in.

    Returns:
        {"score": 0-100, "missing_sections": [...]}
    """
    checks = {
        "basic_info": bool(profile.get("full_name") and profile.get("email") and profile.get("department")),
        "bio": len(profile.get("bio") or "") > MIN_BIO_LENGTH,
        "gpa": bool(profile.get("gpa") and profile["gpa"] > 0),
        "contact": bool(profile.get("phone") or profile.get("linkedin_url") or profile.get("github_url")),
        "projects": project_count > 0,
        "skills": skill_count > 0,
        "certifications": certification_count > 0,
    }
    score = sum(COMPLETION_WEIGHTS[section] for section, done in checks.items() if done)
    return {
        "score": min(100, score),
        "missing_sections": [section for section, done in checks.items() if not done],
    }


def get_completion(student_id: str) -> Dict[str, Any]:
    profile = require_profile(student_id)
    return completion_score(
        profile,
        project_count=len(list_projects(student_id)),
        skill_count=len(get_student_skills(student_id)),
        certification_count=len(list_certifications(student_id)),
    )


def build_student_snapshot(profile: dict, include_contact: bool = False) -> Dict[str, Any]:
    """
    Collect what AI prompts need to know about a student.
    """
    student_id = profile["user_id"]
    snapshot = {
        "profile": {
            "name": profile.get("full_name"),
            "department": profile.get("department"),
            "year_of_study": profile.get("year_of_study"),
            "gpa": profile.get("gpa"),
            "bio": profile.get("bio"),
        },
        "skills": [
            {"name": s["name"], "category": s["category"], "proficiency": s["proficiency_level"]}
            for s in get_student_skills(student_id)
        ],
        "projects": [
            {
                "title": p["title"],
                "description": p.get("description"),
                "tech_stack": p.get("tech_stack") or [],
                "status": p.get("status"),
            }
            for p in list_projects(student_id)
        ],
        "certifications": [
            {"title": c["title"], "organization": c["issuing_organization"]}
            for c in list_certifications(student_id)
        ],
    }
    if include_contact:
        snapshot["profile"].update({
            "email": profile.get("email"),
            "phone": profile.get("phone"),
            "linkedin_url": profile.get("linkedin_url"),
            "github_url": profile.get("github_url"),
        })
    return snapshot
