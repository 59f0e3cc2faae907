"""
Student Routes

GET /students/profile - Get own profile
PUT /students/profile - Update own profile
GET /students/profile/completion - Profile completion score
GET /students/skills - List my skills
POST /students/skills - Add or update a skill
DELETE /students/skills/{skill_id} - Remove a skill
GET|POST /students/projects - Portfolio projects
GET|POST /students/certifications - Certifications
GET /students/achievements - Achievements
GET /students/applications - My applications

GET /skills - Skill catalogue
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from placement_hub.core.auth import SessionContext, get_current_student, get_current_user
from placement_hub.schemas.schemas import (
    AchievementResponse,
    ApplicationResponse,
    CertificationCreate,
    CertificationResponse,
    MessageResponse,
    ProfileCompletionResponse,
    ProfileResponse,
    ProfileUpdate,
    ProjectCreate,
    ProjectResponse,
    SkillAdd,
    SkillCategory,
    SkillResponse,
    StudentSkillResponse,
)
from placement_hub.services import application_service, profile_service

router = APIRouter(prefix="/students", tags=["Students"])
skills_router = APIRouter(prefix="/skills", tags=["Skills"])


# ============================================================
# PROFILE
# ============================================================

@router.get("/profile", response_model=ProfileResponse)
def get_profile(session: SessionContext = Depends(get_current_user)):
    return session.profile


@router.put("/profile", response_model=ProfileResponse)
def update_profile(data: ProfileUpdate, session: SessionContext = Depends(get_current_user)):
    """Update only the fields that were sent."""
    changes = data.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    return profile_service.update_profile(session.user_id, changes)


@router.get("/profile/completion", response_model=ProfileCompletionResponse)
def get_completion(session: SessionContext = Depends(get_current_student)):
    return profile_service.get_completion(session.user_id)


# ============================================================
# SKILLS
# ============================================================

@router.get("/skills", response_model=List[StudentSkillResponse])
def get_skills(session: SessionContext = Depends(get_current_student)):
    return profile_service.get_student_skills(session.user_id)


@router.post("/skills", response_model=StudentSkillResponse, status_code=201)
def add_skill(skill: SkillAdd, session: SessionContext = Depends(get_current_student)):
    return profile_service.add_student_skill(
        session.user_id, skill.skill_name, skill.category.value, skill.proficiency_level.value
    )


@router.delete("/skills/{skill_id}", response_model=MessageResponse)
def remove_skill(skill_id: str, session: SessionContext = Depends(get_current_student)):
    profile_service.remove_student_skill(session.user_id, skill_id)
    return MessageResponse(message="Skill removed")


@skills_router.get("", response_model=List[SkillResponse])
def list_skills(category: Optional[SkillCategory] = Query(None)):
    return profile_service.list_skill_catalogue(category.value if category else None)


# ============================================================
# PORTFOLIO
# ============================================================

@router.get("/projects", response_model=List[ProjectResponse])
def get_projects(session: SessionContext = Depends(get_current_student)):
    return profile_service.list_projects(session.user_id)


@router.post("/projects", response_model=ProjectResponse, status_code=201)
def add_project(project: ProjectCreate, session: SessionContext = Depends(get_current_student)):
    return profile_service.add_project(session.user_id, project.model_dump())


@router.get("/certifications", response_model=List[CertificationResponse])
def get_certifications(session: SessionContext = Depends(get_current_student)):
    return profile_service.list_certifications(session.user_id)


@router.post("/certifications", response_model=CertificationResponse, status_code=201)
def add_certification(cert: CertificationCreate, session: SessionContext = Depends(get_current_student)):
    return profile_service.add_certification(session.user_id, cert.model_dump())


@router.get("/achievements", response_model=List[AchievementResponse])
def get_achievements(session: SessionContext = Depends(get_current_student)):
    return profile_service.list_achievements(session.user_id)


# ============================================================
# APPLICATIONS
# ============================================================

@router.get("/applications", response_model=List[ApplicationResponse])
def get_my_applications(session: SessionContext = Depends(get_current_student)):
    """All my applications, newest first."""
    return application_service.list_applications(session.user_id)
