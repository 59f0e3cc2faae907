"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity,
including the structured payloads expected back from the AI gateway.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from typing import Optional, List, Any, Dict
from datetime import datetime, date
from enum import Enum

from placement_hub.core.config import get_settings


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    mentor = "mentor"
    tnp = "tnp"
    recruiter = "recruiter"


class JobType(str, Enum):
    internship = "internship"
    full_time = "full-time"
    part_time = "part-time"
    contract = "contract"


class LocationType(str, Enum):
    remote = "remote"
    on_site = "on-site"
    hybrid = "hybrid"


class JobStatus(str, Enum):
    active = "active"
    closed = "closed"
    draft = "draft"


class ConversionChance(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    none = "none"


class ApplicationStatus(str, Enum):
    applied = "applied"
    under_review = "under_review"
    interview_scheduled = "interview_scheduled"
    shortlisted = "shortlisted"
    selected = "selected"
    rejected = "rejected"


class SkillCategory(str, Enum):
    technical = "technical"
    soft = "soft"


class ProficiencyLevel(str, Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"
    expert = "expert"


class CareerToolAction(str, Enum):
    resume_enhance = "resume_enhance"
    skill_gap_analysis = "skill_gap_analysis"
    mock_interview = "mock_interview"
    career_roadmap = "career_roadmap"


class ResumeAction(str, Enum):
    analyze = "analyze"
    enhance = "enhance"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: str = Field(..., min_length=2, max_length=100)
    role: UserRole = UserRole.student

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    role: str

class UserResponse(BaseModel):
    user_id: str
    email: str
    role: str
    full_name: str
    is_active: bool
    created_at: datetime


# ============================================================
# PROFILE SCHEMAS
# ============================================================

def _check_gpa(value: Optional[float]) -> Optional[float]:
    scale = get_settings().gpa_scale
    if value is not None and not 0 <= value <= scale:
        raise ValueError(f"gpa must be between 0 and {scale}")
    return value


def _not_null(value):
    if value is None:
        raise ValueError("field cannot be null")
    return value


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=2, max_length=100)
    department: Optional[str] = None
    year_of_study: Optional[int] = Field(None, ge=1, le=6)
    gpa: Optional[float] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None

    @field_validator("gpa")
    @classmethod
    def gpa_within_scale(cls, value):
        return _check_gpa(value)

    @field_validator("full_name", mode="before")
    @classmethod
    def full_name_not_null(cls, value):
        return _not_null(value)


class ProfileResponse(BaseModel):
    user_id: str
    full_name: str
    email: str
    role: str
    department: Optional[str] = None
    year_of_study: Optional[int] = None
    gpa: Optional[float] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

class ProfileCompletionResponse(BaseModel):
    score: int
    missing_sections: List[str] = []


# ============================================================
# SKILL / PORTFOLIO SCHEMAS
# ============================================================

class SkillResponse(BaseModel):
    id: str
    name: str
    category: str

class SkillAdd(BaseModel):
    skill_name: str = Field(..., min_length=1, max_length=100)
    category: SkillCategory = SkillCategory.technical
    proficiency_level: ProficiencyLevel = ProficiencyLevel.intermediate

class StudentSkillResponse(BaseModel):
    skill_id: str
    name: str
    category: str
    proficiency_level: str
    verified: bool = False

class ProjectCreate(BaseModel):
    title: str = Field(..., min_length=2, max_length=200)
    description: Optional[str] = None
    tech_stack: List[str] = []
    github_url: Optional[str] = None
    live_url: Optional[str] = None
    status: str = "completed"
    start_date: Optional[date] = None
    end_date: Optional[date] = None

class ProjectResponse(ProjectCreate):
    id: str
    student_id: str
    created_at: datetime

class CertificationCreate(BaseModel):
    title: str = Field(..., min_length=2, max_length=200)
    issuing_organization: str = Field(..., min_length=2, max_length=200)
    issue_date: Optional[date] = None
    expiry_date: Optional[date] = None
    credential_id: Optional[str] = None
    credential_url: Optional[str] = None

class CertificationResponse(CertificationCreate):
    id: str
    student_id: str
    verified: bool = False

class AchievementResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    badge_type: str
    points: Optional[int] = 0
    issued_date: Optional[date] = None


# ============================================================
# JOB SCHEMAS
# ============================================================

class JobCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)
    company_name: str = Field(..., min_length=2, max_length=200)
    job_type: JobType = JobType.internship
    location: Optional[str] = None
    location_type: LocationType = LocationType.on_site
    description: str = ""
    required_skills: List[str] = []
    preferred_skills: List[str] = []
    min_gpa: Optional[float] = Field(None, ge=0)
    min_experience_months: int = Field(0, ge=0)
    stipend_min: Optional[float] = Field(None, ge=0)
    stipend_max: Optional[float] = Field(None, ge=0)
    conversion_chance: Optional[ConversionChance] = None
    application_deadline: Optional[datetime] = None
    start_date: Optional[date] = None
    duration_months: Optional[int] = Field(None, ge=1)
    status: JobStatus = JobStatus.active

    @model_validator(mode="after")
    def check_stipend_range(self):
        if self.stipend_min is not None and self.stipend_max is not None and self.stipend_min > self.stipend_max:
            raise ValueError("stipend_min cannot exceed stipend_max")
        return self

class JobUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    company_name: Optional[str] = None
    job_type: Optional[JobType] = None
    location: Optional[str] = None
    location_type: Optional[LocationType] = None
    description: Optional[str] = None
    required_skills: Optional[List[str]] = None
    preferred_skills: Optional[List[str]] = None
    min_gpa: Optional[float] = Field(None, ge=0)
    stipend_min: Optional[float] = Field(None, ge=0)
    stipend_max: Optional[float] = Field(None, ge=0)
    conversion_chance: Optional[ConversionChance] = None
    application_deadline: Optional[datetime] = None
    duration_months: Optional[int] = Field(None, ge=1)
    status: Optional[JobStatus] = None

    @field_validator(
        "title", "company_name", "job_type", "description", "required_skills", "preferred_skills", "status",
        mode="before"
    )
    @classmethod
    def required_columns_not_null(cls, value):
        return _not_null(value)


class JobOpportunity(BaseModel):
    id: str
    posted_by: Optional[str] = None
    title: str
    company_name: str
    job_type: str
    location: Optional[str] = None
    location_type: Optional[str] = None
    description: str = ""
    required_skills: List[str] = []
    preferred_skills: List[str] = []
    min_gpa: Optional[float] = None
    min_experience_months: Optional[int] = 0
    stipend_min: Optional[float] = None
    stipend_max: Optional[float] = None
    conversion_chance: Optional[str] = None
    application_deadline: Optional[datetime] = None
    start_date: Optional[date] = None
    duration_months: Optional[int] = None
    status: str = "active"
    created_at: datetime

    @field_validator("required_skills", "preferred_skills", mode="before")
    @classmethod
    def none_to_empty(cls, value):
        return value or []

    @field_validator("description", mode="before")
    @classmethod
    def none_to_blank(cls, value):
        return value or ""

class JobListResponse(BaseModel):
    jobs: List[JobOpportunity]
    total: int


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationCreate(BaseModel):
    cover_letter: Optional[str] = Field(None, max_length=5000)

class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus
    feedback: Optional[str] = None

class ApplicationResponse(BaseModel):
    id: str
    student_id: str
    job_id: str
    job_title: str
    company_name: str
    status: str
    cover_letter: Optional[str] = None
    mentor_feedback: Optional[str] = None
    recruiter_feedback: Optional[str] = None
    applied_at: datetime
    updated_at: datetime

class ApplyResponse(BaseModel):
    message: str
    application: ApplicationResponse
    applications: List[ApplicationResponse]
    notices: List[str] = []

class ReviewQueueItem(ApplicationResponse):
    student_name: str
    student_gpa: Optional[float] = None


# ============================================================
# OPPORTUNITY FEED SCHEMAS
# ============================================================

class ScoredOpportunity(BaseModel):
    job: JobOpportunity
    match_score: int
    is_recommended: bool
    application_status: Optional[str] = None

class BrowseResponse(BaseModel):
    opportunities: List[ScoredOpportunity]
    total: int
    recommended_count: int
    recommendation_reasoning: Optional[str] = None
    recommendation_source: Optional[str] = None
    notices: List[str] = []


# ============================================================
# AI PAYLOAD SCHEMAS (what the gateway must return)
# ============================================================

class AIPayload(BaseModel):
    model_config = ConfigDict(extra="allow")


class RecommendationSet(AIPayload):
    recommended_job_ids: List[str]
    reasoning: str = ""

class JobMatch(AIPayload):
    job_id: str
    match_percentage: float = Field(0, ge=0, le=100)
    explanation: str = ""
    skills_match: Any = None
    improvement_areas: List[Any] = []

class JobMatchingResult(AIPayload):
    recommended_jobs: List[JobMatch]
    career_suggestions: List[Any] = []
    skill_development_tips: List[Any] = []

class ResumeEnhanceResult(AIPayload):
    ats_improvements: List[Any] = []
    content_suggestions: List[Any] = []
    format_tips: List[Any] = []
    skill_gaps: List[Any] = []
    action_items: List[Any] = []

class SkillGapResult(AIPayload):
    current_skills: List[Any] = []
    missing_skills: List[Any] = []
    development_roadmap: List[Any] = []
    certifications: List[Any] = []
    resources: List[Any] = []

class MockInterviewResult(AIPayload):
    technical_questions: List[Any] = []
    behavioral_questions: List[Any] = []
    situational_questions: List[Any] = []
    answer_guidelines: List[Any] = []
    interview_tips: List[Any] = []

class CareerRoadmapResult(AIPayload):
    short_term: List[Any] = []
    medium_term: List[Any] = []
    long_term: List[Any] = []
    skill_timeline: Any = None
    milestones: List[Any] = []
    industry_trends: List[Any] = []

class ResumeAnalysis(AIPayload):
    overall_score: int = Field(..., ge=0, le=100)
    strengths: List[str] = []
    weaknesses: List[str] = []
    missing_skills: List[str] = []
    project_suggestions: List[str] = []
    profile_improvements: List[str] = []
    certification_recommendations: List[str] = []
    action_plan: List[Dict[str, Any]] = []

class EnhancedResume(AIPayload):
    enhanced_resume: str
    improvements_made: List[str] = []
    ats_score: int = Field(0, ge=0, le=100)
    keywords_added: List[str] = []
    formatting_tips: List[str] = []


# ============================================================
# AI REQUEST / RESPONSE SCHEMAS
# ============================================================

class CareerToolRequest(BaseModel):
    action: CareerToolAction
    resume_text: Optional[str] = None
    target_job_id: Optional[str] = None

class ResumeRequest(BaseModel):
    action: ResumeAction = ResumeAction.analyze
    resume_text: Optional[str] = None
    target_job_id: Optional[str] = None

class AIToolResponse(BaseModel):
    success: bool
    source: str  # "ai" or "fallback"
    action: Optional[str] = None
    error: Optional[str] = None
    message: Optional[str] = None
    result: Dict[str, Any]
    generated_at: datetime

class RecommendationResponse(BaseModel):
    recommended_job_ids: List[str]
    reasoning: str
    source: str
    error: Optional[str] = None


# ============================================================
# DASHBOARD / GENERIC SCHEMAS
# ============================================================

class DashboardResponse(BaseModel):
    role: str
    summary: Dict[str, Any]

class MessageResponse(BaseModel):
    message: str
    success: bool = True

class ErrorResponse(BaseModel):
    detail: str
    kind: Optional[str] = None
