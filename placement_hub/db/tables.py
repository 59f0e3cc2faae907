"""
Database schema.

Tables:
- users, profiles            : identity and student/staff profile data
- skills, student_skills     : skill catalogue and per-student proficiency
- projects, certifications,
  achievements               : student portfolio
- job_opportunities          : postings by tnp/recruiter users
- applications               : one row per (student, job), UNIQUE enforced here

Primary keys are UUID strings generated in Python so every backend
(PostgreSQL in production, SQLite in tests) handles them the same way.
"""

import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()


def new_id() -> str:
    return str(uuid.uuid4())


users = Table(
    "users",
    metadata,
    Column("id", String(36), primary_key=True, default=new_id),
    Column("email", String(255), nullable=False, unique=True),
    Column("password_hash", String(255), nullable=False),
    Column("role", String(20), nullable=False),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", DateTime, nullable=False),
)

profiles = Table(
    "profiles",
    metadata,
    Column("user_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("full_name", String(100), nullable=False),
    Column("email", String(255), nullable=False),
    Column("role", String(20), nullable=False),
    Column("department", String(100)),
    Column("year_of_study", Integer),
    Column("gpa", Float),
    Column("phone", String(30)),
    Column("bio", Text),
    Column("linkedin_url", String(255)),
    Column("github_url", String(255)),
    Column("created_at", DateTime, nullable=False),
    Column("updated_at", DateTime, nullable=False),
)

skills = Table(
    "skills",
    metadata,
    Column("id", String(36), primary_key=True, default=new_id),
    Column("name", String(100), nullable=False, unique=True),
    Column("category", String(20), nullable=False, default="technical"),
)

student_skills = Table(
    "student_skills",
    metadata,
    Column("id", String(36), primary_key=True, default=new_id),
    Column("student_id", String(36), ForeignKey("profiles.user_id", ondelete="CASCADE"), nullable=False),
    Column("skill_id", String(36), ForeignKey("skills.id", ondelete="CASCADE"), nullable=False),
    Column("proficiency_level", String(20), nullable=False, default="intermediate"),
    Column("verified", Boolean, nullable=False, default=False),
    UniqueConstraint("student_id", "skill_id", name="uq_student_skill"),
)

projects = Table(
    "projects",
    metadata,
    Column("id", String(36), primary_key=True, default=new_id),
    Column("student_id", String(36), ForeignKey("profiles.user_id", ondelete="CASCADE"), nullable=False),
    Column("title", String(200), nullable=False),
    Column("description", Text),
    Column("tech_stack", JSON, nullable=False, default=list),
    Column("github_url", String(255)),
    Column("live_url", String(255)),
    Column("status", String(20), nullable=False, default="completed"),
    Column("start_date", Date),
    Column("end_date", Date),
    Column("created_at", DateTime, nullable=False),
)

certifications = Table(
    "certifications",
    metadata,
    Column("id", String(36), primary_key=True, default=new_id),
    Column("student_id", String(36), ForeignKey("profiles.user_id", ondelete="CASCADE"), nullable=False),
    Column("title", String(200), nullable=False),
    Column("issuing_organization", String(200), nullable=False),
    Column("issue_date", Date),
    Column("expiry_date", Date),
    Column("credential_id", String(100)),
    Column("credential_url", String(255)),
    Column("verified", Boolean, nullable=False, default=False),
)

achievements = Table(
    "achievements",
    metadata,
    Column("id", String(36), primary_key=True, default=new_id),
    Column("student_id", String(36), ForeignKey("profiles.user_id", ondelete="CASCADE"), nullable=False),
    Column("title", String(200), nullable=False),
    Column("description", Text),
    Column("badge_type", String(50), nullable=False),
    Column("points", Integer, default=0),
    Column("issued_date", Date),
    Column("created_at", DateTime, nullable=False),
)

job_opportunities = Table(
    "job_opportunities",
    metadata,
    Column("id", String(36), primary_key=True, default=new_id),
    Column("posted_by", String(36), ForeignKey("users.id"), nullable=False),
    Column("title", String(200), nullable=False),
    Column("company_name", String(200), nullable=False),
    Column("job_type", String(20), nullable=False),
    Column("location", String(200)),
    Column("location_type", String(20)),
    Column("description", Text, nullable=False, default=""),
    Column("required_skills", JSON, nullable=False, default=list),
    Column("preferred_skills", JSON, nullable=False, default=list),
    Column("min_gpa", Float),
    Column("min_experience_months", Integer, default=0),
    Column("stipend_min", Float),
    Column("stipend_max", Float),
    Column("conversion_chance", String(10)),
    Column("application_deadline", DateTime),
    Column("start_date", Date),
    Column("duration_months", Integer),
    Column("status", String(20), nullable=False, default="active"),
    Column("created_at", DateTime, nullable=False),
    Column("updated_at", DateTime, nullable=False),
)

applications = Table(
    "applications",
    metadata,
    Column("id", String(36), primary_key=True, default=new_id),
    Column("student_id", String(36), ForeignKey("profiles.user_id", ondelete="CASCADE"), nullable=False),
    Column("job_id", String(36), ForeignKey("job_opportunities.id", ondelete="CASCADE"), nullable=False),
    Column("cover_letter", Text),
    Column("status", String(30), nullable=False, default="applied"),
    Column("resume_url", String(255)),
    Column("mentor_feedback", Text),
    Column("recruiter_feedback", Text),
    Column("applied_at", DateTime, nullable=False),
    Column("updated_at", DateTime, nullable=False),
    UniqueConstraint("student_id", "job_id", name="uq_application_student_job"),
)
