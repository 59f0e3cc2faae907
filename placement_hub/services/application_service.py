"""
Application Service - the lifecycle of a student's application to a job.

STATES:
    (none) -> applied -> under_review -> interview_scheduled / shortlisted
           -> selected / rejected

"none" is simply the absence of a row. selected and rejected are terminal.

IDEMPOTENCY:
The UNIQUE (student_id, job_id) constraint in the database is the only
guard against double applications. We never pre-check; a unique violation
on insert becomes AlreadyApplied.
"""

import logging
from typing import Dict, List, Optional, Set

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from placement_hub.core.errors import (
    AlreadyApplied,
    DataFetchError,
    InvalidTransition,
    NotFoundError,
    PermissionDenied,
    ValidationError,
)
from placement_hub.db.postgres import get_db_session, is_unique_violation, rows_to_dicts, utcnow
from placement_hub.db.tables import applications, job_opportunities, new_id, profiles
from placement_hub.schemas.schemas import ApplicationStatus, UserRole
from placement_hub.services.job_service import require_job

logger = logging.getLogger(__name__)

S = ApplicationStatus

TRANSITIONS: Dict[ApplicationStatus, Set[ApplicationStatus]] = {
    S.applied: {S.under_review},
    S.under_review: {S.interview_scheduled, S.shortlisted, S.rejected},
    S.interview_scheduled: {S.shortlisted, S.selected, S.rejected},
    S.shortlisted: {S.interview_scheduled, S.selected, S.rejected},
    S.selected: set(),
    S.rejected: set(),
}
TERMINAL_STATES = {S.selected, S.rejected}
OPEN_STATES = set(TRANSITIONS) - TERMINAL_STATES

REVIEWER_ROLES = {UserRole.mentor.value, UserRole.tnp.value, UserRole.recruiter.value}


def can_transition(current: str, new: str) -> bool:
    return ApplicationStatus(new) in TRANSITIONS[ApplicationStatus(current)]


def _application_query(with_student: bool = False):
    columns = [
        applications.c.id,
        applications.c.student_id,
        applications.c.job_id,
        job_opportunities.c.title.label("job_title"),
        job_opportunities.c.company_name,
        job_opportunities.c.posted_by,
        applications.c.status,
        applications.c.cover_letter,
        applications.c.mentor_feedback,
        applications.c.recruiter_feedback,
        applications.c.applied_at,
        applications.c.updated_at,
    ]
    source = applications.join(job_opportunities, applications.c.job_id == job_opportunities.c.id)
    if with_student:
        columns += [profiles.c.full_name.label("student_name"), profiles.c.gpa.label("student_gpa")]
        source = source.join(profiles, applications.c.student_id == profiles.c.user_id)
    return select(*columns).select_from(source)


# ============================================================
# READS
# ============================================================

def list_applications(student_id: str) -> List[dict]:
    """All applications of one student, newest first."""
    query = (
        _application_query()
        .where(applications.c.student_id == student_id)
        .order_by(applications.c.applied_at.desc())
    )
    try:
        with get_db_session() as db:
            return rows_to_dicts(db.execute(query))
    except SQLAlchemyError as e:
        logger.exception("Failed to load applications for %s", student_id)
        raise DataFetchError("Failed to load applications") from e


def get_application(application_id: str) -> dict:
    with get_db_session() as db:
        row = db.execute(
            _application_query().where(applications.c.id == application_id)
        ).mappings().first()
    if not row:
        raise NotFoundError("Application not found")
    return dict(row)


def status_by_job(application_rows: List[dict]) -> Dict[str, str]:
    """job_id -> current status, for annotating a job list."""
    return {row["job_id"]: row["status"] for row in application_rows}


# ============================================================
# APPLY
# ============================================================

def apply(student_id: str, job_id: str, cover_letter: Optional[str] = None) -> dict:
    """
    Record a new application in state "applied".

    Raises:
        NotFoundError: job doesn't exist
        ValidationError: job isn't active
        AlreadyApplied: a row for (student, job) already exists
    """
    job = require_job(job_id)
    if job.status != "active":
        raise ValidationError("Job is not accepting applications")

    now = utcnow()
    application_id = new_id()
    try:
        with get_db_session() as db:
            db.execute(
                insert(applications).values(
                    id=application_id,
                    student_id=student_id,
                    job_id=job_id,
                    cover_letter=cover_letter,
                    status=S.applied.value,
                    applied_at=now,
                    updated_at=now,
                )
            )
    except IntegrityError as e:
        if is_unique_violation(e):
            logger.info("Duplicate application: student=%s job=%s", student_id, job_id)
            raise AlreadyApplied() from e
        raise

    logger.info("Application %s created: student=%s job=%s", application_id, student_id, job_id)
    return get_application(application_id)


# ============================================================
# REVIEW
# ============================================================

def _check_reviewer(application: dict, actor: dict) -> None:
    if actor["role"] not in REVIEWER_ROLES:
        raise PermissionDenied("Only mentors, TnP officers and recruiters can review applications")
    if actor["role"] == UserRole.recruiter.value and application["posted_by"] != actor["user_id"]:
        raise PermissionDenied("Recruiters can only review applications to their own postings")


def update_status(
    application_id: str,
    new_status: str,
    actor: dict,
    feedback: Optional[str] = None
) -> dict:
    """
    Move an application along the lifecycle.

    Args:
        application_id: Application to change
        new_status: Target status
        actor: {"user_id", "role"} of the reviewer
        feedback: Optional note, stored per reviewer kind
    """
    application = get_application(application_id)
    _check_reviewer(application, actor)

    current = application["status"]
    if not can_transition(current, new_status):
        raise InvalidTransition(f"Cannot move application from {current} to {ApplicationStatus(new_status).value}")

    values = {"status": ApplicationStatus(new_status).value, "updated_at": utcnow()}
    if feedback is not None:
        column = "mentor_feedback" if actor["role"] == UserRole.mentor.value else "recruiter_feedback"
        values[column] = feedback

    with get_db_session() as db:
        result = db.execute(
            update(applications)
            .where(applications.c.id == application_id, applications.c.status == current)
            .values(**values)
        )
        if result.rowcount == 0:
            # someone else moved it between our read and write
            raise InvalidTransition("Application status changed, reload and try again")

    logger.info(
        "Application %s: %s -> %s by %s %s",
        application_id, current, values["status"], actor["role"], actor["user_id"]
    )
    return get_application(application_id)


def review_queue(actor: dict, limit: int = 50) -> List[dict]:
    """Open applications a reviewer can act on, oldest first."""
    if actor["role"] not in REVIEWER_ROLES:
        raise PermissionDenied("Only reviewers have a review queue")

    query = (
        _application_query(with_student=True)
        .where(applications.c.status.in_([s.value for s in OPEN_STATES]))
        .order_by(applications.c.applied_at.asc())
        .limit(limit)
    )
    if actor["role"] == UserRole.recruiter.value:
        query = query.where(job_opportunities.c.posted_by == actor["user_id"])

    with get_db_session() as db:
        return rows_to_dicts(db.execute(query))
