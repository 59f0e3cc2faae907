"""
Job Service - reads and writes for job_opportunities.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from placement_hub.core.errors import DataFetchError, NotFoundError, PermissionDenied, ValidationError
from placement_hub.db.postgres import get_db_session, to_db_values, utcnow
from placement_hub.db.tables import job_opportunities, new_id
from placement_hub.schemas.schemas import JobOpportunity

logger = logging.getLogger(__name__)


def _to_job(row) -> JobOpportunity:
    return JobOpportunity.model_validate(dict(row))


def list_active_jobs() -> List[JobOpportunity]:
    """Active postings, newest first."""
    query = (
        select(job_opportunities)
        .where(job_opportunities.c.status == "active")
        .order_by(job_opportunities.c.created_at.desc())
    )
    try:
        with get_db_session() as db:
            rows = db.execute(query).mappings().all()
    except SQLAlchemyError as e:
        logger.exception("Failed to load active jobs")
        raise DataFetchError("Failed to load opportunities") from e
    return [_to_job(r) for r in rows]


def list_jobs_posted_by(user_id: str) -> List[JobOpportunity]:
    query = (
        select(job_opportunities)
        .where(job_opportunities.c.posted_by == user_id)
        .order_by(job_opportunities.c.created_at.desc())
    )
    with get_db_session() as db:
        rows = db.execute(query).mappings().all()
    return [_to_job(r) for r in rows]


def get_job(job_id: str) -> Optional[JobOpportunity]:
    with get_db_session() as db:
        row = db.execute(
            select(job_opportunities).where(job_opportunities.c.id == job_id)
        ).mappings().first()
    return _to_job(row) if row else None


def require_job(job_id: str) -> JobOpportunity:
    job = get_job(job_id)
    if not job:
        raise NotFoundError("Job not found")
    return job


def create_job(posted_by: str, data: Dict[str, Any]) -> JobOpportunity:
    now = utcnow()
    row = {"id": new_id(), "posted_by": posted_by, "created_at": now, "updated_at": now, **to_db_values(data)}
    with get_db_session() as db:
        db.execute(insert(job_opportunities).values(**row))
    logger.info("Job %s posted by %s", row["id"], posted_by)
    return require_job(row["id"])


def update_job(job_id: str, user_id: str, changes: Dict[str, Any]) -> JobOpportunity:
    """Only the user who posted a job may change it."""
    changes = to_db_values(changes)
    job = require_job(job_id)
    if job.posted_by != user_id:
        raise PermissionDenied("Only the poster can update this job")

    stipend_min = changes.get("stipend_min", job.stipend_min)
    stipend_max = changes.get("stipend_max", job.stipend_max)
    if stipend_min is not None and stipend_max is not None and stipend_min > stipend_max:
        raise ValidationError("stipend_min cannot exceed stipend_max")

    if changes:
        with get_db_session() as db:
            db.execute(
                update(job_opportunities)
                .where(job_opportunities.c.id == job_id)
                .values(**changes, updated_at=utcnow())
            )
    return require_job(job_id)


def close_job(job_id: str, user_id: str) -> JobOpportunity:
    """Stop accepting applications; existing applications are kept."""
    job = update_job(job_id, user_id, {"status": "closed"})
    logger.info("Job %s closed by %s", job_id, user_id)
    return job
