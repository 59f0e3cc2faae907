"""
Job Routes

POST /jobs - Create job posting (tnp / recruiter)
GET /jobs - List active jobs, newest first
GET /jobs/browse - Filtered, scored and ordered feed for the calling student
GET /jobs/{job_id} - Get job details
PUT /jobs/{job_id} - Update job (poster only)
DELETE /jobs/{job_id} - Close job (poster only)
POST /jobs/{job_id}/apply - Apply to job (student only)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from placement_hub.core.auth import (
    SessionContext,
    get_current_poster,
    get_current_student,
    get_current_user,
)
from placement_hub.core.errors import DataFetchError
from placement_hub.schemas.schemas import (
    ApplicationCreate,
    ApplyResponse,
    BrowseResponse,
    JobCreate,
    JobListResponse,
    JobOpportunity,
    JobUpdate,
)
from placement_hub.services import application_service, job_service
from placement_hub.services.matching_service import ALL
from placement_hub.services.opportunity_feed import OpportunityFeed
from placement_hub.services.recommendation_service import get_recommendation_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.post("", response_model=JobOpportunity, status_code=201)
def create_job(job: JobCreate, session: SessionContext = Depends(get_current_poster)):
    """Create a new job posting."""
    return job_service.create_job(session.user_id, job.model_dump())


@router.get("", response_model=JobListResponse)
def list_jobs(session: SessionContext = Depends(get_current_user)):
    jobs = job_service.list_active_jobs()
    return JobListResponse(jobs=jobs, total=len(jobs))


@router.get("/browse", response_model=BrowseResponse)
async def browse_jobs(
    q: Optional[str] = Query(None, description="Search title, company, description, skills"),
    job_type: str = Query(ALL, description="all, internship, full-time, part-time, contract"),
    location_type: str = Query(ALL, description="all, remote, on-site, hybrid"),
    session: SessionContext = Depends(get_current_student)
):
    """
    Browse opportunities.

    Recommended jobs come first; every job carries a match score and my
    application status for it, if any.
    """
    feed = OpportunityFeed(get_recommendation_service())
    return await feed.build(session.profile, text=q, job_type=job_type, location_type=location_type)


@router.get("/{job_id}", response_model=JobOpportunity)
def get_job(job_id: str, session: SessionContext = Depends(get_current_user)):
    return job_service.require_job(job_id)


@router.put("/{job_id}", response_model=JobOpportunity)
def update_job(job_id: str, data: JobUpdate, session: SessionContext = Depends(get_current_poster)):
    return job_service.update_job(job_id, session.user_id, data.model_dump(exclude_unset=True))


@router.delete("/{job_id}", response_model=JobOpportunity)
def close_job(job_id: str, session: SessionContext = Depends(get_current_poster)):
    return job_service.close_job(job_id, session.user_id)


@router.post("/{job_id}/apply", response_model=ApplyResponse, status_code=201)
def apply_to_job(
    job_id: str,
    data: Optional[ApplicationCreate] = None,
    session: SessionContext = Depends(get_current_student)
):
    """
    Apply to a job.

    A second application to the same job is rejected with 409 already_applied.
    The application is committed before the list is reloaded; a failed reload
    becomes a notice instead of an error.
    """
    application = application_service.apply(
        session.user_id, job_id, cover_letter=data.cover_letter if data else None
    )
    notices = []
    try:
        applications = application_service.list_applications(session.user_id)
    except DataFetchError as e:
        logger.warning("Application list reload failed for %s: %s", session.user_id, e.message)
        applications = [application]
        notices.append(e.message)

    return ApplyResponse(
        message="Application submitted successfully",
        application=application,
        applications=applications,
        notices=notices,
    )
