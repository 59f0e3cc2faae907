"""
Application Routes

GET /applications/review-queue - Open applications the caller can review
PATCH /applications/{application_id}/status - Move an application along its lifecycle
"""

from typing import List

from fastapi import APIRouter, Depends, Query

from placement_hub.core.auth import SessionContext, get_current_user
from placement_hub.schemas.schemas import ApplicationResponse, ApplicationStatusUpdate, ReviewQueueItem
from placement_hub.services import application_service

router = APIRouter(prefix="/applications", tags=["Applications"])


@router.get("/review-queue", response_model=List[ReviewQueueItem])
def review_queue(
    limit: int = Query(50, ge=1, le=200),
    session: SessionContext = Depends(get_current_user)
):
    """Oldest first. Recruiters only see applications to their own postings."""
    return application_service.review_queue(session.actor, limit=limit)


@router.patch("/{application_id}/status", response_model=ApplicationResponse)
def update_status(
    application_id: str,
    data: ApplicationStatusUpdate,
    session: SessionContext = Depends(get_current_user)
):
    return application_service.update_status(
        application_id, data.status, session.actor, feedback=data.feedback
    )
