"""
Dashboard Routes

GET /dashboard - Summary for the caller's role (student, mentor, tnp, recruiter)
"""

from fastapi import APIRouter, Depends

from placement_hub.core.auth import SessionContext, get_current_user
from placement_hub.schemas.schemas import DashboardResponse
from placement_hub.services.dashboard_service import build_dashboard

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardResponse)
def get_dashboard(session: SessionContext = Depends(get_current_user)):
    return build_dashboard(session.profile)
