"""
AI Routes

GET /ai/recommendations - Recommended active job IDs with reasoning
GET /ai/job-matching - Per-job match analysis and career suggestions
POST /ai/career-tools - resume_enhance / skill_gap_analysis / mock_interview / career_roadmap
POST /ai/resume - Resume analyze / enhance from profile and optional resume text
POST /ai/resume/upload - Same, with the resume text taken from a PDF/DOCX/TXT upload

A gateway failure is never an HTTP error here: the response carries
source="fallback", the error reason and the fallback payload.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from placement_hub.core.auth import SessionContext, get_current_student
from placement_hub.db.postgres import utcnow
from placement_hub.schemas.schemas import (
    AIToolResponse,
    CareerToolRequest,
    JobOpportunity,
    RecommendationResponse,
    ResumeAction,
    ResumeRequest,
)
from placement_hub.services.career_tools_service import CareerToolsService, get_career_tools_service
from placement_hub.services.job_service import require_job
from placement_hub.services.recommendation_service import RecommendationService, get_recommendation_service
from placement_hub.services.structured_completion import CompletionResult
from placement_hub.utils.file_upload import extract_resume_text

router = APIRouter(prefix="/ai", tags=["AI"])


def _target_job(job_id: Optional[str]) -> Optional[JobOpportunity]:
    return require_job(job_id) if job_id else None


def _tool_response(result: CompletionResult, action: Optional[str] = None) -> AIToolResponse:
    return AIToolResponse(
        success=result.from_ai,
        source=result.source,
        action=action,
        error=result.error,
        message=result.message,
        result=result.data,
        generated_at=utcnow(),
    )


@router.get("/recommendations", response_model=RecommendationResponse)
def get_recommendations(
    session: SessionContext = Depends(get_current_student),
    service: RecommendationService = Depends(get_recommendation_service)
):
    return service.recommend(session.profile)


@router.get("/job-matching", response_model=AIToolResponse)
def job_matching(
    session: SessionContext = Depends(get_current_student),
    service: RecommendationService = Depends(get_recommendation_service)
):
    return _tool_response(service.match_jobs(session.profile), action="job_matching")


@router.post("/career-tools", response_model=AIToolResponse)
def career_tools(
    request: CareerToolRequest,
    session: SessionContext = Depends(get_current_student),
    service: CareerToolsService = Depends(get_career_tools_service)
):
    result = service.run_tool(
        session.profile,
        request.action,
        resume_text=request.resume_text,
        target_job=_target_job(request.target_job_id),
    )
    return _tool_response(result, action=request.action.value)


@router.post("/resume", response_model=AIToolResponse)
def resume(
    request: ResumeRequest,
    session: SessionContext = Depends(get_current_student),
    service: CareerToolsService = Depends(get_career_tools_service)
):
    result = service.resume(
        session.profile,
        request.action,
        resume_text=request.resume_text,
        target_job=_target_job(request.target_job_id),
    )
    return _tool_response(result, action=request.action.value)


@router.post("/resume/upload", response_model=AIToolResponse)
async def resume_upload(
    file: UploadFile = File(...),
    action: ResumeAction = Form(ResumeAction.analyze),
    target_job_id: Optional[str] = Form(None),
    session: SessionContext = Depends(get_current_student),
    service: CareerToolsService = Depends(get_career_tools_service)
):
    """
    Upload a resume (PDF, DOCX or TXT, max 5MB) and run analyze or enhance on it.
    """
    resume_text = await extract_resume_text(file)
    result = service.resume(
        session.profile,
        action,
        resume_text=resume_text,
        target_job=_target_job(target_job_id),
    )
    return _tool_response(result, action=action.value)
