"""
Recommendation Service - AI job recommendations and job matching.

PURPOSE:
1. recommend(): an ordered set of active job IDs for one student, used as a
   sort key and score boost in the opportunity feed
2. match_jobs(): a richer per-job analysis with match percentages and career
   suggestions

Both go through StructuredCompletion, so a dead gateway or an unreadable
answer degrades to a local heuristic instead of an error.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from placement_hub.core.config import get_settings
from placement_hub.core.errors import AIGatewayUnavailable
from placement_hub.schemas.schemas import JobMatchingResult, JobOpportunity, RecommendationSet
from placement_hub.services.ai_gateway_client import AIGatewayClient
from placement_hub.services.job_service import list_active_jobs
from placement_hub.services.matching_service import heuristic_recommendations, sanitize_recommendations
from placement_hub.services.profile_service import build_student_snapshot
from placement_hub.services.structured_completion import CompletionResult, StructuredCompletion

settings = get_settings()
logger = logging.getLogger(__name__)


RECOMMENDATION_SYSTEM_PROMPT = """You are an AI career advisor for a student placement platform.
You receive a student profile (GPA, skills, projects, department, year of study)
and the list of open job opportunities.

Recommend the opportunities that suit the student best:
1. Match student skills against required and preferred skills
2. Respect GPA requirements
3. Be realistic about the student's year of study and experience
4. Prefer opportunities with higher conversion chances

Return ONLY valid JSON:
{
  "recommended_job_ids": ["job_id_1", "job_id_2"],
  "reasoning": "Brief explanation of the recommendation logic"
}
Order the IDs from most to least suitable. Use only IDs from the list given."""

JOB_MATCHING_SYSTEM_PROMPT = """You are an intelligent job matching AI. Analyze the student profile
and the available jobs and return ONLY valid JSON:
{
  "recommended_jobs": [
    {"job_id": "string", "match_percentage": 0-100, "explanation": "string",
     "skills_match": ["skill"], "improvement_areas": ["string"]}
  ],
  "career_suggestions": ["string"],
  "skill_development_tips": ["string"]
}
Recommend at most 5 jobs. If no jobs are available, leave recommended_jobs empty
and suggest job types and skills to develop instead."""

GENERIC_CAREER_SUGGESTIONS = [
    "Build a strong portfolio with 2-3 substantial projects",
    "Develop both technical and soft skills",
    "Create a compelling LinkedIn profile",
    "Practice coding problems and technical interviews",
]


def job_prompt_view(job: JobOpportunity) -> Dict[str, Any]:
    """The subset of a posting worth spending prompt tokens on."""
    return {
        "id": job.id,
        "title": job.title,
        "company_name": job.company_name,
        "job_type": job.job_type,
        "location_type": job.location_type,
        "required_skills": job.required_skills,
        "preferred_skills": job.preferred_skills,
        "min_gpa": job.min_gpa,
        "min_experience_months": job.min_experience_months,
        "conversion_chance": job.conversion_chance,
        "duration_months": job.duration_months,
    }


def fallback_career_suggestions(department: Optional[str], skill_names: List[str]) -> List[str]:
    """Static advice tailored a little by department and skills."""
    department = (department or "").lower()
    skills_text = ", ".join(skill_names)
    suggestions = list(GENERIC_CAREER_SUGGESTIONS)

    if "computer" in department or "software" in department:
        suggestions.append("Focus on full-stack development or specialized areas like AI/ML")
        suggestions.append("Contribute to open source projects")

    if "React" in skills_text or "JavaScript" in skills_text:
        suggestions.append("Consider frontend developer roles")
        suggestions.append("Learn modern frameworks and tools")

    if "Python" in skills_text or "Java" in skills_text:
        suggestions.append("Explore backend development opportunities")
        suggestions.append("Learn about databases and system design")

    return suggestions


class RecommendationService:
    """
    AI-backed recommendations for one student.

    Usage:
        service = RecommendationService()
        recs = service.recommend(profile)
        recs["recommended_job_ids"]
    """

    def __init__(self, client: Optional[AIGatewayClient] = None):
        self.client = client

    def _prompt(self, snapshot: Dict[str, Any], jobs: List[JobOpportunity], heading: str) -> str:
        return (
            f"Student Profile:\n{json.dumps(snapshot, indent=2, default=str)}\n\n"
            f"Available Job Opportunities:\n"
            f"{json.dumps([job_prompt_view(j) for j in jobs], indent=2, default=str)}\n\n"
            f"{heading}"
        )

    def recommend(
        self,
        profile: dict,
        jobs: Optional[List[JobOpportunity]] = None
    ) -> Dict[str, Any]:
        """
        Get recommended job IDs for a student.

        Args:
            profile: Student profile row
            jobs: Active jobs, loaded when not given

        Returns:
            {"recommended_job_ids": [...], "reasoning": str, "source": "ai"|"fallback", "error": str|None}
        """
        jobs = list_active_jobs() if jobs is None else jobs
        snapshot = build_student_snapshot(profile)
        skill_names = [s["name"] for s in snapshot["skills"]]

        def fallback() -> Dict[str, Any]:
            return {
                "recommended_job_ids": heuristic_recommendations(
                    jobs, profile.get("gpa"), skill_names, limit=settings.recommendation_fallback_limit
                ),
                "reasoning": "Fallback recommendations based on GPA and skill matching",
            }

        if not jobs:
            return {"recommended_job_ids": [], "reasoning": "No active opportunities", "source": "ai", "error": None}

        completion = StructuredCompletion(RecommendationSet, fallback, client=self.client)
        result = completion.run(
            RECOMMENDATION_SYSTEM_PROMPT,
            self._prompt(snapshot, jobs, "Recommend the best matching opportunities for this student.")
        )

        ids = sanitize_recommendations(result.data["recommended_job_ids"], jobs)
        dropped = len(result.data["recommended_job_ids"]) - len(ids)
        if dropped:
            logger.warning("Dropped %d recommended IDs that are not active jobs", dropped)

        return {
            "recommended_job_ids": ids,
            "reasoning": result.data.get("reasoning") or "",
            "source": result.source,
            "error": result.error,
        }

    def match_jobs(self, profile: dict) -> CompletionResult:
        """
        Detailed job matching: per-job match percentage plus career advice.
        """
        jobs = list_active_jobs()
        snapshot = build_student_snapshot(profile)
        skill_names = [s["name"] for s in snapshot["skills"]]

        def fallback() -> Dict[str, Any]:
            return {
                "recommended_jobs": [],
                "career_suggestions": fallback_career_suggestions(profile.get("department"), skill_names),
                "skill_development_tips": [],
            }

        completion = StructuredCompletion(
            JobMatchingResult, fallback, client=self.client, temperature=0.3, max_tokens=1500
        )
        result = completion.run(
            JOB_MATCHING_SYSTEM_PROMPT,
            self._prompt(snapshot, jobs, "Provide the top job matches for this student.")
        )

        if result.from_ai:
            known = {job.id for job in jobs}
            result.data["recommended_jobs"] = [
                match for match in result.data["recommended_jobs"] if match["job_id"] in known
            ]
        elif result.error == AIGatewayUnavailable.MALFORMED_RESPONSE and result.raw_content:
            result.data["analysis"] = result.raw_content

        result.data["total_jobs_analyzed"] = len(jobs)
        return result


def get_recommendation_service() -> RecommendationService:
    """Get recommendation service instance."""
    return RecommendationService()
