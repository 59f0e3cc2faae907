"""
Opportunity Feed - the student's "browse opportunities" page in one call.

PIPELINE:
1. Load active jobs and the student's applications concurrently; the AI
   recommendations reuse the loaded jobs, so active jobs are read once
2. Filter by search text / job type / location type
3. Score every remaining job
4. Recommended jobs first, newest first within each group

Each load fails on its own: a broken section becomes an empty list plus a
notice, and a failed recommendation call just means no recommendations.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError

from placement_hub.core.errors import DataFetchError, PlacementError
from placement_hub.schemas.schemas import JobOpportunity
from placement_hub.services.application_service import list_applications, status_by_job
from placement_hub.services.job_service import list_active_jobs
from placement_hub.services.matching_service import (
    filter_jobs,
    merge_and_sort,
    sanitize_recommendations,
    score_job,
)
from placement_hub.services.recommendation_service import RecommendationService

logger = logging.getLogger(__name__)

NO_RECOMMENDATIONS = {"recommended_job_ids": [], "reasoning": None, "source": None, "error": None}


class OpportunityFeed:

    def __init__(self, recommendation_service: Optional[RecommendationService] = None):
        self.recommendation_service = recommendation_service or RecommendationService()

    def _load_jobs(self) -> Tuple[List[JobOpportunity], Optional[str]]:
        try:
            return list_active_jobs(), None
        except DataFetchError as e:
            return [], e.message

    def _load_applications(self, student_id: str) -> Tuple[List[dict], Optional[str]]:
        try:
            return list_applications(student_id), None
        except DataFetchError as e:
            return [], e.message

    def _load_recommendations(self, profile: dict, jobs: List[JobOpportunity]) -> Dict[str, Any]:
        try:
            return self.recommendation_service.recommend(profile, jobs=jobs)
        except (PlacementError, SQLAlchemyError) as e:
            logger.warning("Recommendations unavailable for %s: %s", profile["user_id"], e)
            return dict(NO_RECOMMENDATIONS)

    async def _load_jobs_and_recommendations(self, profile: dict):
        jobs, jobs_error = await run_in_threadpool(self._load_jobs)
        recs = await run_in_threadpool(self._load_recommendations, profile, jobs)
        return jobs, jobs_error, recs

    async def build(
        self,
        profile: dict,
        text: Optional[str] = None,
        job_type: Optional[str] = "all",
        location_type: Optional[str] = "all",
        now: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """
        Assemble the filtered, scored and ordered opportunity list.

        Returns a dict matching BrowseResponse.
        """
        (jobs, jobs_error, recs), (apps, apps_error) = await asyncio.gather(
            self._load_jobs_and_recommendations(profile),
            run_in_threadpool(self._load_applications, profile["user_id"]),
        )

        notices = [message for message in (jobs_error, apps_error) if message]
        recommended = set(sanitize_recommendations(recs["recommended_job_ids"], jobs))
        statuses = status_by_job(apps)
        student_gpa = profile.get("gpa")

        visible = filter_jobs(jobs, text=text, job_type=job_type, location_type=location_type)
        opportunities = [
            {
                "job": job,
                "match_score": score_job(job, student_gpa, recommended, now=now),
                "is_recommended": job.id in recommended,
                "application_status": statuses.get(job.id),
            }
            for job in merge_and_sort(visible, recommended)
        ]

        return {
            "opportunities": opportunities,
            "total": len(opportunities),
            "recommended_count": len(recommended),
            "recommendation_reasoning": recs.get("reasoning"),
            "recommendation_source": recs.get("source"),
            "notices": notices,
        }
