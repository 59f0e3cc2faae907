"""
Dashboard Service - one summary builder per role.

The caller's role picks a builder from DASHBOARD_BUILDERS; the builders
share nothing but the (user_id, profile) arguments.
"""

from collections import Counter
from typing import Any, Callable, Dict

from sqlalchemy import func, select

from placement_hub.db.postgres import get_db_session
from placement_hub.db.tables import applications, job_opportunities
from placement_hub.schemas.schemas import UserRole
from placement_hub.services import application_service, job_service, profile_service


def _status_counts(rows) -> Dict[str, int]:
    return dict(Counter(row["status"] for row in rows))


def student_dashboard(profile: dict) -> Dict[str, Any]:
    student_id = profile["user_id"]
    apps = application_service.list_applications(student_id)
    return {
        "profile_completion": profile_service.get_completion(student_id),
        "total_applications": len(apps),
        "applications_by_status": _status_counts(apps),
        "recent_applications": [
            {"job_id": a["job_id"], "job_title": a["job_title"], "company_name": a["company_name"], "status": a["status"]}
            for a in apps[:5]
        ],
        "active_opportunities": len(job_service.list_active_jobs()),
    }


def mentor_dashboard(profile: dict) -> Dict[str, Any]:
    actor = {"user_id": profile["user_id"], "role": UserRole.mentor.value}
    queue = application_service.review_queue(actor)
    return {
        "pending_reviews": len(queue),
        "pending_by_status": _status_counts(queue),
        "oldest_pending": [
            {"application_id": a["id"], "student_name": a["student_name"], "job_title": a["job_title"], "status": a["status"]}
            for a in queue[:10]
        ],
    }


def tnp_dashboard(profile: dict) -> Dict[str, Any]:
    with get_db_session() as db:
        jobs_by_status = dict(
            db.execute(
                select(job_opportunities.c.status, func.count()).group_by(job_opportunities.c.status)
            ).all()
        )
        apps_by_status = dict(
            db.execute(
                select(applications.c.status, func.count()).group_by(applications.c.status)
            ).all()
        )
    return {
        "jobs_by_status": jobs_by_status,
        "active_jobs": jobs_by_status.get("active", 0),
        "total_applications": sum(apps_by_status.values()),
        "applications_by_status": apps_by_status,
        "students_selected": apps_by_status.get("selected", 0),
    }


def recruiter_dashboard(profile: dict) -> Dict[str, Any]:
    jobs = job_service.list_jobs_posted_by(profile["user_id"])
    with get_db_session() as db:
        counts = dict(
            db.execute(
                select(applications.c.job_id, func.count())
                .join(job_opportunities, applications.c.job_id == job_opportunities.c.id)
                .where(job_opportunities.c.posted_by == profile["user_id"])
                .group_by(applications.c.job_id)
            ).all()
        )
    return {
        "total_postings": len(jobs),
        "active_postings": sum(1 for job in jobs if job.status == "active"),
        "total_applicants": sum(counts.values()),
        "postings": [
            {"job_id": job.id, "title": job.title, "status": job.status, "applicants": counts.get(job.id, 0)}
            for job in jobs
        ],
    }


DASHBOARD_BUILDERS: Dict[str, Callable[[dict], Dict[str, Any]]] = {
    UserRole.student.value: student_dashboard,
    UserRole.mentor.value: mentor_dashboard,
    UserRole.tnp.value: tnp_dashboard,
    UserRole.recruiter.value: recruiter_dashboard,
}


def build_dashboard(profile: dict) -> Dict[str, Any]:
    role = profile["role"]
    return {"role": role, "summary": DASHBOARD_BUILDERS[role](profile)}
