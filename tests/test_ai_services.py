import pytest

from conftest import insert_job
from placement_hub.schemas.schemas import CareerToolAction, ResumeAction
from placement_hub.services import profile_service
from placement_hub.services.career_tools_service import CAREER_TOOLS, CareerToolsService
from placement_hub.services.job_service import require_job
from placement_hub.services.recommendation_service import RecommendationService


@pytest.fixture
def profile(student):
    _, student_id = student
    profile_service.add_student_skill(student_id, "Python", "technical", "advanced")
    profile_service.add_student_skill(student_id, "React Native", "technical", "beginner")
    return profile_service.update_profile(student_id, {"gpa": 3.4, "department": "Computer Science"})


@pytest.fixture
def poster(recruiter):
    return recruiter[1]


# ============================================================
# RECOMMENDATIONS
# ============================================================

def test_recommend_keeps_only_active_job_ids(ai, profile, poster):
    first = insert_job(poster, title="Python Intern")
    second = insert_job(poster, title="React Intern")
    ai.responses.append({"recommended_job_ids": [second, "made-up-id", first], "reasoning": "skills fit"})

    recs = RecommendationService().recommend(profile)

    assert recs["recommended_job_ids"] == [second, first]
    assert recs["source"] == "ai"
    assert recs["reasoning"] == "skills fit"
    assert first in ai.calls[0]["user"]


def test_recommend_falls_back_to_gpa_and_skill_heuristic(ai, profile, poster):
    python_job = insert_job(poster, required_skills=["python"], days_old=1)
    react_job = insert_job(poster, required_skills=["React"], days_old=2)
    open_job = insert_job(poster, required_skills=[], days_old=3)
    insert_job(poster, required_skills=["Python"], min_gpa=3.8)
    insert_job(poster, required_skills=["Go"])

    recs = RecommendationService().recommend(profile)

    assert recs["source"] == "fallback"
    assert recs["error"] == "network_error"
    assert recs["recommended_job_ids"] == [python_job, react_job, open_job]


def test_recommend_without_jobs_skips_the_gateway(ai, profile):
    recs = RecommendationService().recommend(profile)
    assert recs["recommended_job_ids"] == []
    assert ai.calls == []


def test_match_jobs_drops_matches_for_unknown_jobs(ai, profile, poster):
    job = insert_job(poster)
    ai.responses.append({
        "recommended_jobs": [
            {"job_id": job, "match_percentage": 82, "explanation": "Python heavy"},
            {"job_id": "ghost", "match_percentage": 99},
        ],
        "career_suggestions": ["Ship a side project"],
    })

    result = RecommendationService().match_jobs(profile)

    assert result.source == "ai"
    assert [m["job_id"] for m in result.data["recommended_jobs"]] == [job]
    assert result.data["total_jobs_analyzed"] == 1


def test_match_jobs_malformed_reply_keeps_text_as_analysis(ai, profile, poster):
    insert_job(poster)
    ai.responses.append("You should apply to everything.")

    result = RecommendationService().match_jobs(profile)

    assert result.source == "fallback"
    assert result.error == "malformed_response"
    assert result.data["recommended_jobs"] == []
    assert result.data["analysis"] == "You should apply to everything."
    suggestions = result.data["career_suggestions"]
    assert "Contribute to open source projects" in suggestions
    assert "Explore backend development opportunities" in suggestions


# ============================================================
# CAREER TOOLS
# ============================================================

@pytest.mark.parametrize("action", list(CareerToolAction))
def test_every_career_tool_has_a_fallback(profile, action):
    result = CareerToolsService().run_tool(profile, action)
    assert result.source == "fallback"
    assert result.data == CAREER_TOOLS[action].fallback


def test_career_tool_prompt_includes_resume_and_target_job(ai, profile, poster):
    job = require_job(insert_job(poster, title="ML Intern", company_name="Deep Labs"))
    ai.responses.append({"technical_questions": ["What is overfitting?"]})

    result = CareerToolsService().run_tool(
        profile, "mock_interview", resume_text="Built a CNN classifier", target_job=job
    )

    assert result.source == "ai"
    assert result.data["technical_questions"] == ["What is overfitting?"]
    prompt = ai.calls[0]["user"]
    assert "Built a CNN classifier" in prompt
    assert "Deep Labs" in prompt
    assert "React Native" in prompt


def test_resume_prompt_carries_contact_details(ai, profile):
    ai.responses.append({"overall_score": 74, "strengths": ["Projects"]})

    result = CareerToolsService().resume(profile, ResumeAction.analyze)

    assert result.data["overall_score"] == 74
    assert "asha@campus.edu" in ai.calls[0]["user"]


def test_resume_score_out_of_range_uses_fallback(ai, profile):
    ai.responses.append({"overall_score": 140})

    result = CareerToolsService().resume(profile, "analyze")

    assert result.source == "fallback"
    assert result.data["overall_score"] == 70
