import asyncio

import pytest

from conftest import insert_job
from placement_hub.core.errors import DataFetchError
from placement_hub.services import application_service, opportunity_feed, profile_service, recommendation_service
from placement_hub.services.job_service import list_active_jobs
from placement_hub.services.opportunity_feed import OpportunityFeed
from placement_hub.services.recommendation_service import RecommendationService


def build(profile, service=None, **query):
    return asyncio.run(OpportunityFeed(service).build(profile, **query))


@pytest.fixture
def profile(student):
    return profile_service.update_profile(student[1], {"gpa": 3.6})


@pytest.fixture
def poster(recruiter):
    return recruiter[1]


def test_feed_orders_recommended_first_and_annotates_status(ai, profile, poster):
    newest = insert_job(poster, title="Newest", days_old=0, job_type="full-time")
    middle = insert_job(poster, title="Middle", days_old=10, job_type="full-time")
    oldest = insert_job(poster, title="Oldest", days_old=40, job_type="full-time")
    ai.responses.append({"recommended_job_ids": [oldest], "reasoning": "closest fit"})
    application_service.apply(profile["user_id"], middle)

    feed = build(profile)

    titles = [item["job"].title for item in feed["opportunities"]]
    assert titles == ["Oldest", "Newest", "Middle"]
    by_id = {item["job"].id: item for item in feed["opportunities"]}
    assert by_id[oldest]["is_recommended"]
    assert by_id[oldest]["match_score"] == 70
    assert by_id[newest]["match_score"] == 45
    assert by_id[middle]["application_status"] == "applied"
    assert by_id[newest]["application_status"] is None
    assert feed["recommended_count"] == 1
    assert feed["recommendation_source"] == "ai"
    assert feed["notices"] == []


def test_feed_applies_search_and_type_filters(profile, poster):
    insert_job(poster, title="Frontend Intern", required_skills=["React"], location_type="remote")
    insert_job(poster, title="Data Engineer", job_type="full-time", location_type="on-site")

    feed = build(profile, text="react", job_type="internship", location_type="all")

    assert [item["job"].title for item in feed["opportunities"]] == ["Frontend Intern"]
    assert feed["total"] == 1


def test_application_load_failure_still_shows_jobs(monkeypatch, profile, poster):
    insert_job(poster, title="Still visible")

    def broken(student_id):
        raise DataFetchError("Failed to load applications")

    monkeypatch.setattr(opportunity_feed, "list_applications", broken)

    feed = build(profile)

    assert [item["job"].title for item in feed["opportunities"]] == ["Still visible"]
    assert feed["notices"] == ["Failed to load applications"]


def test_job_load_failure_gives_empty_feed_with_notice(monkeypatch, profile):
    def broken():
        raise DataFetchError("Failed to load opportunities")

    monkeypatch.setattr(opportunity_feed, "list_active_jobs", broken)

    feed = build(profile)

    assert feed["opportunities"] == []
    assert feed["notices"] == ["Failed to load opportunities"]


def test_recommendation_failure_means_no_recommendations(monkeypatch, profile, poster):
    insert_job(poster)
    service = RecommendationService()

    def broken(profile, jobs=None):
        raise DataFetchError("Failed to load skills")

    monkeypatch.setattr(service, "recommend", broken)

    feed = build(profile, service)

    assert feed["total"] == 1
    assert feed["recommended_count"] == 0
    assert not feed["opportunities"][0]["is_recommended"]
    assert feed["notices"] == []


def test_active_jobs_are_read_once_per_feed(monkeypatch, ai, profile, poster):
    job_id = insert_job(poster, title="Only role")
    ai.responses.append({"recommended_job_ids": [job_id], "reasoning": "fits"})
    calls = []

    def counting():
        calls.append(1)
        return list_active_jobs()

    monkeypatch.setattr(opportunity_feed, "list_active_jobs", counting)
    monkeypatch.setattr(recommendation_service, "list_active_jobs", counting)

    feed = build(profile)

    assert len(calls) == 1
    assert feed["opportunities"][0]["is_recommended"]
