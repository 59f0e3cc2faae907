"""
Schemas module - Request/Response schemas for API endpoints and the
structured payloads expected from the AI gateway.
"""

from placement_hub.schemas.schemas import (
    ApplicationStatus,
    JobOpportunity,
    RecommendationSet,
    UserRole,
)

__all__ = ["ApplicationStatus", "JobOpportunity", "RecommendationSet", "UserRole"]
