"""
Domain errors.

Every error carries an HTTP status and a stable `kind` string so the
exception handler in main.py can render it without knowing the subclass.
None of these are fatal: the worst case is a degraded page.
"""

from typing import Optional


class PlacementError(Exception):
    status_code = 400
    kind = "placement_error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or (self.__doc__ or "").strip() or self.kind
        super().__init__(self.message)


class ValidationError(PlacementError):
    """Invalid input."""
    status_code = 422
    kind = "validation_error"


class NotFoundError(PlacementError):
    """Resource not found."""
    status_code = 404
    kind = "not_found"


class PermissionDenied(PlacementError):
    """You are not allowed to do that."""
    status_code = 403
    kind = "permission_denied"


class AlreadyApplied(PlacementError):
    """You have already applied for this position."""
    status_code = 409
    kind = "already_applied"


class InvalidTransition(PlacementError):
    """Application status change not allowed."""
    status_code = 409
    kind = "invalid_transition"


class DataFetchError(PlacementError):
    """Failed to load data."""
    status_code = 503
    kind = "data_fetch_error"


class AIGatewayUnavailable(PlacementError):
    """AI service temporarily unavailable."""
    status_code = 503
    kind = "ai_gateway_unavailable"

    # reason values
    RATE_LIMITED = "rate_limited"
    PAYMENT_REQUIRED = "payment_required"
    NETWORK_ERROR = "network_error"
    UPSTREAM_ERROR = "upstream_error"
    MALFORMED_RESPONSE = "malformed_response"
    NOT_CONFIGURED = "not_configured"

    MESSAGES = {
        RATE_LIMITED: "Rate limit exceeded. Please try again later.",
        PAYMENT_REQUIRED: "AI service requires payment. Please add credits to your workspace.",
        NETWORK_ERROR: "Could not reach the AI service.",
        UPSTREAM_ERROR: "AI service returned an error.",
        MALFORMED_RESPONSE: "AI service returned an unreadable response.",
        NOT_CONFIGURED: "AI gateway API key not configured.",
    }

    def __init__(self, reason: str, message: Optional[str] = None):
        self.reason = reason
        super().__init__(message or self.MESSAGES.get(reason, "AI service temporarily unavailable."))
