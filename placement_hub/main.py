"""
Campus Placement Hub - Main Application

FastAPI backend with:
- PostgreSQL for profiles, portfolios, jobs and applications
- AI gateway (OpenAI-compatible) for recommendations and career tools
- JWT authentication for students, mentors, TnP officers and recruiters

Run: uvicorn placement_hub.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from placement_hub.api import api_router
from placement_hub.core.config import get_settings
from placement_hub.core.errors import PlacementError
from placement_hub.db.postgres import init_db, test_db_connection
from placement_hub.schemas.schemas import ErrorResponse
from placement_hub.services.ai_gateway_client import get_ai_client

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Campus Placement Hub",
    description="""
    Placement platform for students, mentors, TnP officers and recruiters.

    ## Features
    - **Authentication**: JWT-based auth for all four roles
    - **Students**: Profile, skills, projects, certifications, applications
    - **Jobs**: Posting, browsing with match scores, applying
    - **Applications**: Review queue and status lifecycle
    - **AI**: Recommendations, job matching, career tools, resume enhancer
    - **Dashboards**: Per-role summaries
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(
    api_router,
    prefix="/api",
    responses={code: {"model": ErrorResponse} for code in (403, 404, 409, 503)}
)


@app.exception_handler(PlacementError)
async def placement_error_handler(request: Request, exc: PlacementError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "kind": exc.kind}
    )


@app.on_event("startup")
async def startup_event():
    """Create missing tables on startup."""
    try:
        init_db()
        logger.info("Database tables ready")
    except Exception:
        logger.exception("Database initialization failed")


@app.get("/health", tags=["Health"])
def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "database": "connected" if test_db_connection() else "disconnected",
        "ai_gateway": "configured" if get_ai_client().configured else "not configured",
    }
