"""
Authentication Routes

POST /auth/register - Register new user (creates the profile too)
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError

from placement_hub.core.auth import (
    SessionContext,
    create_access_token,
    get_current_user,
    hash_password,
    verify_password,
)
from placement_hub.db.postgres import get_db_session, is_unique_violation, utcnow
from placement_hub.db.tables import new_id, profiles, users
from placement_hub.schemas.schemas import (
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=MessageResponse, status_code=201)
def register(request: RegisterRequest):
    """
    Register a new user account.

    The user row and the profile row are written in one transaction.
    """
    user_id = new_id()
    now = utcnow()
    email = request.email.lower()
    try:
        with get_db_session() as db:
            db.execute(
                insert(users).values(
                    id=user_id,
                    email=email,
                    password_hash=hash_password(request.password),
                    role=request.role.value,
                    is_active=True,
                    created_at=now,
                )
            )
            db.execute(
                insert(profiles).values(
                    user_id=user_id,
                    full_name=request.full_name.strip(),
                    email=email,
                    role=request.role.value,
                    created_at=now,
                    updated_at=now,
                )
            )
    except IntegrityError as e:
        if is_unique_violation(e):
            raise HTTPException(status_code=400, detail="Email already registered")
        raise

    logger.info("Registered %s as %s", user_id, request.role.value)
    return MessageResponse(message=f"Registered successfully as {request.role.value}. Please login.")


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    with get_db_session() as db:
        user = db.execute(
            select(users.c.id, users.c.password_hash, users.c.role, users.c.is_active)
            .where(users.c.email == request.email.lower())
        ).mappings().first()

    if not user or not verify_password(request.password, user["password_hash"]):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not user["is_active"]:
        raise HTTPException(status_code=403, detail="Account deactivated")

    token = create_access_token(data={"sub": user["id"], "role": user["role"]})
    return TokenResponse(access_token=token, user_id=user["id"], role=user["role"])


@router.get("/me", response_model=UserResponse)
def get_me(session: SessionContext = Depends(get_current_user)):
    """Get current authenticated user's info."""
    with get_db_session() as db:
        row = db.execute(
            select(users.c.is_active, users.c.created_at).where(users.c.id == session.user_id)
        ).mappings().first()

    return UserResponse(
        user_id=session.user_id,
        email=session.email,
        role=session.role,
        full_name=session.profile["full_name"],
        is_active=row["is_active"],
        created_at=row["created_at"],
    )
