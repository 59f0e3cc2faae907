"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- SessionContext: the caller's user row and profile, resolved once per request
- FastAPI dependencies for role-restricted routes
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select

from placement_hub.core.config import get_settings
from placement_hub.db.postgres import get_db_session
from placement_hub.db.tables import profiles, users
from placement_hub.schemas.schemas import UserRole

settings = get_settings()

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractor
bearer_scheme = HTTPBearer()


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


@dataclass
class SessionContext:
    user_id: str
    email: str
    role: str
    profile: dict = field(default_factory=dict)

    @property
    def actor(self) -> dict:
        return {"user_id": self.user_id, "role": self.role}

    @property
    def is_student(self) -> bool:
        return self.role == UserRole.student.value


def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> SessionContext:
    """
    FastAPI dependency - Get current authenticated user with their profile.

    Usage:
        @router.get("/protected")
        def route(session: SessionContext = Depends(get_current_user)):
            return session.profile
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(credentials.credentials)
    if not payload:
        raise credentials_exception

    user_id = payload.get("sub")
    if not user_id:
        raise credentials_exception

    with get_db_session() as db:
        user = db.execute(
            select(users.c.id, users.c.email, users.c.role, users.c.is_active).where(users.c.id == user_id)
        ).mappings().first()
        profile = db.execute(
            select(profiles).where(profiles.c.user_id == user_id)
        ).mappings().first()

    if not user:
        raise credentials_exception

    if not user["is_active"]:
        raise HTTPException(status_code=403, detail="Account deactivated")

    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found. Please complete your profile first.")

    return SessionContext(user_id=user["id"], email=user["email"], role=user["role"], profile=dict(profile))


def get_current_student(session: SessionContext = Depends(get_current_user)) -> SessionContext:
    """Dependency - Require student role."""
    if not session.is_student:
        raise HTTPException(status_code=403, detail="Students only")
    return session


def get_current_poster(session: SessionContext = Depends(get_current_user)) -> SessionContext:
    """Dependency - Require a role that may post jobs (tnp, recruiter)."""
    if session.role not in (UserRole.tnp.value, UserRole.recruiter.value):
        raise HTTPException(status_code=403, detail="Only TnP officers and recruiters can post jobs")
    return session
