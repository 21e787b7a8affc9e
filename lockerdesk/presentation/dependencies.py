from __future__ import annotations

from functools import lru_cache
from typing import Iterator

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from lockerdesk.core.entities.identity import Identity, IdentityKind
from lockerdesk.core.errors import UnauthenticatedError
from lockerdesk.infrastructure.config import settings
from lockerdesk.infrastructure.database import SessionLocal
from lockerdesk.infrastructure.identity import JwtIdentityResolver
from lockerdesk.infrastructure.notifications import NotificationHub
from lockerdesk.infrastructure.rate_limiter import MovingWindowAttemptLimiter

bearer_scheme = HTTPBearer(auto_error=False)


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@lru_cache
def get_notification_hub() -> NotificationHub:
    return NotificationHub()


@lru_cache
def get_identity_resolver() -> JwtIdentityResolver:
    return JwtIdentityResolver(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl_minutes=settings.token_ttl_minutes,
    )


@lru_cache
def get_release_limiter() -> MovingWindowAttemptLimiter:
    return MovingWindowAttemptLimiter(settings.release_attempt_limit, namespace="release")


@lru_cache
def get_login_limiter() -> MovingWindowAttemptLimiter:
    return MovingWindowAttemptLimiter(settings.login_attempt_limit, namespace="login")


def get_client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def get_identity(
        credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
        resolver: JwtIdentityResolver = Depends(get_identity_resolver),
) -> Identity:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Access denied. No token provided.")
    try:
        return resolver.resolve(credentials.credentials)
    except UnauthenticatedError as e:
        raise HTTPException(status_code=401, detail=e.message)


def require_student(identity: Identity = Depends(get_identity)) -> Identity:
    if identity.kind is not IdentityKind.STUDENT:
        raise HTTPException(status_code=403, detail="Access denied. Students only.")
    return identity


def require_operator(identity: Identity = Depends(get_identity)) -> Identity:
    if not identity.is_operator:
        raise HTTPException(status_code=403, detail="Access denied. Library access only.")
    return identity
