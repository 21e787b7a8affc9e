from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError

from lockerdesk.core.entities.identity import Identity, IdentityKind
from lockerdesk.core.errors import UnauthenticatedError


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JwtIdentityResolver:
    """
    Identity boundary backed by signed JWTs.

    Tokens carry ``sub``, ``kind`` and ``email``. An ``exp`` claim is only
    added when a TTL is configured.
    """

    def __init__(
        self,
        *,
        secret: str,
        algorithm: str = "HS256",
        ttl_minutes: int | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl_minutes = ttl_minutes
        self._clock = clock

    def issue(self, identity: Identity) -> str:
        now = self._clock()
        claims: Dict[str, Any] = {
            "sub": identity.id,
            "kind": identity.kind.value,
            "email": identity.email,
            "iat": int(now.timestamp()),
        }
        if self._ttl_minutes is not None:
            claims["exp"] = int((now + timedelta(minutes=self._ttl_minutes)).timestamp())
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def resolve(self, token: str) -> Identity:
        try:
            claims = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except ExpiredSignatureError:
            raise UnauthenticatedError("Access denied. Token expired.")
        except JWTError:
            raise UnauthenticatedError("Access denied. Invalid token.")

        subject = claims.get("sub")
        try:
            kind = IdentityKind(claims.get("kind"))
        except ValueError:
            raise UnauthenticatedError("Access denied. Invalid token format.")
        if not isinstance(subject, str) or not subject:
            raise UnauthenticatedError("Access denied. Invalid token format.")

        return Identity(kind=kind, id=subject, email=str(claims.get("email") or ""))
