from __future__ import annotations

import hmac
import logging

from lockerdesk.core.entities.identity import Identity, IdentityKind
from lockerdesk.core.errors import RateLimitedError, UnauthenticatedError
from lockerdesk.core.ports import AttemptLimiter, IdentityResolver

logger = logging.getLogger(__name__)

OPERATOR_ID = "library"


class AuthenticateOperatorUseCase:
    """
    Exchanges the shared library password for an operator token.
    Every attempt counts against the client's login limit.
    """

    def __init__(
            self,
            *,
            identity_resolver: IdentityResolver,
            attempt_limiter: AttemptLimiter,
            library_password: str,
            operator_email: str = "",
    ) -> None:
        self._identity_resolver = identity_resolver
        self._attempt_limiter = attempt_limiter
        self._library_password = library_password
        self._operator_email = operator_email

    def execute(self, *, password: str, client_key: str) -> str:
        if not self._attempt_limiter.hit(client_key):
            logger.warning("Operator login rate limited for %s", client_key, extra={"client": client_key})
            raise RateLimitedError("Too many authentication attempts. Please try again later.")

        if not hmac.compare_digest(password.encode("utf-8"), self._library_password.encode("utf-8")):
            logger.warning("Invalid library password attempt from %s", client_key, extra={"client": client_key})
            raise UnauthenticatedError("Invalid library password")

        logger.info("Library authentication successful", extra={"client": client_key})
        return self._identity_resolver.issue(
            Identity(kind=IdentityKind.OPERATOR, id=OPERATOR_ID, email=self._operator_email)
        )
