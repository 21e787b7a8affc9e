from __future__ import annotations

from typing import ContextManager, Protocol

from lockerdesk.core.entities.identity import Identity
from lockerdesk.core.entities.notification import Notification


class UnitOfWork(Protocol):
    """
    Serializes a state transition and commits it as one unit. Any exception
    raised inside the block rolls everything back.
    """

    def transaction(self) -> ContextManager[None]:
        raise NotImplementedError


class NotificationPublisher(Protocol):
    def publish(self, notification: Notification) -> None:
        raise NotImplementedError


class AttemptLimiter(Protocol):
    def hit(self, key: str) -> bool:
        """Record an attempt; False once the key is over its limit."""
        raise NotImplementedError

    def is_blocked(self, key: str) -> bool:
        raise NotImplementedError

    def reset(self, key: str) -> None:
        raise NotImplementedError


class IdentityResolver(Protocol):
    def issue(self, identity: Identity) -> str:
        raise NotImplementedError

    def resolve(self, token: str) -> Identity:
        """Return the identity behind token or raise UnauthenticatedError."""
        raise NotImplementedError
