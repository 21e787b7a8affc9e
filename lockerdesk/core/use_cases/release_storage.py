from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass

from lockerdesk.core.entities.notification import Notification, NotificationType
from lockerdesk.core.errors import ConflictError, InvalidCredentialError, NotFoundError, RateLimitedError
from lockerdesk.core.ports import AttemptLimiter, NotificationPublisher, UnitOfWork
from lockerdesk.core.repositories.storage_unit_repository import StorageUnitRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReleaseDTO:
    unit_id: int
    occupant: str
    occupant_label: str | None


class ReleaseStorageUseCase:
    """
    Frees an occupied unit when the presented access code matches.

    Release needs no identity: the physical access code is the credential.
    Failed attempts are audited and counted per client; a client over its
    limit is refused before any code comparison happens. The storage request
    that led to the assignment is left untouched.
    """

    def __init__(
            self,
            *,
            unit_repo: StorageUnitRepository,
            unit_of_work: UnitOfWork,
            publisher: NotificationPublisher,
            attempt_limiter: AttemptLimiter,
    ) -> None:
        self._unit_repo = unit_repo
        self._uow = unit_of_work
        self._publisher = publisher
        self._attempt_limiter = attempt_limiter

    def execute(self, *, unit_id: int, access_code: str, client_key: str) -> ReleaseDTO:
        if self._attempt_limiter.is_blocked(client_key):
            logger.warning(
                "Release refused for %s: too many invalid attempts",
                client_key,
                extra={"unit_id": unit_id, "client": client_key},
            )
            raise RateLimitedError("Too many invalid access code attempts. Please try again later.")

        with self._uow.transaction():
            unit = self._unit_repo.get(unit_id, for_update=True)
            if unit is None:
                raise NotFoundError("Storage box not found")
            if not unit.occupied:
                raise ConflictError("Storage box is not currently occupied")

            if not _codes_match(unit.access_code, access_code):
                self._attempt_limiter.hit(client_key)
                logger.warning(
                    "Invalid access code attempt for box %s",
                    unit_id,
                    extra={"unit_id": unit_id, "client": client_key, "audit": "release_denied"},
                )
                raise InvalidCredentialError("Invalid access code")

            occupant = unit.occupant
            occupant_label = unit.occupant_label
            unit.vacate()
            self._unit_repo.vacate(unit, access_code=access_code)

        logger.info(
            "Storage released: box %s from %s",
            unit_id,
            occupant_label,
            extra={"unit_id": unit_id},
        )

        self._publisher.publish(
            Notification(
                type=NotificationType.STORAGE_RELEASED,
                payload={"occupant": occupant, "unit_id": unit_id},
            )
        )
        self._publisher.publish(Notification(type=NotificationType.STORAGE_UPDATED, payload=unit.to_snapshot()))

        return ReleaseDTO(unit_id=unit_id, occupant=occupant, occupant_label=occupant_label)


def _codes_match(expected: str | None, presented: str) -> bool:
    if expected is None:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), presented.encode("utf-8"))
