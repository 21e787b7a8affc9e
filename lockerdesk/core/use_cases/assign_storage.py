from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from lockerdesk.core.access_codes import AccessCodeGenerator
from lockerdesk.core.entities.notification import Notification, NotificationType
from lockerdesk.core.errors import ConflictError, NotFoundError
from lockerdesk.core.ports import NotificationPublisher, UnitOfWork
from lockerdesk.core.repositories.storage_request_repository import StorageRequestRepository
from lockerdesk.core.repositories.storage_unit_repository import StorageUnitRepository
from lockerdesk.core.use_cases._clock import utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AssignmentDTO:
    request_id: str
    unit_id: int
    requestor: str
    requestor_label: str
    access_code: str
    occupied_at: datetime


class AssignStorageUseCase:
    """
    Matches a pending request to a free storage unit.

    The precondition checks, the access code draw and both writes run inside a
    single unit of work, so two assignments racing for the same unit or the
    same request cannot both commit. Notifications go out only after commit.
    No expiry is attached to the assignment; the unit stays occupied until it
    is released with its access code.
    """

    def __init__(
            self,
            *,
            unit_repo: StorageUnitRepository,
            request_repo: StorageRequestRepository,
            unit_of_work: UnitOfWork,
            publisher: NotificationPublisher,
            code_generator: AccessCodeGenerator,
            clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._unit_repo = unit_repo
        self._request_repo = request_repo
        self._uow = unit_of_work
        self._publisher = publisher
        self._code_generator = code_generator
        self._clock = clock

    def execute(self, *, request_id: str, unit_id: int) -> AssignmentDTO:
        with self._uow.transaction():
            request = self._request_repo.get(request_id, for_update=True)
            if request is None:
                raise NotFoundError("Request not found")
            if not request.is_pending:
                raise ConflictError("Request has already been processed")

            unit = self._unit_repo.get(unit_id, for_update=True)
            if unit is None:
                raise NotFoundError("Storage box not found")
            if unit.occupied:
                raise ConflictError("Storage box is already occupied")

            access_code = self._code_generator.generate(self._unit_repo.access_code_in_use)
            now = self._clock()

            unit.occupy(
                occupant=request.requestor,
                occupant_label=request.requestor_label,
                access_code=access_code,
                occupied_at=now,
            )
            request.approve(unit_id=unit.unit_id, access_code=access_code, processed_at=now)

            self._unit_repo.occupy(unit)
            self._request_repo.mark_processed(request)

        logger.info(
            "Storage assigned: box %s to %s",
            unit.unit_id,
            request.requestor_label,
            extra={"unit_id": unit.unit_id, "request_id": request.request_id},
        )

        self._publisher.publish(
            Notification(
                type=NotificationType.STORAGE_ASSIGNED,
                payload={
                    "requestor": request.requestor,
                    "unit_id": unit.unit_id,
                    "access_code": access_code,
                    "occupied_at": now.isoformat(),
                },
            )
        )
        self._publisher.publish(Notification(type=NotificationType.STORAGE_UPDATED, payload=unit.to_snapshot()))

        return AssignmentDTO(
            request_id=request.request_id,
            unit_id=unit.unit_id,
            requestor=request.requestor,
            requestor_label=request.requestor_label,
            access_code=access_code,
            occupied_at=now,
        )
