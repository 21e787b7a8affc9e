from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable
from uuid import uuid4

from lockerdesk.core.entities.identity import Identity
from lockerdesk.core.entities.notification import Notification, NotificationType
from lockerdesk.core.entities.storage_request import StorageRequest
from lockerdesk.core.errors import ConflictError
from lockerdesk.core.ports import NotificationPublisher, UnitOfWork
from lockerdesk.core.repositories.storage_request_repository import StorageRequestRepository
from lockerdesk.core.repositories.storage_unit_repository import StorageUnitRepository
from lockerdesk.core.use_cases._clock import utcnow

logger = logging.getLogger(__name__)


class SubmitRequestUseCase:
    """
    Opens a pending storage request for a student who has neither a pending
    request nor an occupied unit.
    """

    def __init__(
            self,
            *,
            unit_repo: StorageUnitRepository,
            request_repo: StorageRequestRepository,
            unit_of_work: UnitOfWork,
            publisher: NotificationPublisher,
            clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._unit_repo = unit_repo
        self._request_repo = request_repo
        self._uow = unit_of_work
        self._publisher = publisher
        self._clock = clock

    def execute(self, *, requestor: Identity) -> StorageRequest:
        with self._uow.transaction():
            if self._request_repo.find_pending_for(requestor.id) is not None:
                raise ConflictError("You already have a pending request")
            if self._unit_repo.find_by_occupant(requestor.id) is not None:
                raise ConflictError("You already have an active storage")

            request = StorageRequest(
                request_id=str(uuid4()),
                requestor=requestor.id,
                requestor_label=requestor.label,
                created_at=self._clock(),
            )
            self._request_repo.add(request)

        logger.info("Storage request %s submitted by %s", request.request_id, request.requestor_label)
        self._publisher.publish(Notification(type=NotificationType.NEW_REQUEST, payload=request.to_snapshot()))
        return request
