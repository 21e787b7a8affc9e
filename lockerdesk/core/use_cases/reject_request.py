from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from lockerdesk.core.entities.notification import Notification, NotificationType
from lockerdesk.core.entities.storage_request import StorageRequest
from lockerdesk.core.errors import ConflictError, NotFoundError
from lockerdesk.core.ports import NotificationPublisher, UnitOfWork
from lockerdesk.core.repositories.storage_request_repository import StorageRequestRepository
from lockerdesk.core.use_cases._clock import utcnow

logger = logging.getLogger(__name__)


class RejectRequestUseCase:
    def __init__(
            self,
            *,
            request_repo: StorageRequestRepository,
            unit_of_work: UnitOfWork,
            publisher: NotificationPublisher,
            clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._request_repo = request_repo
        self._uow = unit_of_work
        self._publisher = publisher
        self._clock = clock

    def execute(self, *, request_id: str) -> StorageRequest:
        with self._uow.transaction():
            request = self._request_repo.get(request_id, for_update=True)
            if request is None:
                raise NotFoundError("Request not found")
            if not request.is_pending:
                raise ConflictError("Request has already been processed")

            request.reject(processed_at=self._clock())
            self._request_repo.mark_processed(request)

        logger.info("Storage request %s rejected", request.request_id)
        self._publisher.publish(Notification(type=NotificationType.REQUEST_REJECTED, payload=request.to_snapshot()))
        return request
