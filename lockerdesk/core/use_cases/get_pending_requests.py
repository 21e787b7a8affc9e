from __future__ import annotations

from typing import Sequence

from lockerdesk.core.entities.storage_request import StorageRequest
from lockerdesk.core.repositories.storage_request_repository import StorageRequestRepository


class GetPendingRequestsUseCase:
    def __init__(self, *, request_repo: StorageRequestRepository) -> None:
        self._request_repo = request_repo

    def execute(self) -> Sequence[StorageRequest]:
        return self._request_repo.list_pending()
