from __future__ import annotations

from dataclasses import dataclass

from lockerdesk.core.entities.identity import Identity
from lockerdesk.core.entities.storage_unit import StorageUnit
from lockerdesk.core.repositories.storage_request_repository import StorageRequestRepository
from lockerdesk.core.repositories.storage_unit_repository import StorageUnitRepository


@dataclass(frozen=True, slots=True)
class MyStorageDTO:
    storage: StorageUnit | None
    pending_request: bool


class GetMyStorageUseCase:
    def __init__(self, *, unit_repo: StorageUnitRepository, request_repo: StorageRequestRepository) -> None:
        self._unit_repo = unit_repo
        self._request_repo = request_repo

    def execute(self, *, requestor: Identity) -> MyStorageDTO:
        return MyStorageDTO(
            storage=self._unit_repo.find_by_occupant(requestor.id),
            pending_request=self._request_repo.find_pending_for(requestor.id) is not None,
        )
