from __future__ import annotations

from dataclasses import dataclass

from lockerdesk.core.repositories.storage_request_repository import StorageRequestRepository
from lockerdesk.core.repositories.storage_unit_repository import StorageUnitRepository


@dataclass(frozen=True, slots=True)
class StatisticsDTO:
    """
    Use-case return type for GET /library/statistics
    """
    total_units: int
    occupied_units: int
    available_units: int
    pending_requests: int


class GetStatisticsUseCase:
    def __init__(self, *, unit_repo: StorageUnitRepository, request_repo: StorageRequestRepository) -> None:
        self._unit_repo = unit_repo
        self._request_repo = request_repo

    def execute(self) -> StatisticsDTO:
        total = self._unit_repo.count_total()
        occupied = self._unit_repo.count_occupied()
        return StatisticsDTO(
            total_units=total,
            occupied_units=occupied,
            available_units=total - occupied,
            pending_requests=self._request_repo.count_pending(),
        )
