from __future__ import annotations

from typing import Sequence

from lockerdesk.core.entities.storage_unit import StorageUnit
from lockerdesk.core.errors import NotFoundError
from lockerdesk.core.repositories.storage_unit_repository import StorageUnitRepository


class GetStorageUnitsUseCase:
    def __init__(self, *, unit_repo: StorageUnitRepository) -> None:
        self._unit_repo = unit_repo

    def list_all(self) -> Sequence[StorageUnit]:
        return self._unit_repo.list_all()

    def list_occupied(self) -> Sequence[StorageUnit]:
        return self._unit_repo.list_occupied()

    def find(self, *, unit_id: int) -> StorageUnit:
        unit = self._unit_repo.get(unit_id)
        if unit is None:
            raise NotFoundError("Storage box not found")
        return unit
