from __future__ import annotations

import logging
from dataclasses import dataclass

from lockerdesk.core.ports import UnitOfWork
from lockerdesk.core.repositories.storage_unit_repository import StorageUnitRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class InitializePoolResult:
    created_units: int
    total_units: int


class InitializePoolUseCase:
    """
    Seed the locker pool with `size` free units. Existing pools are left alone.
    """

    def __init__(self, *, unit_repo: StorageUnitRepository, unit_of_work: UnitOfWork) -> None:
        self._unit_repo = unit_repo
        self._uow = unit_of_work

    def execute(self, *, size: int) -> InitializePoolResult:
        if size < 1:
            raise ValueError("Pool size must be at least 1")

        with self._uow.transaction():
            created = self._unit_repo.initialize(size)

        total = self._unit_repo.count_total()
        if created:
            logger.info("Initialized locker pool with %d storage boxes", created)
        else:
            logger.debug("Locker pool already initialized (%d storage boxes)", total)
        return InitializePoolResult(created_units=created, total_units=total)
