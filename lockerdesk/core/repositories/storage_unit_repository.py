from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from lockerdesk.core.entities.storage_unit import StorageUnit


class StorageUnitRepository(ABC):
    """
    Repository interface for the locker pool.
    """

    @abstractmethod
    def initialize(self, size: int) -> int:
        """Create units 1..size when the pool is empty. Returns the number of units created."""
        raise NotImplementedError

    @abstractmethod
    def get(self, unit_id: int, *, for_update: bool = False) -> StorageUnit | None:
        """for_update takes a row lock where the backend supports one."""
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> Sequence[StorageUnit]:
        """All units ordered by unit id."""
        raise NotImplementedError

    @abstractmethod
    def list_occupied(self) -> Sequence[StorageUnit]:
        """Occupied units, most recently occupied first."""
        raise NotImplementedError

    @abstractmethod
    def find_by_occupant(self, occupant: str) -> StorageUnit | None:
        raise NotImplementedError

    @abstractmethod
    def access_code_in_use(self, access_code: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def count_total(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def count_occupied(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def occupy(self, unit: StorageUnit) -> None:
        """
        Persist an occupied unit. Must fail with ConflictError if the stored
        unit is no longer free.
        """
        raise NotImplementedError

    @abstractmethod
    def vacate(self, unit: StorageUnit, *, access_code: str) -> None:
        """
        Persist a vacated unit. Must fail with ConflictError if the stored unit
        no longer holds access_code.
        """
        raise NotImplementedError
