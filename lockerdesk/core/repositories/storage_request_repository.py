from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from lockerdesk.core.entities.storage_request import StorageRequest


class StorageRequestRepository(ABC):
    @abstractmethod
    def get(self, request_id: str, *, for_update: bool = False) -> StorageRequest | None:
        raise NotImplementedError

    @abstractmethod
    def add(self, request: StorageRequest) -> None:
        raise NotImplementedError

    @abstractmethod
    def mark_processed(self, request: StorageRequest) -> None:
        """
        Persist a request that left the pending state. Must fail with
        ConflictError if the stored request is no longer pending.
        """
        raise NotImplementedError

    @abstractmethod
    def find_pending_for(self, requestor: str) -> StorageRequest | None:
        raise NotImplementedError

    @abstractmethod
    def list_pending(self) -> Sequence[StorageRequest]:
        """Pending requests, newest first."""
        raise NotImplementedError

    @abstractmethod
    def count_pending(self) -> int:
        raise NotImplementedError
