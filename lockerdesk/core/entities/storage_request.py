from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class RequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(slots=True)
class StorageRequest:
    request_id: str
    requestor: str
    requestor_label: str
    created_at: datetime
    status: RequestStatus = RequestStatus.PENDING
    assigned_unit: int | None = None
    access_code: str | None = None
    processed_at: datetime | None = None

    @property
    def is_pending(self) -> bool:
        return self.status is RequestStatus.PENDING

    def approve(self, *, unit_id: int, access_code: str, processed_at: datetime) -> None:
        if not self.is_pending:
            raise ValueError("Request has already been processed")
        self.status = RequestStatus.APPROVED
        self.assigned_unit = unit_id
        self.access_code = access_code
        self.processed_at = processed_at

    def reject(self, *, processed_at: datetime) -> None:
        if not self.is_pending:
            raise ValueError("Request has already been processed")
        self.status = RequestStatus.REJECTED
        self.processed_at = processed_at

    def to_snapshot(self) -> dict:
        return {
            "request_id": self.request_id,
            "requestor": self.requestor,
            "requestor_label": self.requestor_label,
            "status": self.status.value,
            "assigned_unit": self.assigned_unit,
            "created_at": self.created_at.isoformat(),
            "processed_at": self.processed_at.isoformat() if self.processed_at else None,
        }
