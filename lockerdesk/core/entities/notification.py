from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class NotificationType(str, Enum):
    NEW_REQUEST = "new-request"
    STORAGE_ASSIGNED = "storage-assigned"
    STORAGE_RELEASED = "storage-released"
    STORAGE_UPDATED = "storage-updated"
    REQUEST_REJECTED = "request-rejected"


@dataclass(frozen=True, slots=True)
class Notification:
    type: NotificationType
    payload: dict[str, Any]
    emitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_message(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "payload": self.payload,
            "emitted_at": self.emitted_at.isoformat(),
        }
