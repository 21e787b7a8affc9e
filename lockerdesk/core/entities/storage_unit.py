from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True)
class StorageUnit:
    unit_id: int
    occupied: bool = False
    occupant: str | None = None
    occupant_label: str | None = None
    access_code: str | None = None
    occupied_at: datetime | None = None

    def occupy(self, *, occupant: str, occupant_label: str, access_code: str, occupied_at: datetime) -> None:
        if self.occupied:
            raise ValueError(f"Storage unit {self.unit_id} is already occupied")
        self.occupied = True
        self.occupant = occupant
        self.occupant_label = occupant_label
        self.access_code = access_code
        self.occupied_at = occupied_at

    def vacate(self) -> None:
        if not self.occupied:
            raise ValueError(f"Storage unit {self.unit_id} is not currently occupied")
        self.occupied = False
        self.occupant = None
        self.occupant_label = None
        self.access_code = None
        self.occupied_at = None

    def is_consistent(self) -> bool:
        """A free unit carries no occupant data."""
        if self.occupied:
            return self.occupant is not None and self.access_code is not None
        return (
            self.occupant is None
            and self.occupant_label is None
            and self.access_code is None
            and self.occupied_at is None
        )

    def to_snapshot(self) -> dict:
        return {
            "unit_id": self.unit_id,
            "occupied": self.occupied,
            "occupant": self.occupant,
            "occupant_label": self.occupant_label,
            "occupied_at": self.occupied_at.isoformat() if self.occupied_at else None,
        }
