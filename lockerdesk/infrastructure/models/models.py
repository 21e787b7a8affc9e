from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from lockerdesk.core.entities.storage_request import RequestStatus
from lockerdesk.infrastructure.database import Base


class StorageUnitModel(Base):
    __tablename__ = "storage_units"

    unit_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    occupied: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    occupant: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    occupant_label: Mapped[str | None] = mapped_column(String, nullable=True)
    # NULLs never collide, so only live codes are unique
    access_code: Mapped[str | None] = mapped_column(String(6), nullable=True, unique=True)
    occupied_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint(
            "occupied OR (occupant IS NULL AND access_code IS NULL AND occupied_at IS NULL)",
            name="ck_storage_units_free_unit_is_empty",
        ),
    )


class StorageRequestModel(Base):
    __tablename__ = "storage_requests"

    request_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    requestor: Mapped[str] = mapped_column(String, nullable=False, index=True)
    requestor_label: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[RequestStatus] = mapped_column(Enum(RequestStatus), nullable=False, index=True)
    assigned_unit: Mapped[int | None] = mapped_column(ForeignKey("storage_units.unit_id"), nullable=True)
    access_code: Mapped[str | None] = mapped_column(String(6), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    processed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index(
            "uq_storage_requests_one_pending_per_requestor",
            "requestor",
            unique=True,
            sqlite_where=text("status = 'PENDING'"),
            postgresql_where=text("status = 'PENDING'"),
        ),
    )
