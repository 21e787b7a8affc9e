from __future__ import annotations

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from lockerdesk.core.entities.storage_request import RequestStatus, StorageRequest
from lockerdesk.core.errors import ConflictError
from lockerdesk.core.repositories.storage_request_repository import StorageRequestRepository
from lockerdesk.infrastructure.models.models import StorageRequestModel
from lockerdesk.infrastructure.repositories._time import as_utc


class StorageRequestRepositoryImpl(StorageRequestRepository):
    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _to_entity(row: StorageRequestModel) -> StorageRequest:
        return StorageRequest(
            request_id=row.request_id,
            requestor=row.requestor,
            requestor_label=row.requestor_label,
            status=RequestStatus(row.status) if not isinstance(row.status, RequestStatus) else row.status,
            assigned_unit=row.assigned_unit,
            access_code=row.access_code,
            created_at=as_utc(row.created_at),
            processed_at=as_utc(row.processed_at),
        )

    def get(self, request_id: str, *, for_update: bool = False) -> StorageRequest | None:
        row = self.db.get(StorageRequestModel, request_id, populate_existing=True, with_for_update=for_update or None)
        if row is None:
            return None
        return self._to_entity(row)

    def add(self, request: StorageRequest) -> None:
        self.db.add(
            StorageRequestModel(
                request_id=request.request_id,
                requestor=request.requestor,
                requestor_label=request.requestor_label,
                status=request.status,
                assigned_unit=request.assigned_unit,
                access_code=request.access_code,
                created_at=request.created_at,
                processed_at=request.processed_at,
            )
        )
        self.db.flush()

    def mark_processed(self, request: StorageRequest) -> None:
        result = self.db.execute(
            update(StorageRequestModel)
            .where(StorageRequestModel.request_id == request.request_id)
            .where(StorageRequestModel.status == RequestStatus.PENDING)
            .values(
                status=request.status,
                assigned_unit=request.assigned_unit,
                access_code=request.access_code,
                processed_at=request.processed_at,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ConflictError("Request has already been processed")

    def find_pending_for(self, requestor: str) -> StorageRequest | None:
        row = self.db.scalars(
            select(StorageRequestModel)
            .where(StorageRequestModel.requestor == requestor)
            .where(StorageRequestModel.status == RequestStatus.PENDING)
            .limit(1)
        ).first()
        if row is None:
            return None
        return self._to_entity(row)

    def list_pending(self) -> list[StorageRequest]:
        rows = self.db.scalars(
            select(StorageRequestModel)
            .where(StorageRequestModel.status == RequestStatus.PENDING)
            .order_by(StorageRequestModel.created_at.desc(), StorageRequestModel.request_id)
        )
        return [self._to_entity(row) for row in rows]

    def count_pending(self) -> int:
        q = (
            select(func.count())
            .select_from(StorageRequestModel)
            .where(StorageRequestModel.status == RequestStatus.PENDING)
        )
        return int(self.db.scalar(q) or 0)
