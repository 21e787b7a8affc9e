from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from lockerdesk.core.access_codes import AccessCodeGenerator
from lockerdesk.core.entities.identity import Identity
from lockerdesk.core.entities.storage_request import StorageRequest as CoreStorageRequest
from lockerdesk.core.entities.storage_unit import StorageUnit as CoreStorageUnit
from lockerdesk.core.ports import AttemptLimiter, IdentityResolver, NotificationPublisher
from lockerdesk.core.use_cases.assign_storage import AssignStorageUseCase
from lockerdesk.core.use_cases.authenticate_operator import AuthenticateOperatorUseCase
from lockerdesk.core.use_cases.get_my_storage import GetMyStorageUseCase
from lockerdesk.core.use_cases.get_pending_requests import GetPendingRequestsUseCase
from lockerdesk.core.use_cases.get_statistics import GetStatisticsUseCase
from lockerdesk.core.use_cases.get_storage_units import GetStorageUnitsUseCase
from lockerdesk.core.use_cases.initialize_pool import InitializePoolUseCase
from lockerdesk.core.use_cases.reject_request import RejectRequestUseCase
from lockerdesk.core.use_cases.release_storage import ReleaseStorageUseCase
from lockerdesk.core.use_cases.submit_request import SubmitRequestUseCase
from lockerdesk.infrastructure.repositories.storage_request_repository_impl import StorageRequestRepositoryImpl
from lockerdesk.infrastructure.repositories.storage_unit_repository_impl import StorageUnitRepositoryImpl
from lockerdesk.infrastructure.unit_of_work import SqlUnitOfWork
from lockerdesk.schemas.models import (
    AssignStorageBody,
    AssignStorageResult,
    LibraryLoginBody,
    MyStorage,
    RejectRequestBody,
    RejectRequestResult,
    ReleaseStorageBody,
    ReleaseStorageResult,
    Statistics,
    StorageRequest,
    StorageUnit,
    SubmitRequestResult,
    TokenResult,
)


def _settings():
    from lockerdesk.infrastructure.config import settings
    return settings


def _to_unit_schema(unit: CoreStorageUnit) -> StorageUnit:
    return StorageUnit(
        unit_id=unit.unit_id,
        occupied=unit.occupied,
        occupant=unit.occupant,
        occupant_label=unit.occupant_label,
        occupied_at=unit.occupied_at,
    )


def _to_request_schema(request: CoreStorageRequest) -> StorageRequest:
    return StorageRequest(
        request_id=request.request_id,
        requestor=request.requestor,
        requestor_label=request.requestor_label,
        status=request.status.value,
        assigned_unit=request.assigned_unit,
        created_at=request.created_at,
        processed_at=request.processed_at,
    )


def initialize_pool_service(db: Session, size: int | None = None) -> dict[str, Any]:
    """
    Seed the locker pool on startup. A pool that already has units is left as is.
    """
    use_case = InitializePoolUseCase(unit_repo=StorageUnitRepositoryImpl(db), unit_of_work=SqlUnitOfWork(db))
    result = use_case.execute(size=size if size is not None else _settings().pool_size)
    return {"created_units": result.created_units, "total_units": result.total_units}


def list_units_service(db: Session) -> list[StorageUnit]:
    use_case = GetStorageUnitsUseCase(unit_repo=StorageUnitRepositoryImpl(db))
    return [_to_unit_schema(unit) for unit in use_case.list_all()]


def find_unit_service(unit_id: int, db: Session) -> StorageUnit:
    use_case = GetStorageUnitsUseCase(unit_repo=StorageUnitRepositoryImpl(db))
    return _to_unit_schema(use_case.find(unit_id=unit_id))


def list_occupied_units_service(db: Session) -> list[StorageUnit]:
    use_case = GetStorageUnitsUseCase(unit_repo=StorageUnitRepositoryImpl(db))
    return [_to_unit_schema(unit) for unit in use_case.list_occupied()]


def list_pending_requests_service(db: Session) -> list[StorageRequest]:
    use_case = GetPendingRequestsUseCase(request_repo=StorageRequestRepositoryImpl(db))
    return [_to_request_schema(request) for request in use_case.execute()]


def statistics_service(db: Session) -> Statistics:
    use_case = GetStatisticsUseCase(
        unit_repo=StorageUnitRepositoryImpl(db),
        request_repo=StorageRequestRepositoryImpl(db),
    )
    dto = use_case.execute()
    return Statistics(
        total_units=dto.total_units,
        occupied_units=dto.occupied_units,
        available_units=dto.available_units,
        pending_requests=dto.pending_requests,
    )


def submit_request_service(requestor: Identity, db: Session, publisher: NotificationPublisher) -> SubmitRequestResult:
    use_case = SubmitRequestUseCase(
        unit_repo=StorageUnitRepositoryImpl(db),
        request_repo=StorageRequestRepositoryImpl(db),
        unit_of_work=SqlUnitOfWork(db),
        publisher=publisher,
    )
    request = use_case.execute(requestor=requestor)
    return SubmitRequestResult(
        message="Storage request submitted successfully",
        request=_to_request_schema(request),
    )


def my_storage_service(requestor: Identity, db: Session) -> MyStorage:
    use_case = GetMyStorageUseCase(
        unit_repo=StorageUnitRepositoryImpl(db),
        request_repo=StorageRequestRepositoryImpl(db),
    )
    dto = use_case.execute(requestor=requestor)
    if dto.storage is None:
        return MyStorage(pending_request=dto.pending_request)
    # The holder may always read back their own code; listings never carry it
    return MyStorage(
        storage=_to_unit_schema(dto.storage),
        access_code=dto.storage.access_code,
        pending_request=dto.pending_request,
    )


def assign_storage_service(
        body: AssignStorageBody,
        db: Session,
        publisher: NotificationPublisher,
        code_generator: AccessCodeGenerator | None = None,
) -> AssignStorageResult:
    use_case = AssignStorageUseCase(
        unit_repo=StorageUnitRepositoryImpl(db),
        request_repo=StorageRequestRepositoryImpl(db),
        unit_of_work=SqlUnitOfWork(db),
        publisher=publisher,
        code_generator=code_generator or AccessCodeGenerator(max_attempts=_settings().access_code_max_attempts),
    )
    dto = use_case.execute(request_id=body.request_id, unit_id=body.unit_id)
    return AssignStorageResult(
        message="Storage assigned successfully",
        request_id=dto.request_id,
        unit_id=dto.unit_id,
        requestor_label=dto.requestor_label,
        access_code=dto.access_code,
        occupied_at=dto.occupied_at,
    )


def reject_request_service(body: RejectRequestBody, db: Session, publisher: NotificationPublisher) -> RejectRequestResult:
    use_case = RejectRequestUseCase(
        request_repo=StorageRequestRepositoryImpl(db),
        unit_of_work=SqlUnitOfWork(db),
        publisher=publisher,
    )
    request = use_case.execute(request_id=body.request_id)
    return RejectRequestResult(message="Storage request rejected", request=_to_request_schema(request))


def release_storage_service(
        body: ReleaseStorageBody,
        client_key: str,
        db: Session,
        publisher: NotificationPublisher,
        attempt_limiter: AttemptLimiter,
) -> ReleaseStorageResult:
    use_case = ReleaseStorageUseCase(
        unit_repo=StorageUnitRepositoryImpl(db),
        unit_of_work=SqlUnitOfWork(db),
        publisher=publisher,
        attempt_limiter=attempt_limiter,
    )
    dto = use_case.execute(unit_id=body.unit_id, access_code=body.access_code, client_key=client_key)
    return ReleaseStorageResult(
        message="Storage released successfully",
        unit_id=dto.unit_id,
        occupant_label=dto.occupant_label,
    )


def operator_login_service(
        body: LibraryLoginBody,
        client_key: str,
        identity_resolver: IdentityResolver,
        attempt_limiter: AttemptLimiter,
) -> TokenResult:
    settings = _settings()
    use_case = AuthenticateOperatorUseCase(
        identity_resolver=identity_resolver,
        attempt_limiter=attempt_limiter,
        library_password=settings.library_password,
        operator_email=settings.operator_email,
    )
    return TokenResult(token=use_case.execute(password=body.password, client_key=client_key))
