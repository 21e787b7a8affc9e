from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from lockerdesk.core.entities.identity import Identity
from lockerdesk.core.errors import DomainError, ErrorKind
from lockerdesk.infrastructure.identity import JwtIdentityResolver
from lockerdesk.infrastructure.notifications import NotificationHub
from lockerdesk.infrastructure.rate_limiter import MovingWindowAttemptLimiter
from lockerdesk.presentation.dependencies import (
    get_client_key,
    get_db,
    get_identity_resolver,
    get_login_limiter,
    get_notification_hub,
    get_release_limiter,
    require_operator,
    require_student,
)
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
from lockerdesk.services.lockerdesk_service import (
    assign_storage_service,
    find_unit_service,
    list_occupied_units_service,
    list_pending_requests_service,
    list_units_service,
    my_storage_service,
    operator_login_service,
    reject_request_service,
    release_storage_service,
    statistics_service,
    submit_request_service,
)

router = APIRouter()

_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.INVALID_CREDENTIAL: 400,
    ErrorKind.RESOURCE_EXHAUSTED: 503,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.INTERNAL_FAULT: 500,
}


def _http_error(error: DomainError) -> HTTPException:
    return HTTPException(status_code=_STATUS_BY_KIND[error.kind], detail=error.message)


@router.get("/library/storage-boxes", response_model=list[StorageUnit])
def get_library_storage_boxes(db: Session = Depends(get_db)) -> list[StorageUnit]:
    """
    List every storage box ordered by box number
    """
    return list_units_service(db)


@router.get("/library/storage-boxes/{unit_id}", response_model=StorageUnit)
def get_library_storage_box(unit_id: int, db: Session = Depends(get_db)) -> StorageUnit:
    try:
        return find_unit_service(unit_id, db)
    except DomainError as e:
        raise _http_error(e)


@router.get("/library/occupied-boxes", response_model=list[StorageUnit])
def get_library_occupied_boxes(db: Session = Depends(get_db)) -> list[StorageUnit]:
    """
    List occupied storage boxes, most recently occupied first
    """
    return list_occupied_units_service(db)


@router.get("/library/pending-requests", response_model=list[StorageRequest])
def get_library_pending_requests(db: Session = Depends(get_db)) -> list[StorageRequest]:
    """
    List pending storage requests, newest first
    """
    return list_pending_requests_service(db)


@router.get("/library/statistics", response_model=Statistics)
def get_library_statistics(db: Session = Depends(get_db)) -> Statistics:
    return statistics_service(db)


@router.post("/library/assign-storage", response_model=AssignStorageResult)
def post_library_assign_storage(
        body: AssignStorageBody,
        _operator: Identity = Depends(require_operator),
        db: Session = Depends(get_db),
        hub: NotificationHub = Depends(get_notification_hub),
) -> AssignStorageResult:
    """
    Assign a free storage box to a pending request

    Returns:
      - 200 with the generated access code
      - 404 if the request or the box does not exist
      - 409 if the request was already processed or the box is occupied
      - 503 if no unique access code could be generated
    """
    try:
        return assign_storage_service(body, db, hub)
    except DomainError as e:
        raise _http_error(e)


@router.post("/library/reject-request", response_model=RejectRequestResult)
def post_library_reject_request(
        body: RejectRequestBody,
        _operator: Identity = Depends(require_operator),
        db: Session = Depends(get_db),
        hub: NotificationHub = Depends(get_notification_hub),
) -> RejectRequestResult:
    try:
        return reject_request_service(body, db, hub)
    except DomainError as e:
        raise _http_error(e)


@router.post("/library/release-storage", response_model=ReleaseStorageResult)
def post_library_release_storage(
        body: ReleaseStorageBody,
        client_key: str = Depends(get_client_key),
        db: Session = Depends(get_db),
        hub: NotificationHub = Depends(get_notification_hub),
        limiter: MovingWindowAttemptLimiter = Depends(get_release_limiter),
) -> ReleaseStorageResult:
    """
    Release a storage box with its access code. No login needed.

    Returns:
      - 200 when the box was freed
      - 400 on a wrong access code
      - 404 if the box does not exist
      - 409 if the box is not occupied
      - 429 after too many wrong codes from the same client
    """
    try:
        return release_storage_service(body, client_key, db, hub, limiter)
    except DomainError as e:
        raise _http_error(e)


@router.post("/student/request-storage", response_model=SubmitRequestResult, status_code=201)
def post_student_request_storage(
        student: Identity = Depends(require_student),
        db: Session = Depends(get_db),
        hub: NotificationHub = Depends(get_notification_hub),
) -> SubmitRequestResult:
    try:
        return submit_request_service(student, db, hub)
    except DomainError as e:
        raise _http_error(e)


@router.get("/student/my-storage", response_model=MyStorage)
def get_student_my_storage(
        student: Identity = Depends(require_student),
        db: Session = Depends(get_db),
) -> MyStorage:
    return my_storage_service(student, db)


@router.post("/auth/library/login", response_model=TokenResult)
def post_auth_library_login(
        body: LibraryLoginBody,
        client_key: str = Depends(get_client_key),
        resolver: JwtIdentityResolver = Depends(get_identity_resolver),
        limiter: MovingWindowAttemptLimiter = Depends(get_login_limiter),
) -> TokenResult:
    try:
        return operator_login_service(body, client_key, resolver, limiter)
    except DomainError as e:
        raise _http_error(e)
