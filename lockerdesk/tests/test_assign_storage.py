from __future__ import annotations

import random

import pytest
from sqlalchemy import select

from lockerdesk.core.access_codes import AccessCodeGenerator
from lockerdesk.core.entities.storage_request import RequestStatus
from lockerdesk.core.errors import ConflictError, NotFoundError, ResourceExhaustedError
from lockerdesk.infrastructure.models.models import StorageRequestModel, StorageUnitModel
from lockerdesk.infrastructure.repositories.storage_request_repository_impl import StorageRequestRepositoryImpl
from lockerdesk.infrastructure.repositories.storage_unit_repository_impl import StorageUnitRepositoryImpl
from lockerdesk.schemas.models import AssignStorageBody
from lockerdesk.services.lockerdesk_service import assign_storage_service, submit_request_service
from lockerdesk.tests.helpers import event_types, student


def _submit(db, hub, student_id: str = "student-a") -> str:
    result = submit_request_service(student(student_id, f"{student_id}@uni.test"), db, hub)
    return result.request.request_id


def test_assign_occupies_unit_and_approves_request(db, pool, hub, events) -> None:
    request_id = _submit(db, hub)

    result = assign_storage_service(AssignStorageBody(request_id=request_id, unit_id=7), db, hub)

    assert result.unit_id == 7
    assert result.requestor_label == "student-a@uni.test"
    assert len(result.access_code) == 6 and result.access_code.isdigit()

    unit = StorageUnitRepositoryImpl(db).get(7)
    assert unit.occupied is True
    assert unit.occupant == "student-a"
    assert unit.access_code == result.access_code
    assert unit.occupied_at is not None

    request = StorageRequestRepositoryImpl(db).get(request_id)
    assert request.status is RequestStatus.APPROVED
    assert request.assigned_unit == 7
    assert request.access_code == result.access_code
    assert request.processed_at == unit.occupied_at

    assert event_types(events) == ["new-request", "storage-assigned", "storage-updated"]
    assigned = events[1].payload
    assert assigned["unit_id"] == 7
    assert assigned["requestor"] == "student-a"
    assert assigned["access_code"] == result.access_code
    assert events[2].payload["occupied"] is True


def test_unknown_request_is_reported_before_unknown_unit(db, pool, hub) -> None:
    with pytest.raises(NotFoundError, match="Request not found"):
        assign_storage_service(AssignStorageBody(request_id="missing", unit_id=999), db, hub)


def test_processed_request_is_reported_before_unknown_unit(db, pool, hub) -> None:
    request_id = _submit(db, hub)
    assign_storage_service(AssignStorageBody(request_id=request_id, unit_id=1), db, hub)

    with pytest.raises(ConflictError, match="already been processed"):
        assign_storage_service(AssignStorageBody(request_id=request_id, unit_id=999), db, hub)


def test_unknown_unit(db, pool, hub) -> None:
    request_id = _submit(db, hub)

    with pytest.raises(NotFoundError, match="Storage box not found"):
        assign_storage_service(AssignStorageBody(request_id=request_id, unit_id=pool + 1), db, hub)

    assert StorageRequestRepositoryImpl(db).get(request_id).status is RequestStatus.PENDING


def test_occupied_unit_is_a_conflict_and_leaves_second_request_pending(db, pool, hub, events) -> None:
    first = _submit(db, hub, "student-a")
    second = _submit(db, hub, "student-b")
    assign_storage_service(AssignStorageBody(request_id=first, unit_id=3), db, hub)
    events.clear()

    with pytest.raises(ConflictError, match="already occupied"):
        assign_storage_service(AssignStorageBody(request_id=second, unit_id=3), db, hub)

    assert StorageRequestRepositoryImpl(db).get(second).status is RequestStatus.PENDING
    assert StorageUnitRepositoryImpl(db).get(3).occupant == "student-a"
    assert events == []


def test_exhausted_code_generation_changes_nothing(db, pool, hub, events) -> None:
    request_id = _submit(db, hub)
    events.clear()

    class _AlwaysSame(random.Random):
        def randint(self, a: int, b: int) -> int:
            return 424242

    other = _submit(db, hub, "student-b")
    assign_storage_service(
        AssignStorageBody(request_id=other, unit_id=1), db, hub, code_generator=AccessCodeGenerator(rng=_AlwaysSame())
    )
    events.clear()

    with pytest.raises(ResourceExhaustedError):
        assign_storage_service(
            AssignStorageBody(request_id=request_id, unit_id=2),
            db,
            hub,
            code_generator=AccessCodeGenerator(rng=_AlwaysSame()),
        )

    assert StorageUnitRepositoryImpl(db).get(2).occupied is False
    assert StorageRequestRepositoryImpl(db).get(request_id).status is RequestStatus.PENDING
    assert events == []


def test_every_occupied_unit_holds_a_distinct_code(db, pool, hub) -> None:
    for n in range(1, pool + 1):
        request_id = _submit(db, hub, f"student-{n}")
        assign_storage_service(AssignStorageBody(request_id=request_id, unit_id=n), db, hub)

    codes = db.scalars(select(StorageUnitModel.access_code).where(StorageUnitModel.occupied.is_(True))).all()
    assert len(codes) == pool
    assert len(set(codes)) == pool


def test_request_rows_are_kept_as_history(db, pool, hub) -> None:
    request_id = _submit(db, hub)
    assign_storage_service(AssignStorageBody(request_id=request_id, unit_id=5), db, hub)

    rows = db.scalars(select(StorageRequestModel)).all()
    assert [r.request_id for r in rows] == [request_id]


def test_ledger_failure_after_unit_write_rolls_back_both(db, pool, hub, events, monkeypatch) -> None:
    request_id = _submit(db, hub)
    events.clear()

    flushed_units: list[int] = []
    real_occupy = StorageUnitRepositoryImpl.occupy

    def _tracking_occupy(self, unit):
        real_occupy(self, unit)
        flushed_units.append(unit.unit_id)

    def _failing_mark_processed(self, request):
        raise RuntimeError("ledger write failed")

    monkeypatch.setattr(StorageUnitRepositoryImpl, "occupy", _tracking_occupy)
    monkeypatch.setattr(StorageRequestRepositoryImpl, "mark_processed", _failing_mark_processed)

    with pytest.raises(RuntimeError, match="ledger write failed"):
        assign_storage_service(AssignStorageBody(request_id=request_id, unit_id=3), db, hub)

    assert flushed_units == [3]

    unit = StorageUnitRepositoryImpl(db).get(3)
    assert unit.occupied is False
    assert unit.occupant is None
    assert unit.access_code is None
    assert unit.occupied_at is None

    request = StorageRequestRepositoryImpl(db).get(request_id)
    assert request.status is RequestStatus.PENDING
    assert request.assigned_unit is None
    assert request.access_code is None

    assert events == []

    monkeypatch.undo()
    result = assign_storage_service(AssignStorageBody(request_id=request_id, unit_id=3), db, hub)
    assert result.unit_id == 3
