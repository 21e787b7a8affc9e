from __future__ import annotations

from datetime import datetime, timezone

import pytest

from lockerdesk.core.entities.storage_request import RequestStatus, StorageRequest
from lockerdesk.core.entities.storage_unit import StorageUnit

NOW = datetime(2026, 1, 5, 9, 30, tzinfo=timezone.utc)


def _request() -> StorageRequest:
    return StorageRequest(request_id="r-1", requestor="s-1", requestor_label="s1@uni.test", created_at=NOW)


def test_new_unit_is_free_and_consistent() -> None:
    unit = StorageUnit(unit_id=1)
    assert unit.occupied is False
    assert unit.is_consistent()


def test_occupy_then_vacate_clears_every_occupant_field() -> None:
    unit = StorageUnit(unit_id=4)
    unit.occupy(occupant="s-1", occupant_label="s1@uni.test", access_code="123456", occupied_at=NOW)
    assert unit.occupied and unit.access_code == "123456"
    assert unit.is_consistent()

    unit.vacate()

    assert unit.occupied is False
    assert unit.occupant is None
    assert unit.occupant_label is None
    assert unit.access_code is None
    assert unit.occupied_at is None
    assert unit.is_consistent()


def test_occupied_unit_cannot_be_occupied_again() -> None:
    unit = StorageUnit(unit_id=2)
    unit.occupy(occupant="s-1", occupant_label="a", access_code="123456", occupied_at=NOW)
    with pytest.raises(ValueError):
        unit.occupy(occupant="s-2", occupant_label="b", access_code="654321", occupied_at=NOW)
    assert unit.occupant == "s-1"


def test_free_unit_cannot_be_vacated() -> None:
    with pytest.raises(ValueError):
        StorageUnit(unit_id=3).vacate()


def test_free_unit_with_leftover_code_is_inconsistent() -> None:
    assert not StorageUnit(unit_id=1, occupied=False, access_code="123456").is_consistent()


def test_unit_snapshot_never_contains_the_access_code() -> None:
    unit = StorageUnit(unit_id=9)
    unit.occupy(occupant="s-1", occupant_label="a", access_code="123456", occupied_at=NOW)
    snapshot = unit.to_snapshot()
    assert "access_code" not in snapshot
    assert "123456" not in snapshot.values()
    assert snapshot["occupied_at"] == NOW.isoformat()


def test_request_approve_is_terminal() -> None:
    request = _request()
    request.approve(unit_id=7, access_code="123456", processed_at=NOW)

    assert request.status is RequestStatus.APPROVED
    assert request.assigned_unit == 7
    with pytest.raises(ValueError):
        request.reject(processed_at=NOW)
    with pytest.raises(ValueError):
        request.approve(unit_id=8, access_code="654321", processed_at=NOW)


def test_request_reject_is_terminal() -> None:
    request = _request()
    request.reject(processed_at=NOW)

    assert request.status is RequestStatus.REJECTED
    assert request.assigned_unit is None
    with pytest.raises(ValueError):
        request.approve(unit_id=1, access_code="123456", processed_at=NOW)
