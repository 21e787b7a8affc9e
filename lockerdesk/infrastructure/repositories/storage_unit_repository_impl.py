from __future__ import annotations

from sqlalchemy import exists, func, select, update
from sqlalchemy.orm import Session

from lockerdesk.core.entities.storage_unit import StorageUnit
from lockerdesk.core.errors import ConflictError
from lockerdesk.core.repositories.storage_unit_repository import StorageUnitRepository
from lockerdesk.infrastructure.models.models import StorageUnitModel
from lockerdesk.infrastructure.repositories._time import as_utc


class StorageUnitRepositoryImpl(StorageUnitRepository):
    """
    SQLAlchemy implementation of the locker pool.

    Writes are flushed, never committed: the surrounding unit of work owns the
    transaction. occupy/vacate are conditional updates, so a write based on a
    stale read affects no row and fails with ConflictError.
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    @staticmethod
    def _to_entity(row: StorageUnitModel) -> StorageUnit:
        return StorageUnit(
            unit_id=row.unit_id,
            occupied=row.occupied,
            occupant=row.occupant,
            occupant_label=row.occupant_label,
            access_code=row.access_code,
            occupied_at=as_utc(row.occupied_at),
        )

    def initialize(self, size: int) -> int:
        if self.count_total() > 0:
            return 0

        self._db.add_all(StorageUnitModel(unit_id=unit_id, occupied=False) for unit_id in range(1, size + 1))
        self._db.flush()
        return size

    def get(self, unit_id: int, *, for_update: bool = False) -> StorageUnit | None:
        row = self._db.get(StorageUnitModel, unit_id, populate_existing=True, with_for_update=for_update or None)
        if row is None:
            return None
        return self._to_entity(row)

    def list_all(self) -> list[StorageUnit]:
        rows = self._db.scalars(select(StorageUnitModel).order_by(StorageUnitModel.unit_id))
        return [self._to_entity(row) for row in rows]

    def list_occupied(self) -> list[StorageUnit]:
        rows = self._db.scalars(
            select(StorageUnitModel)
            .where(StorageUnitModel.occupied.is_(True))
            .order_by(StorageUnitModel.occupied_at.desc(), StorageUnitModel.unit_id)
        )
        return [self._to_entity(row) for row in rows]

    def find_by_occupant(self, occupant: str) -> StorageUnit | None:
        row = self._db.scalars(
            select(StorageUnitModel)
            .where(StorageUnitModel.occupant == occupant)
            .where(StorageUnitModel.occupied.is_(True))
            .limit(1)
        ).first()
        if row is None:
            return None
        return self._to_entity(row)

    def access_code_in_use(self, access_code: str) -> bool:
        return bool(self._db.scalar(select(exists().where(StorageUnitModel.access_code == access_code))))

    def count_total(self) -> int:
        return int(self._db.scalar(select(func.count()).select_from(StorageUnitModel)) or 0)

    def count_occupied(self) -> int:
        q = select(func.count()).select_from(StorageUnitModel).where(StorageUnitModel.occupied.is_(True))
        return int(self._db.scalar(q) or 0)

    def occupy(self, unit: StorageUnit) -> None:
        result = self._db.execute(
            update(StorageUnitModel)
            .where(StorageUnitModel.unit_id == unit.unit_id)
            .where(StorageUnitModel.occupied.is_(False))
            .values(
                occupied=True,
                occupant=unit.occupant,
                occupant_label=unit.occupant_label,
                access_code=unit.access_code,
                occupied_at=unit.occupied_at,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ConflictError("Storage box is already occupied")

    def vacate(self, unit: StorageUnit, *, access_code: str) -> None:
        result = self._db.execute(
            update(StorageUnitModel)
            .where(StorageUnitModel.unit_id == unit.unit_id)
            .where(StorageUnitModel.occupied.is_(True))
            .where(StorageUnitModel.access_code == access_code)
            .values(
                occupied=False,
                occupant=None,
                occupant_label=None,
                access_code=None,
                occupied_at=None,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ConflictError("Storage box is not currently occupied")
