from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lockerdesk.core.errors import ConflictError

logger = logging.getLogger(__name__)

# Single writer for every state transition in this process.
_writer_lock = threading.RLock()


class SqlUnitOfWork:
    """
    Runs a block as one serialized database transaction.

    The block holds the process-wide writer lock, is committed on success and
    rolled back on any exception. Constraint violations (a unique access code
    or a second pending request slipping past the checks) are reported as
    ConflictError.
    """

    def __init__(self, db: Session, *, lock: threading.RLock | None = None) -> None:
        self._db = db
        self._lock = lock or _writer_lock

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            try:
                yield
                self._db.commit()
            except IntegrityError as e:
                self._db.rollback()
                logger.warning("Transaction rejected by a database constraint: %s", e.orig)
                raise ConflictError("Conflicting concurrent update, please retry") from e
            except Exception:
                self._db.rollback()
                raise
