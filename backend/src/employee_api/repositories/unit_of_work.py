"""Unit of work over a SQLAlchemy session."""

import logging

from sqlalchemy import event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from employee_api.exceptions import DuplicateRecordError
from employee_api.utils.secure_logging import log_error

logger = logging.getLogger(__name__)

# Markers drivers put in unique-constraint violation messages
_UNIQUE_VIOLATION_MARKERS = ("unique", "duplicate")


class SqlAlchemyUnitOfWork:
    """Commit boundary for the employee directory.

    Everything staged on the session since the last commit is written in a
    single transaction. The number of rows written is counted from the
    flushes that happen in between.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self._affected = 0
        event.listen(session.sync_session, "after_flush", self._count_flushed)

    def _count_flushed(self, session, flush_context) -> None:
        # new/dirty/deleted still hold the pre-flush state here
        dirty = [obj for obj in session.dirty if session.is_modified(obj)]
        self._affected += len(session.new) + len(dirty) + len(session.deleted)

    async def commit(self) -> int:
        """Commit pending changes.

        Returns:
            Number of records inserted, updated or deleted

        Raises:
            DuplicateRecordError: If a unique constraint rejected the write
        """
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            self._affected = 0
            message = str(e.orig).lower() if e.orig is not None else str(e).lower()
            if not any(marker in message for marker in _UNIQUE_VIOLATION_MARKERS):
                raise
            log_error(logger, "Commit rejected by unique constraint", e)
            raise DuplicateRecordError() from e

        affected, self._affected = self._affected, 0
        return affected

    async def rollback(self) -> None:
        """Discard pending changes."""
        await self.session.rollback()
        self._affected = 0
