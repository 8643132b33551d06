import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.exceptions import StorageError

logger = logging.getLogger(__name__)


class ServiceBase:
    def __init__(self, session: Session):
        self._session = session

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Commit on success; roll back on any error, wrapping database failures."""
        try:
            yield self._session
            self._session.commit()
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.error("Transaction rolled back: %s", e)
            raise StorageError("Failed to persist changes.", code="STORAGE_WRITE_FAILED") from e
        except Exception:
            self._session.rollback()
            raise
