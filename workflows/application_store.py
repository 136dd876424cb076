"""In-memory store of loan application records.

The store is the single owner of application state. It only accepts whole
records: a new record is inserted, an existing one is swapped for a new
version. There is no field-level mutation, so the audit trail of a stored
record can only grow through a transition that produces a new record.

Author: Pat G Cappelaere, IBM Federal Consulting
Created: 2026-10-18
Version: 1.0.0
License: MIT

Example:
    >>> store = ApplicationStore()
    >>> store.insert(application)
    >>> store.get(application.id).status
    <ApplicationStatus.COMPLETED: 'COMPLETED'>
"""

import logging
import threading
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional

from models.loan_application import LoanApplication
from utils.json_writer import get_application_json_path, load_applications_dir, save_application_json

from .errors import ApplicationNotFoundError, DuplicateApplicationError, PersistenceError

logger = logging.getLogger(__name__)


class ApplicationStore:
    """Insertion-ordered collection of applications keyed by id.

    Insert, replace and update are serialized with a re-entrant lock so the
    store can be shared between request threads without losing an update.

    Args:
        persist_dir: Optional directory where a JSON snapshot of each record
            is written before every insert or replace takes effect.
    """

    def __init__(self, persist_dir: Optional[Path] = None):
        self._records: Dict[str, LoanApplication] = {}
        self._lock = threading.RLock()
        self.persist_dir = Path(persist_dir) if persist_dir else None

    @classmethod
    def load(cls, persist_dir: Path) -> "ApplicationStore":
        """Create a store backed by ``persist_dir`` and restore its snapshots."""
        store = cls(persist_dir=persist_dir)
        with store._lock:
            for application in load_applications_dir(Path(persist_dir)):
                if application.id in store._records:
                    logger.warning(f"Skipping duplicate snapshot for application {application.id}")
                    continue
                store._records[application.id] = application
        return store

    def insert(self, application: LoanApplication) -> LoanApplication:
        """Add a new record.

        Raises:
            DuplicateApplicationError: If a record with the same id exists.
            PersistenceError: If the snapshot could not be written.
        """
        with self._lock:
            if application.id in self._records:
                raise DuplicateApplicationError(application.id)
            self._persist(application)
            self._records[application.id] = application
        logger.debug(f"Inserted application {application.id}")
        return application

    def replace(self, application: LoanApplication) -> LoanApplication:
        """Swap the stored record having the same id for ``application``.

        Raises:
            ApplicationNotFoundError: If no record has that id.
            PersistenceError: If the snapshot could not be written; the stored
                record is left unchanged.
        """
        with self._lock:
            if application.id not in self._records:
                raise ApplicationNotFoundError(application.id)
            self._persist(application)
            self._records[application.id] = application
        logger.debug(f"Replaced application {application.id}")
        return application

    def update(
        self,
        application_id: str,
        transform: Callable[[LoanApplication], LoanApplication],
    ) -> LoanApplication:
        """Atomically replace a record with ``transform(record)``.

        The read and the write happen under the store lock, so two concurrent
        updates of the same record are applied one after the other.

        Raises:
            ApplicationNotFoundError: If no record has that id.
            ValueError: If the transform returns a record with another id.
        """
        with self._lock:
            current = self.get(application_id)
            updated = transform(current)
            if updated.id != application_id:
                raise ValueError(
                    f"Update of {application_id!r} produced a record with id {updated.id!r}"
                )
            return self.replace(updated)

    def get(self, application_id: str) -> LoanApplication:
        """Return the record with this id.

        Raises:
            ApplicationNotFoundError: If no record has that id.
        """
        application = self.find(application_id)
        if application is None:
            raise ApplicationNotFoundError(application_id)
        return application

    def find(self, application_id: Optional[str]) -> Optional[LoanApplication]:
        if application_id is None:
            return None
        with self._lock:
            return self._records.get(application_id)

    def list(self) -> List[LoanApplication]:
        """Return all records, most recently inserted first."""
        with self._lock:
            return list(reversed(self._records.values()))

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, application_id: object) -> bool:
        with self._lock:
            return application_id in self._records

    def __iter__(self) -> Iterator[LoanApplication]:
        return iter(self.list())

    def _persist(self, application: LoanApplication) -> None:
        if self.persist_dir is None:
            return
        path = get_application_json_path(self.persist_dir, application.id)
        if not save_application_json(application, path, overwrite=True):
            logger.error(f"Failed to persist application {application.id} to {path}")
            raise PersistenceError(application.id, path)
