"""Two-step guarded deletion of remote records.

A deletion is requested, confirmed and only then committed against the
remote store. The record store is never edited here: a successful delete
becomes visible when the next snapshot arrives.

The deletion error is cleared by the next deletion action (a new request,
a cancel, or a successful commit).
"""
import dataclasses
import logging
from typing import Optional

from PySide6 import QtCore

from .remote import DEFAULT_COLLECTION, RemoteStoreError
from .session import Session
from ..status import status


@dataclasses.dataclass(frozen=True)
class DeletionRequest:
    """The pending deletion, if any."""
    target_id: Optional[str] = None
    is_pending: bool = False

    @property
    def can_commit(self) -> bool:
        return self.is_pending and self.target_id is not None


class DeletionController(QtCore.QObject):
    """Request, confirm or cancel the deletion of a single record.

    Signals:
        confirmationRequested (str): Ask the confirmation surface to open for a record id.
        confirmationClosed: The request was cancelled or committed.
        deleted (str): The remote store accepted the deletion of a record id.
        errorChanged (str): Emitted with the new error message, or '' when cleared.
    """
    confirmationRequested = QtCore.Signal(str)
    confirmationClosed = QtCore.Signal()
    deleted = QtCore.Signal(str)
    errorChanged = QtCore.Signal(str)

    def __init__(self, session: Session, collection: str = DEFAULT_COLLECTION,
                 parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent=parent)
        self._session = session
        self._collection = collection
        self._request = DeletionRequest()
        self._error = ''

    @property
    def request_state(self) -> DeletionRequest:
        return self._request

    @property
    def is_pending(self) -> bool:
        return self._request.is_pending

    @property
    def error(self) -> str:
        return self._error

    def request(self, record_id: str) -> None:
        """Mark a record for deletion and ask for confirmation. Nothing is deleted yet."""
        if not record_id:
            raise ValueError('A record id is required to request a deletion.')
        self._set_error('')
        self._request = DeletionRequest(target_id=record_id, is_pending=True)
        logging.debug(f'Deletion requested for "{record_id}".')
        self.confirmationRequested.emit(record_id)

    def cancel(self) -> None:
        """Drop the pending request without touching the remote store."""
        self._set_error('')
        if not self._request.is_pending:
            return
        logging.debug(f'Deletion of "{self._request.target_id}" cancelled.')
        self._request = DeletionRequest()
        self.confirmationClosed.emit()

    def commit(self) -> bool:
        """Delete the requested record from the remote store.

        Returns:
            bool: True if the remote store accepted the deletion. False when
            there was nothing to commit, no user is signed in, or the delete
            failed; on failure the request stays pending and ``error`` is set.
        """
        if not self._request.can_commit:
            logging.debug('Commit called without a pending deletion request.')
            return False
        if not self._session.is_authenticated():
            logging.debug('Commit called without a signed-in user.')
            return False

        record_id = self._request.target_id
        try:
            self._delete(record_id)
        except status.DeletionFailedException as ex:
            self._set_error(str(ex))
            return False

        logging.info(f'Deleted "{record_id}" from "{self._collection}".')
        self._request = DeletionRequest()
        self._set_error('')
        self.deleted.emit(record_id)
        self.confirmationClosed.emit()
        return True

    def _delete(self, record_id: str) -> None:
        try:
            self._session.remote.delete_by_key(self._collection, record_id)
        except RemoteStoreError as ex:
            raise status.DeletionFailedException(str(ex)) from ex

    def _set_error(self, message: str) -> None:
        if message == self._error:
            return
        self._error = message
        self.errorChanged.emit(message)
