"""Subscription lifecycle and snapshot application.

:class:`SyncController` keeps at most one live subscription open against the
remote store, built from the signed-in user and the active criteria. Each
incoming snapshot replaces the record store wholesale.

Subscriptions are asynchronous and may race with criteria changes. Every
callback is bound to the generation that was current when its subscription
was opened; releasing a subscription advances the generation, so late
callbacks from a superseded subscription are ignored at apply time.
"""
import functools
import logging
from typing import Optional

from PySide6 import QtCore

from .criteria import CriteriaModel
from .remote import DEFAULT_COLLECTION, RemoteStoreError, Snapshot, Subscription
from .session import Session
from .store import RecordStore, parse_snapshot
from ..status import status


class SyncController(QtCore.QObject):
    """Mirror the remote records matching the active criteria into a RecordStore.

    Signals:
        loadingChanged (bool): Emitted when the loading state flips.
        errorChanged (str): Emitted with the new error message, or '' when cleared.
        snapshotApplied (int): Emitted with the record count after a snapshot was applied.
    """
    loadingChanged = QtCore.Signal(bool)
    errorChanged = QtCore.Signal(str)
    snapshotApplied = QtCore.Signal(int)

    def __init__(
            self,
            session: Session,
            criteria: CriteriaModel,
            store: RecordStore,
            collection: str = DEFAULT_COLLECTION,
            parent: Optional[QtCore.QObject] = None,
    ) -> None:
        super().__init__(parent=parent)
        self._session = session
        self._criteria = criteria
        self._store = store
        self._collection = collection

        self._subscription: Optional[Subscription] = None
        self._generation = 0
        self._running = False

        self._loading = True
        self._error = ''

        self._connect_signals()

    def _connect_signals(self) -> None:
        self._session.userChanged.connect(self.refresh)
        self._criteria.criteriaChanged.connect(self.refresh)

    @property
    def collection(self) -> str:
        return self._collection

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> str:
        return self._error

    @property
    def generation(self) -> int:
        return self._generation

    def is_running(self) -> bool:
        return self._running

    def is_subscribed(self) -> bool:
        return self._subscription is not None and self._subscription.active

    def start(self) -> None:
        """Begin mirroring; opens a subscription when a user is signed in."""
        self._running = True
        self.refresh()

    def stop(self) -> None:
        """Release the subscription. No snapshot is applied after this returns."""
        self._running = False
        self._release()

    def refresh(self, *args) -> None:
        """Replace the active subscription with one for the current user and criteria."""
        if not self._running:
            return

        self._release()

        user_id = self._session.current_user_id()
        if not user_id:
            logging.debug('No signed-in user; not subscribing.')
            self._store.clear()
            self._set_loading(True)
            return

        self._set_loading(True)
        constraints = self._criteria.constraints(user_id)
        generation = self._generation
        callback = functools.partial(self._on_snapshot, generation)

        logging.info(f'Subscribing to "{self._collection}" with {self._criteria.as_dict()}')
        try:
            subscription = self._subscribe(constraints, callback)
        except status.SubscriptionFailedException as ex:
            self._set_error(str(ex))
            self._set_loading(False)
            return

        if generation != self._generation:
            # A synchronous callback re-entered and superseded this subscription
            subscription.unsubscribe()
            return
        self._subscription = subscription

    def _subscribe(self, constraints, callback) -> Subscription:
        try:
            return self._session.remote.subscribe(self._collection, constraints, callback)
        except RemoteStoreError as ex:
            raise status.SubscriptionFailedException(str(ex)) from ex

    def _release(self) -> None:
        self._generation += 1
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def _on_snapshot(self, generation: int, snapshot: Snapshot) -> None:
        if generation != self._generation:
            logging.debug(f'Ignoring snapshot from stale subscription (generation {generation}).')
            return

        try:
            records = parse_snapshot(snapshot)
        except status.SnapshotInvalidException as ex:
            # Keep the previous contents
            self._set_error(str(ex))
            self._set_loading(False)
            return

        self._store.replace(records)
        self._set_error('')
        self._set_loading(False)
        self.snapshotApplied.emit(len(records))

    def _set_loading(self, value: bool) -> None:
        if value == self._loading:
            return
        self._loading = value
        self.loadingChanged.emit(value)

    def _set_error(self, message: str) -> None:
        if message == self._error:
            return
        self._error = message
        self.errorChanged.emit(message)
