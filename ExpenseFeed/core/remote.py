"""Remote store interface, subscriptions and an in-memory implementation.

The remote store is treated as an opaque "subscribe with criteria, receive
ordered snapshots" service. A snapshot is the full ordered listing of records
matching a subscription's equality constraints, as ``(key, fields)`` pairs.

:class:`InMemoryRemoteStore` keeps collections in process and pushes a fresh
snapshot to every matching subscription whenever a collection changes. With
``queued=True`` deliveries are posted to the Qt event loop, so they arrive
after the mutating call has returned, the way a networked store behaves.
"""
import functools
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from PySide6 import QtCore

DEFAULT_COLLECTION: str = 'expenses'

SnapshotEntry = Tuple[str, Dict[str, Any]]
Snapshot = List[SnapshotEntry]
SnapshotCallback = Callable[[Snapshot], None]


class RemoteStoreError(Exception):
    """Raised by a remote store when a subscription or mutation fails."""
    pass


@dataclass(frozen=True)
class Constraint:
    """An equality criterion on a single record field."""
    field: str
    value: Any

    def matches(self, fields: Dict[str, Any]) -> bool:
        return self.field in fields and fields[self.field] == self.value


class Subscription:
    """Cancellable handle for a live query.

    Calling :meth:`unsubscribe` releases the subscription; after that
    :meth:`deliver` is a no-op. Releasing twice is harmless.
    """

    def __init__(
            self,
            collection: str,
            constraints: Sequence[Constraint],
            callback: SnapshotCallback,
            disposer: Optional[Callable[['Subscription'], None]] = None,
    ) -> None:
        self.collection = collection
        self.constraints: Tuple[Constraint, ...] = tuple(constraints)
        self.callback = callback
        self._disposer = disposer
        self._active = True

    def __repr__(self) -> str:
        return f'<Subscription {self.collection} {list(self.constraints)} active={self._active}>'

    @property
    def active(self) -> bool:
        return self._active

    def matches(self, fields: Dict[str, Any]) -> bool:
        return all(c.matches(fields) for c in self.constraints)

    def deliver(self, snapshot: Snapshot) -> None:
        if not self._active:
            logging.debug(f'Dropping snapshot for released subscription on "{self.collection}".')
            return
        self.callback(snapshot)

    def unsubscribe(self) -> None:
        if not self._active:
            return
        self._active = False
        if self._disposer is not None:
            self._disposer(self)
        logging.debug(f'Released subscription on "{self.collection}".')


class RemoteStore(QtCore.QObject):
    """Interface of the remote store consumed by the sync and deletion controllers."""

    def subscribe(
            self,
            collection: str,
            constraints: Sequence[Constraint],
            callback: SnapshotCallback,
    ) -> Subscription:
        """Open a live query.

        Args:
            collection: Name of the collection to watch.
            constraints: Equality constraints every delivered record satisfies.
            callback: Called with each snapshot, in emission order.

        Returns:
            Subscription: The handle used to release the query.

        Raises:
            RemoteStoreError: If the query cannot be opened.
        """
        raise NotImplementedError

    def delete_by_key(self, collection: str, key: str) -> None:
        """Delete a record.

        Raises:
            RemoteStoreError: If the record could not be deleted.
        """
        raise NotImplementedError


class InMemoryRemoteStore(RemoteStore):
    """Process-local remote store with live subscriptions.

    Records keep their insertion order; snapshots list matching records in
    that order.
    """
    changed = QtCore.Signal(str)

    def __init__(self, queued: bool = False, parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent=parent)
        self._queued = queued
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._subscriptions: List[Subscription] = []

    @property
    def queued(self) -> bool:
        return self._queued

    def subscriptions(self) -> List[Subscription]:
        """Return the subscriptions currently open on this store."""
        return list(self._subscriptions)

    def query(self, collection: str, constraints: Sequence[Constraint] = ()) -> Snapshot:
        """Return the current snapshot for a collection and constraints."""
        records = self._collections.get(collection, {})
        return [
            (key, dict(fields))
            for key, fields in records.items()
            if all(c.matches(fields) for c in constraints)
        ]

    def add(self, collection: str, key: Optional[str] = None, **fields: Any) -> str:
        """Insert a record and notify subscribers.

        Returns:
            str: The record key, generated when not given.
        """
        key = key or uuid.uuid4().hex
        records = self._collections.setdefault(collection, {})
        if key in records:
            raise RemoteStoreError(f'Record "{key}" already exists in "{collection}".')
        records[key] = dict(fields)
        logging.debug(f'Added record "{key}" to "{collection}".')
        self._notify(collection)
        return key

    def update(self, collection: str, key: str, **fields: Any) -> None:
        """Merge fields into an existing record and notify subscribers."""
        records = self._collections.get(collection, {})
        if key not in records:
            raise RemoteStoreError(f'No record "{key}" in "{collection}".')
        records[key].update(fields)
        self._notify(collection)

    def delete_by_key(self, collection: str, key: str) -> None:
        records = self._collections.get(collection, {})
        if key not in records:
            raise RemoteStoreError(f'No record "{key}" in "{collection}".')
        del records[key]
        logging.debug(f'Deleted record "{key}" from "{collection}".')
        self._notify(collection)

    def subscribe(
            self,
            collection: str,
            constraints: Sequence[Constraint],
            callback: SnapshotCallback,
    ) -> Subscription:
        subscription = Subscription(collection, constraints, callback, disposer=self._dispose)
        self._subscriptions.append(subscription)
        logging.debug(f'Opened subscription on "{collection}" with {len(subscription.constraints)} constraint(s).')
        self._deliver(subscription)
        return subscription

    def _dispose(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    def _notify(self, collection: str) -> None:
        self.changed.emit(collection)
        for subscription in self.subscriptions():
            if subscription.collection == collection:
                self._deliver(subscription)

    def _deliver(self, subscription: Subscription) -> None:
        snapshot = self.query(subscription.collection, subscription.constraints)
        if self._queued:
            QtCore.QTimer.singleShot(0, functools.partial(subscription.deliver, snapshot))
        else:
            subscription.deliver(snapshot)
