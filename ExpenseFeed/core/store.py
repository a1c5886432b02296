"""Expense records and the in-memory record store.

Records are only ever built from remote snapshots; the store mirrors the
latest applied snapshot and never originates or edits a record itself.
"""
import datetime
import enum
import logging
import math
from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import pandas as pd
from PySide6 import QtCore

from .remote import Snapshot
from ..status import status


class Field(enum.StrEnum):
    """Field keys of a record as stored remotely."""
    Owner = 'owner_id'
    Year = 'year'
    Month = 'month'
    Category = 'category'
    Date = 'date'
    Amount = 'amount'
    Description = 'description'


RECORD_COLUMNS: List[str] = ['id', 'date', 'amount', 'description', 'category', 'month', 'year', 'owner_id']


@dataclass(frozen=True)
class Record:
    """A single expense entry."""
    id: str
    amount: float
    description: str
    category: str
    date: datetime.date
    month: Optional[int] = None
    year: Optional[int] = None
    owner_id: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def parse_date(value: Any) -> datetime.date:
    """Convert a remote date value to a calendar date.

    Accepts ``datetime.date``, ``datetime.datetime`` (including
    ``pandas.Timestamp``) and ISO 8601 date or date-time strings.

    Raises:
        ValueError: If the value is missing or cannot be read as a date.
    """
    if value is None:
        raise ValueError('date is missing')
    if isinstance(value, datetime.datetime):
        if pd.isna(value):
            raise ValueError('date is missing')
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError('date is empty')
        try:
            return datetime.datetime.fromisoformat(text).date()
        except ValueError:
            raise ValueError(f'"{value}" is not a valid date') from None
    raise ValueError(f'{type(value).__name__} is not a valid date type')


def parse_amount(value: Any) -> float:
    """Convert a remote amount to a non-negative float.

    Raises:
        ValueError: If the value is missing, non-numeric, NaN, infinite or negative.
    """
    if value is None or isinstance(value, bool):
        raise ValueError(f'amount {value!r} is not a number')
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValueError(f'amount {value!r} is not a number') from None
    if math.isnan(amount) or math.isinf(amount):
        raise ValueError(f'amount {value!r} is not a finite number')
    if amount < 0:
        raise ValueError(f'amount {value!r} is negative')
    return amount


def _optional_int(fields: Dict[str, Any], key: str) -> Optional[int]:
    value = fields.get(key)
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_record(key: str, fields: Dict[str, Any]) -> Record:
    """Build a record from a snapshot entry.

    Args:
        key: The store-assigned record identifier.
        fields: The record's field values.

    Returns:
        Record: The parsed record.

    Raises:
        ValueError: If the entry is malformed.
    """
    if not key:
        raise ValueError('record has no identifier')
    if not isinstance(fields, dict):
        raise ValueError(f'record "{key}" has no fields')

    try:
        date = parse_date(fields.get(Field.Date.value))
        amount = parse_amount(fields.get(Field.Amount.value))
    except ValueError as ex:
        raise ValueError(f'record "{key}": {ex}') from None

    description = fields.get(Field.Description.value)
    category = fields.get(Field.Category.value)
    owner = fields.get(Field.Owner.value)

    return Record(
        id=str(key),
        amount=amount,
        description='' if description is None else str(description),
        category='' if category is None else str(category),
        date=date,
        month=_optional_int(fields, Field.Month.value),
        year=_optional_int(fields, Field.Year.value),
        owner_id=None if owner is None else str(owner),
    )


def parse_snapshot(snapshot: Snapshot) -> List[Record]:
    """Convert a full snapshot into records in canonical order.

    The canonical order is date descending; records sharing a date keep
    their snapshot order. Conversion is all-or-nothing.

    Raises:
        status.SnapshotInvalidException: If any entry is malformed.
    """
    records: List[Record] = []
    for n, entry in enumerate(snapshot):
        try:
            key, fields = entry
            records.append(parse_record(key, fields))
        except (TypeError, ValueError) as ex:
            raise status.SnapshotInvalidException(f'Entry {n}: {ex}') from ex

    return sorted(records, key=lambda r: r.date, reverse=True)


class RecordStore(QtCore.QObject):
    """Holds the full record set for the active criteria.

    Contents are replaced wholesale. ``version`` increases with every
    replacement and can key caches of derived views.

    Signals:
        recordsChanged: Emitted after the contents were replaced or cleared.
    """
    recordsChanged = QtCore.Signal()

    def __init__(self, parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent=parent)
        self._records: Tuple[Record, ...] = ()
        self._version = 0

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self._records)

    @property
    def version(self) -> int:
        return self._version

    def records(self) -> Tuple[Record, ...]:
        return self._records

    def is_empty(self) -> bool:
        return not self._records

    def get(self, record_id: str) -> Optional[Record]:
        return next((r for r in self._records if r.id == record_id), None)

    def replace(self, records: Sequence[Record]) -> None:
        self._records = tuple(records)
        self._version += 1
        logging.debug(f'Record store replaced: {len(self._records)} record(s), version {self._version}.')
        self.recordsChanged.emit()

    def clear(self) -> None:
        if not self._records:
            return
        self.replace(())

    def to_frame(self) -> pd.DataFrame:
        """Return the records as a DataFrame, in store order."""
        if not self._records:
            return pd.DataFrame(columns=RECORD_COLUMNS)
        return pd.DataFrame([r.as_dict() for r in self._records], columns=RECORD_COLUMNS)
