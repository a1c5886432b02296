"""CSV export of the synced record set.

The export covers every record in the store, in store order, regardless of
the current search, sort or page. Dates are rendered with babel for the
configured locale, amounts with exactly two decimals, and text fields as-is.
Fields holding a delimiter, quote or line break are quoted the usual CSV way.
"""
import csv
import datetime
import logging
import pathlib
from typing import Optional, Sequence

import pandas as pd
from PySide6 import QtCore

from ..core.store import Record
from ..settings import lib
from ..settings import locale as locale_lib
from ..status import status

DEFAULT_DATE_FORMAT: str = 'd-M-yyyy'
DEFAULT_FILENAME_PREFIX: str = 'expenses'


def to_frame(records: Sequence[Record], locale: str = locale_lib.DEFAULT_LOCALE,
             date_format: str = DEFAULT_DATE_FORMAT) -> pd.DataFrame:
    """Return the export table with every cell already rendered as text."""
    rows = [
        [
            locale_lib.format_date(r.date, locale, date_format),
            f'{r.amount:.2f}',
            r.description,
            r.category,
        ]
        for r in records
    ]
    return pd.DataFrame(rows, columns=lib.EXPORT_COLUMNS, dtype=object)


def to_csv(records: Sequence[Record], locale: str = locale_lib.DEFAULT_LOCALE,
           date_format: str = DEFAULT_DATE_FORMAT) -> str:
    """Serialize records to CSV text.

    Returns:
        str: Header plus one line per record joined by ``\\n`` with no trailing
        newline, or an empty string when there are no records.
    """
    if not records:
        return ''

    text = to_frame(records, locale, date_format).to_csv(
        index=False,
        lineterminator='\n',
        quoting=csv.QUOTE_MINIMAL,
    )
    return text[:-1] if text.endswith('\n') else text


def export_filename(prefix: str = DEFAULT_FILENAME_PREFIX, today: Optional[datetime.date] = None) -> str:
    """Name of the export artifact, e.g. ``expenses_2024-01-31.csv``."""
    today = today or datetime.date.today()
    return f'{prefix}_{today.isoformat()}.csv'


class Exporter(QtCore.QObject):
    """Writes the record set to a dated CSV file.

    Signals:
        exported (str): Emitted with the path of the written file.
    """
    exported = QtCore.Signal(str)

    def __init__(
            self,
            locale: str = locale_lib.DEFAULT_LOCALE,
            date_format: str = DEFAULT_DATE_FORMAT,
            filename_prefix: str = DEFAULT_FILENAME_PREFIX,
            parent: Optional[QtCore.QObject] = None,
    ) -> None:
        super().__init__(parent=parent)
        self.locale = locale
        self.date_format = date_format
        self.filename_prefix = filename_prefix

    @staticmethod
    def can_export(records: Sequence[Record]) -> bool:
        return len(records) > 0

    def to_csv(self, records: Sequence[Record]) -> str:
        return to_csv(records, self.locale, self.date_format)

    def export(self, records: Sequence[Record], directory, today: Optional[datetime.date] = None
               ) -> Optional[pathlib.Path]:
        """Write ``records`` to ``<directory>/<prefix>_<date>.csv``.

        Returns:
            pathlib.Path | None: The written file, or None when there was nothing to export.

        Raises:
            status.ExportFailedException: If the file could not be written.
        """
        if not self.can_export(records):
            logging.debug('Nothing to export.')
            return None

        path = pathlib.Path(directory) / export_filename(self.filename_prefix, today)
        text = self.to_csv(records)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding='utf-8', newline='')
        except OSError as ex:
            raise status.ExportFailedException(f'{path}: {ex}') from ex

        logging.info(f'Exported {len(records)} record(s) to {path}')
        self.exported.emit(str(path))
        return path
