import enum
from typing import Any, Optional

from PySide6 import QtCore

from .expenses import ExpenseList
from ..settings import lib
from ..settings import locale


class Columns(enum.IntEnum):
    Date = 0
    Amount = 1
    Description = 2
    Category = 3


RecordIdRole: int = QtCore.Qt.UserRole + 1


class RecordsTableModel(QtCore.QAbstractTableModel):
    """
    RecordsTableModel displays the current page of an ExpenseList as table rows.
    The model is reset whenever the list reports a view change.
    """

    def __init__(self, expenses: ExpenseList, parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent=parent)
        self._expenses = expenses
        self._data = list(expenses.rows())

        self._connect_signals()

    def _connect_signals(self) -> None:
        self._expenses.viewChanged.connect(self.init_data)

    @property
    def expenses(self) -> ExpenseList:
        return self._expenses

    @QtCore.Slot()
    def init_data(self) -> None:
        self.beginResetModel()
        self._data = list(self._expenses.rows())
        self.endResetModel()

    def rowCount(self, parent: QtCore.QModelIndex = QtCore.QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self._data)

    def columnCount(self, parent: QtCore.QModelIndex = QtCore.QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(lib.EXPORT_COLUMNS)

    def data(self, index: QtCore.QModelIndex, role: int = QtCore.Qt.DisplayRole):
        """Returns data for the specified index and role.

        Args:
            index (QtCore.QModelIndex): The model index.
            role (int): The data role.

        Returns:
            Any: Data appropriate for the role, or None.
        """
        if not self._data or not index.isValid():
            return None
        row = index.row()
        col_idx = index.column()
        if row < 0 or row >= self.rowCount():
            return None

        record = self._data[row]

        if role == RecordIdRole:
            return record.id

        if role == QtCore.Qt.EditRole:
            if col_idx == Columns.Date.value:
                return record.date.isoformat()
            if col_idx == Columns.Amount.value:
                return record.amount
            if col_idx == Columns.Description.value:
                return record.description
            if col_idx == Columns.Category.value:
                return record.category
            return None

        if role not in (QtCore.Qt.DisplayRole, QtCore.Qt.StatusTipRole, QtCore.Qt.ToolTipRole):
            return None

        exporter = self._expenses.exporter
        if col_idx == Columns.Date.value:
            return locale.format_date(record.date, exporter.locale, exporter.date_format)
        elif col_idx == Columns.Amount.value:
            return locale.format_currency_value(record.amount, exporter.locale)
        elif col_idx == Columns.Description.value:
            if role == QtCore.Qt.DisplayRole:
                return record.description.split('\n')[0]
            return record.description
        elif col_idx == Columns.Category.value:
            return record.category
        return None

    def headerData(self, section: int, orientation: QtCore.Qt.Orientation,
                   role: int = QtCore.Qt.DisplayRole) -> Any:
        if role != QtCore.Qt.DisplayRole:
            return None
        if orientation == QtCore.Qt.Horizontal:
            if 0 <= section < self.columnCount():
                return lib.EXPORT_COLUMNS[section]
        elif orientation == QtCore.Qt.Vertical:
            page = self._expenses.view_state
            return f'{(page.current_page - 1) * page.page_size + section + 1}'
        return None

    def record_id(self, row: int) -> Optional[str]:
        if 0 <= row < len(self._data):
            return self._data[row].id
        return None
