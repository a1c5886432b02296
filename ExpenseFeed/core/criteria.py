"""Filter criteria that select which remote records are subscribed to."""
import datetime
import logging
from typing import Any, Dict, List, Optional, Union

from PySide6 import QtCore

from .remote import Constraint
from .store import Field

ALL: str = 'all'

Month = Union[int, str]


def _check_month(value: Month) -> Month:
    if value == ALL:
        return ALL
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 12:
        raise ValueError(f'Month must be 1-12 or "{ALL}", got {value!r}.')
    return value


def _check_year(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f'Year must be an integer, got {value!r}.')
    return value


def _check_category(value: str) -> str:
    if not isinstance(value, str) or not value:
        raise ValueError(f'Category must be a non-empty string or "{ALL}", got {value!r}.')
    return value


class CriteriaModel(QtCore.QObject):
    """Active period and category filter.

    Any change to a field emits ``criteriaChanged`` once; setting a field to
    its current value emits nothing.
    """
    criteriaChanged = QtCore.Signal()

    def __init__(self, month: Optional[Month] = None, year: Optional[int] = None,
                 category: str = ALL, parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent=parent)
        today = datetime.date.today()
        self._month: Month = _check_month(today.month if month is None else month)
        self._year: int = _check_year(today.year if year is None else year)
        self._category: str = _check_category(category)

    def __repr__(self) -> str:
        return f'<CriteriaModel month={self._month} year={self._year} category={self._category}>'

    @property
    def month(self) -> Month:
        return self._month

    @month.setter
    def month(self, value: Month) -> None:
        self.set_criteria(month=value)

    @property
    def year(self) -> int:
        return self._year

    @year.setter
    def year(self, value: int) -> None:
        self.set_criteria(year=value)

    @property
    def category(self) -> str:
        return self._category

    @category.setter
    def category(self, value: str) -> None:
        self.set_criteria(category=value)

    def set_criteria(self, **kwargs: Any) -> bool:
        """Update one or more of ``month``, ``year`` and ``category``.

        All values are validated before any is applied.

        Returns:
            bool: True if anything changed.

        Raises:
            ValueError: On an unknown key or an invalid value.
        """
        unknown = set(kwargs) - {'month', 'year', 'category'}
        if unknown:
            raise ValueError(f'Unknown criteria: {sorted(unknown)}')

        month = _check_month(kwargs['month']) if 'month' in kwargs else self._month
        year = _check_year(kwargs['year']) if 'year' in kwargs else self._year
        category = _check_category(kwargs['category']) if 'category' in kwargs else self._category

        if (month, year, category) == (self._month, self._year, self._category):
            return False

        self._month, self._year, self._category = month, year, category
        logging.debug(f'Criteria changed: {self.as_dict()}')
        self.criteriaChanged.emit()
        return True

    def as_dict(self) -> Dict[str, Any]:
        return {'month': self._month, 'year': self._year, 'category': self._category}

    def constraints(self, user_id: str) -> List[Constraint]:
        """Build the equality constraints for a subscription.

        Owner and year are always constrained; month and category only when
        not set to ``"all"``.
        """
        constraints = [
            Constraint(Field.Owner.value, user_id),
            Constraint(Field.Year.value, self._year),
        ]
        if self._month != ALL:
            constraints.append(Constraint(Field.Month.value, self._month))
        if self._category != ALL:
            constraints.append(Constraint(Field.Category.value, self._category))
        return constraints
