"""Search, sort and paginate transforms over the synced record set.

Every function here is pure: the rows to render depend only on the records
and the :class:`ViewState`, and the input is never modified. The chain runs
search, then sort, then paginate:

    page = apply(store.records(), ViewState(search_term='food'))

"""
import dataclasses
import decimal
import enum
import functools
import math
from typing import Callable, Dict, List, Sequence, Tuple

from ..core.store import Record
from ..settings import locale as locale_lib


class SortField(enum.StrEnum):
    Date = 'date'
    Amount = 'amount'
    Category = 'category'


class SortDirection(enum.StrEnum):
    Ascending = 'asc'
    Descending = 'desc'


DEFAULT_PAGE_SIZE: int = 10


@dataclasses.dataclass(frozen=True)
class ViewState:
    """Transient presentation state. Never affects the remote subscription."""
    search_term: str = ''
    sort_field: str = SortField.Date.value
    sort_direction: str = SortDirection.Descending.value
    page_size: int = DEFAULT_PAGE_SIZE
    current_page: int = 1

    def __post_init__(self) -> None:
        if isinstance(self.page_size, bool) or not isinstance(self.page_size, int) or self.page_size < 1:
            raise ValueError(f'page_size must be a positive integer, got {self.page_size!r}.')
        if isinstance(self.current_page, bool) or not isinstance(self.current_page, int) or self.current_page < 1:
            raise ValueError(f'current_page must be a positive integer, got {self.current_page!r}.')
        if self.sort_direction not in tuple(SortDirection):
            raise ValueError(f'sort_direction must be one of {list(SortDirection)}, got {self.sort_direction!r}.')

    def replace(self, **changes) -> 'ViewState':
        return dataclasses.replace(self, **changes)


@dataclasses.dataclass(frozen=True)
class Page:
    """One page of the searched and sorted rows."""
    rows: Tuple[Record, ...]
    page: int
    page_count: int
    total: int

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.page_count


def amount_to_text(amount: float) -> str:
    """Render an amount the way it is matched by search.

    Uses the shortest digits that round-trip the float. Whole numbers have no
    fractional part (``7``), others keep their significant digits (``12.5``).
    Exponent notation is used only below ``1e-6`` or from ``1e21`` up, with
    an explicit sign and no zero padding (``1e-7``, ``1e+21``).
    """
    value = decimal.Decimal(repr(float(amount))).normalize()
    sign, digit_tuple, exponent = value.as_tuple()
    digits = ''.join(str(d) for d in digit_tuple)
    k = len(digits)
    # Position of the decimal point relative to the first digit
    n = exponent + k
    prefix = '-' if sign and value else ''

    if k <= n <= 21:
        text = digits + '0' * (n - k)
    elif 0 < n <= 21:
        text = f'{digits[:n]}.{digits[n:]}'
    elif -6 < n <= 0:
        text = f'0.{"0" * -n}{digits}'
    else:
        mantissa = digits if k == 1 else f'{digits[0]}.{digits[1:]}'
        text = f'{mantissa}e{"+" if n - 1 >= 0 else "-"}{abs(n - 1)}'
    return prefix + text


def search(records: Sequence[Record], term: str) -> List[Record]:
    """Keep records whose description, category or amount contains ``term``.

    Matching is case-insensitive. An empty term keeps everything. Order is
    preserved.
    """
    if not term:
        return list(records)

    needle = term.lower()
    return [
        r for r in records
        if needle in r.description.lower()
        or needle in r.category.lower()
        or needle in amount_to_text(r.amount)
    ]


def _category_key(locale: str) -> Callable[[Record], object]:
    collator = locale_lib.get_collator(locale)
    to_key = functools.cmp_to_key(collator.compare)
    return lambda r: to_key(r.category)


_SORT_KEYS: Dict[str, Callable[[str], Callable[[Record], object]]] = {
    SortField.Date.value: lambda _: (lambda r: r.date),
    SortField.Amount.value: lambda _: (lambda r: r.amount),
    SortField.Category.value: _category_key,
}


def sort(records: Sequence[Record], field: str, direction: str,
         locale: str = locale_lib.DEFAULT_LOCALE) -> List[Record]:
    """Stable sort by ``field``.

    Descending puts the most recent date, the largest amount or the last
    category in collation order first. Records comparing equal keep their
    input order in both directions. An unknown field leaves the order as is.
    """
    make_key = _SORT_KEYS.get(field)
    if make_key is None:
        return list(records)
    return sorted(records, key=make_key(locale), reverse=direction == SortDirection.Descending)


def page_count(total: int, page_size: int) -> int:
    if page_size < 1:
        raise ValueError(f'page_size must be a positive integer, got {page_size!r}.')
    return math.ceil(total / page_size)


def paginate(records: Sequence[Record], page_size: int, page: int) -> Tuple[Record, ...]:
    """Return the 1-based ``page`` of ``records``."""
    if page_size < 1:
        raise ValueError(f'page_size must be a positive integer, got {page_size!r}.')
    start = (page - 1) * page_size
    if start < 0:
        return ()
    return tuple(records[start:start + page_size])


def clamp_page(page: int, count: int) -> int:
    """Clamp a page number into ``1..count``; page 1 is always valid."""
    return max(1, min(page, max(count, 1)))


def next_page(page: int, count: int) -> int:
    return clamp_page(page + 1, count)


def previous_page(page: int) -> int:
    return max(page - 1, 1)


def apply(records: Sequence[Record], state: ViewState,
          locale: str = locale_lib.DEFAULT_LOCALE) -> Page:
    """Run search, sort and paginate for one view state."""
    found = search(records, state.search_term)
    ordered = sort(found, state.sort_field, state.sort_direction, locale=locale)
    return Page(
        rows=paginate(ordered, state.page_size, state.current_page),
        page=state.current_page,
        page_count=page_count(len(found), state.page_size),
        total=len(found),
    )
