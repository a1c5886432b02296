"""
ExpenseFeed: live, filterable, searchable, sortable and exportable expense list.

This package provides:

- :mod:`ExpenseFeed.core` – Remote store subscriptions, criteria, the record store, sync and guarded deletion.
- :mod:`ExpenseFeed.data` – The view pipeline (search, sort, paginate), CSV export, the :class:`ExpenseFeed.data.expenses.ExpenseList` controller and its Qt table model.
- :mod:`ExpenseFeed.settings` – Settings management with schema validation, and locale helpers.
- :mod:`ExpenseFeed.status` – Status codes and the exceptions raised at controller boundaries.
- :mod:`ExpenseFeed.log` – In-app logging with an in-memory log tank.

Wire a list up with a remote store and a session::

    from ExpenseFeed.core.remote import InMemoryRemoteStore
    from ExpenseFeed.core.session import Session
    from ExpenseFeed.data.expenses import ExpenseList

    session = Session(InMemoryRemoteStore(), user_id='u1')
    expenses = ExpenseList(session)
    expenses.start()
"""

import sys

# Fail on Python < 3.11
if not (sys.version_info.major == 3 and sys.version_info.minor >= 11):
    raise RuntimeError('ExpenseFeed requires Python 3.11 or higher.')

__version__ = '0.1.0'
__license__ = 'GPL-3.0'
__description__ = 'ExpenseFeed: live, filterable and exportable expense list backed by a subscribable store.'

from .log import log

log.setup_logging()
