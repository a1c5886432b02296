"""
ExpenseFeed data package: view pipeline, export and Qt models.

This package provides:

- :mod:`ExpenseFeed.data.pipeline` – Pure search, sort and paginate transforms over synced records.
- :mod:`ExpenseFeed.data.export` – CSV serialization of the synced record set.
- :mod:`ExpenseFeed.data.expenses` – :class:`ExpenseFeed.data.expenses.ExpenseList`, the controller wiring sync, view state, deletion and export together.
- :mod:`ExpenseFeed.data.model` – Qt table model exposing the rows of the current page.
"""
