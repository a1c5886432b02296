"""
Core package for ExpenseFeed providing the live-collection machinery.

This package includes:

- :mod:`ExpenseFeed.core.remote` – Remote store interface, subscriptions, equality constraints and an in-memory store.
- :mod:`ExpenseFeed.core.session` – Explicit session context carrying the store handle and the signed-in user.
- :mod:`ExpenseFeed.core.criteria` – Period and category criteria that select the active subscription.
- :mod:`ExpenseFeed.core.store` – Record parsing and the in-memory record store.
- :mod:`ExpenseFeed.core.sync` – Subscription lifecycle and snapshot application.
- :mod:`ExpenseFeed.core.deletion` – Two-step guarded deletion against the remote store.
"""
