"""
Logging subsystem.

Modules:

- :mod:`ExpenseFeed.log.log` – Root logger setup, the in-memory tank handler and the Qt message bridge.
"""
