"""
Settings package: configuration API and localization helpers.

This package provides:

- :mod:`ExpenseFeed.settings.lib` – Core settings management and schema validation.
- :mod:`ExpenseFeed.settings.locale` – Localization utilities for formatting and collation.
"""
