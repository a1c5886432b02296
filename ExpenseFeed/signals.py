"""Application-wide Qt signals for ExpenseFeed.

Controllers carry their own per-instance signals; this bus only broadcasts
concerns that are not owned by a single controller: user-visible errors and
configuration changes.
"""
from PySide6 import QtCore


class Signals(QtCore.QObject):
    """Centralized Qt signals for application config and error events."""
    configSectionChanged = QtCore.Signal(str)

    error = QtCore.Signal(str)


signals = Signals()
