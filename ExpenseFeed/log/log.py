"""Root logger configuration for ExpenseFeed.

Records go to stdout (optional) and to a bounded in-memory :class:`TankHandler`
that can be queried by level, e.g. to show recent sync or deletion failures.
Qt's own diagnostics are forwarded into the same loggers.
"""
import collections
import logging
import sys

from PySide6.QtCore import QtMsgType, qInstallMessageHandler

LOG_LEVEL = logging.INFO
LOG_FORMAT = '[%(asctime)s] <%(module)s> %(levelname)s:  %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'

TANK_CAPACITY = 1000

VALID_LEVELS = (
    logging.DEBUG,
    logging.INFO,
    logging.WARNING,
    logging.ERROR,
    logging.CRITICAL,
)

QT_LEVELS = {
    QtMsgType.QtDebugMsg: logging.DEBUG,
    QtMsgType.QtInfoMsg: logging.INFO,
    QtMsgType.QtWarningMsg: logging.WARNING,
    QtMsgType.QtCriticalMsg: logging.ERROR,
    QtMsgType.QtFatalMsg: logging.CRITICAL,
}


class TankHandler(logging.Handler):
    """Keeps the most recent formatted records in memory.

    Attributes:
        tank (collections.deque[tuple[int, str]]): ``(levelno, message)`` pairs,
            oldest first. Holds at most ``capacity`` entries.
    """

    def __init__(self, capacity=TANK_CAPACITY):
        super().__init__()
        self.tank = collections.deque(maxlen=capacity)

    def emit(self, record):
        try:
            self.tank.append((record.levelno, self.format(record)))
        except Exception:
            self.handleError(record)

    def get_logs(self, level=logging.NOTSET):
        """Formatted messages at ``level`` or above, oldest first."""
        return [msg for levelno, msg in self.tank if levelno >= level]

    def clear_logs(self):
        self.tank.clear()


def get_tank_handler():
    """The :class:`TankHandler` on the root logger, or None if logging is not set up."""
    for handler in logging.getLogger().handlers:
        if isinstance(handler, TankHandler):
            return handler
    return None


def set_logging_level(level):
    """Apply ``level`` to the root logger and all of its handlers.

    Raises:
        ValueError: ``level`` is not one of the standard integer levels.
    """
    if not isinstance(level, int) or level not in VALID_LEVELS:
        raise ValueError(f'Invalid logging level {level!r}. Use a standard level such as logging.DEBUG.')

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers:
        handler.setLevel(level)


def qt_message_handler(mode, context, message):
    """Forward a Qt diagnostic to the ``Qt`` logger. A fatal message exits."""
    level = QT_LEVELS.get(mode, logging.WARNING)
    logging.getLogger('Qt').log(level, message.strip())
    if mode == QtMsgType.QtFatalMsg:
        sys.exit(1)


def setup_logging(enable_stream_handler=True, enable_qt_handler=True, log_level=LOG_LEVEL):
    """Replace the root logger's handlers with ExpenseFeed's.

    Args:
        enable_stream_handler (bool): Also write records to stdout.
        enable_qt_handler (bool): Install :func:`qt_message_handler`.
        log_level (int): Level for the root logger and each handler.
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)
    handlers = [TankHandler()]
    if enable_stream_handler:
        handlers.insert(0, logging.StreamHandler(sys.stdout))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(log_level)
        root_logger.addHandler(handler)

    if enable_qt_handler:
        qInstallMessageHandler(qt_message_handler)
