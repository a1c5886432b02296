"""Status definitions and exceptions for ExpenseFeed.

This module provides:
    - Status: enumeration of possible application states
    - STATUS_MESSAGE: user-facing messages for each status
    - get_message: retrieve the message for a status
    - BaseStatusException: base exception carrying a Status
    - Specific exceptions (e.g., SnapshotInvalidException) for error handling in controllers
"""
import enum
import logging
from typing import Dict


class Status(enum.StrEnum):
    """Enumeration of application status codes."""
    UnknownStatus = enum.auto()

    # Config status
    SettingsNotFound = enum.auto()
    SettingsInvalid = enum.auto()

    # Remote store status
    SubscriptionFailed = enum.auto()
    SnapshotInvalid = enum.auto()
    DeletionFailed = enum.auto()

    # Export status
    ExportFailed = enum.auto()


STATUS_MESSAGE: Dict[Status, str] = {
    Status.UnknownStatus: 'Unknown status. Please check the settings.',

    Status.SettingsNotFound: 'Could not find the settings file.',
    Status.SettingsInvalid: 'The settings seem to be incomplete, or contain invalid values.',

    Status.SubscriptionFailed: 'Could not connect to the expense store. Please check your connection.',
    Status.SnapshotInvalid: 'Could not process the incoming expenses.',
    Status.DeletionFailed: 'Could not delete the expense.',

    Status.ExportFailed: 'Could not export the expenses.',
}


def get_message(status: Status) -> str:
    """
    Get the message for a given status.

    Args:
        status (Status): The status enum.

    Returns:
        str: The message associated with the status.
    """
    return STATUS_MESSAGE.get(status, 'Unknown status')


class BaseStatusException(Exception):
    """Base exception for status-based errors in ExpenseFeed.

    Attributes:
        status (Status): Status code associated with this error.
        status_message (str): User-facing message for the status.

    Args:
        message (str): Optional additional context for the error.
    """
    status = Status.UnknownStatus

    def __init__(self, message: str = None):
        self.status_message = get_message(self.status)
        exception_message = f'{self.status_message} {message}' if message else self.status_message
        super().__init__(exception_message)

        logging.error(exception_message)

        from ..signals import signals
        signals.error.emit(message or self.status_message)


class SettingsNotFoundException(BaseStatusException):
    """Exception raised when the settings file cannot be found."""
    status = Status.SettingsNotFound


class SettingsInvalidException(BaseStatusException):
    """Exception raised when the settings are invalid or malformed."""
    status = Status.SettingsInvalid


class SubscriptionFailedException(BaseStatusException):
    """Exception raised when the remote store refuses or fails a subscription."""
    status = Status.SubscriptionFailed


class SnapshotInvalidException(BaseStatusException):
    """Exception raised when an incoming snapshot contains malformed records."""
    status = Status.SnapshotInvalid


class DeletionFailedException(BaseStatusException):
    """Exception raised when the remote store fails to delete a record."""
    status = Status.DeletionFailed


class ExportFailedException(BaseStatusException):
    """Exception raised when the CSV export cannot be written."""
    status = Status.ExportFailed
