"""Explicit session context shared by the controllers.

A :class:`Session` carries the remote store handle and the identifier of the
signed-in user. Controllers receive it in their constructor; nothing reads a
global store or user.
"""
import logging
from typing import Optional

from PySide6 import QtCore

from .remote import RemoteStore


class Session(QtCore.QObject):
    """Holds the remote store and the current user identifier.

    Signals:
        userChanged (object): Emitted with the new user id, or None on sign-out.
    """
    userChanged = QtCore.Signal(object)

    def __init__(self, remote: RemoteStore, user_id: Optional[str] = None,
                 parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent=parent)
        self._remote = remote
        self._user_id = user_id or None

    @property
    def remote(self) -> RemoteStore:
        return self._remote

    def current_user_id(self) -> Optional[str]:
        return self._user_id

    def is_authenticated(self) -> bool:
        return self._user_id is not None

    def sign_in(self, user_id: str) -> None:
        if not user_id:
            raise ValueError('A user id is required to sign in.')
        if user_id == self._user_id:
            return
        logging.info(f'Signed in as "{user_id}".')
        self._user_id = user_id
        self.userChanged.emit(user_id)

    def sign_out(self) -> None:
        if self._user_id is None:
            return
        logging.info(f'Signed out "{self._user_id}".')
        self._user_id = None
        self.userChanged.emit(None)
