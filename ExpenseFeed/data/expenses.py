"""The expense list controller.

:class:`ExpenseList` owns the criteria, record store, sync controller,
deletion controller and exporter for one session, holds the transient view
state, and serves the page of rows to render. It is the data contract the
presentational widgets (filter and sort selectors, confirmation dialog,
table) talk to.
"""
import logging
import pathlib
from typing import Any, Optional, Tuple

from PySide6 import QtCore

from . import pipeline
from .export import Exporter
from ..core.criteria import CriteriaModel
from ..core.deletion import DeletionController
from ..core.session import Session
from ..core.store import Record, RecordStore
from ..core.sync import SyncController
from ..settings import lib


class ExpenseList(QtCore.QObject):
    """Live, filtered, searched, sorted and paginated view of a user's expenses.

    Signals:
        viewChanged: Anything affecting the rendered rows or status flags changed.
    """
    viewChanged = QtCore.Signal()

    def __init__(self, session: Session, settings: Optional[lib.SettingsAPI] = None,
                 parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent=parent)
        settings = settings or lib.settings

        remote_cfg = settings.get_section('remote')
        view_cfg = settings.get_section('view')
        locale_cfg = settings.get_section('locale')
        export_cfg = settings.get_section('export')

        self._session = session
        self._locale: str = locale_cfg['locale']

        self.criteria = CriteriaModel(parent=self)
        self.store = RecordStore(parent=self)
        self.sync = SyncController(session, self.criteria, self.store,
                                   collection=remote_cfg['collection'], parent=self)
        self.deletion = DeletionController(session, collection=remote_cfg['collection'], parent=self)
        self.exporter = Exporter(
            locale=self._locale,
            date_format=locale_cfg['date_format'],
            filename_prefix=export_cfg['filename_prefix'],
            parent=self,
        )
        self._export_dir: pathlib.Path = settings.export_dir

        self._state = pipeline.ViewState(
            sort_field=view_cfg['sort_field'],
            sort_direction=view_cfg['sort_direction'],
            page_size=view_cfg['page_size'],
        )
        self._cache: Optional[Tuple[Tuple[int, pipeline.ViewState], pipeline.Page]] = None

        self._connect_signals()

    def _connect_signals(self) -> None:
        self.store.recordsChanged.connect(self.viewChanged)
        self.store.recordsChanged.connect(self._clamp_page)
        self.sync.loadingChanged.connect(self.viewChanged)
        self.sync.errorChanged.connect(self.viewChanged)
        self.deletion.errorChanged.connect(self.viewChanged)
        self.criteria.criteriaChanged.connect(self._reset_page)

    def start(self) -> None:
        self.sync.start()

    def stop(self) -> None:
        self.sync.stop()

    # Status

    @property
    def loading(self) -> bool:
        return self.sync.loading

    @property
    def error(self) -> str:
        """The deletion error if there is one, else the sync error."""
        return self.deletion.error or self.sync.error

    @property
    def is_empty(self) -> bool:
        return self.store.is_empty()

    # Criteria

    def set_criteria(self, **kwargs: Any) -> bool:
        return self.criteria.set_criteria(**kwargs)

    # View state

    @property
    def view_state(self) -> pipeline.ViewState:
        return self._state

    def _set_state(self, state: pipeline.ViewState) -> None:
        if state == self._state:
            return
        self._state = state
        self.viewChanged.emit()

    def set_search_term(self, term: str) -> None:
        term = term or ''
        if term == self._state.search_term:
            return
        self._set_state(self._state.replace(search_term=term, current_page=1))

    def set_sort(self, field: str, direction: str) -> None:
        self._set_state(self._state.replace(sort_field=field, sort_direction=direction))

    def set_page(self, page: int) -> None:
        self._set_state(self._state.replace(current_page=pipeline.clamp_page(page, self.page_count())))

    def next_page(self) -> None:
        self._set_state(self._state.replace(
            current_page=pipeline.next_page(self._state.current_page, self.page_count())))

    def previous_page(self) -> None:
        self._set_state(self._state.replace(current_page=pipeline.previous_page(self._state.current_page)))

    def _reset_page(self) -> None:
        self._set_state(self._state.replace(current_page=1))

    def _clamp_page(self) -> None:
        # The record set can shrink under the current page
        self.set_page(self._state.current_page)

    # Rows

    def page(self) -> pipeline.Page:
        """The current page, recomputed when the records or the view state change."""
        key = (self.store.version, self._state)
        if self._cache is not None and self._cache[0] == key:
            return self._cache[1]
        page = pipeline.apply(self.store.records(), self._state, locale=self._locale)
        self._cache = (key, page)
        return page

    def rows(self) -> Tuple[Record, ...]:
        return self.page().rows

    def page_count(self) -> int:
        return self.page().page_count

    def can_go_next(self) -> bool:
        return self._state.current_page < self.page_count()

    def can_go_previous(self) -> bool:
        return self._state.current_page > 1

    # Deletion

    def request_delete(self, record_id: str) -> None:
        self.deletion.request(record_id)

    def confirm_delete(self) -> bool:
        return self.deletion.commit()

    def cancel_delete(self) -> None:
        self.deletion.cancel()

    # Export

    def can_export(self) -> bool:
        return self.exporter.can_export(self.store.records())

    def export(self, directory=None) -> Optional[pathlib.Path]:
        """Export every synced record, not just the visible page."""
        directory = directory or self._export_dir
        logging.debug(f'Exporting to {directory}')
        return self.exporter.export(self.store.records(), directory)
